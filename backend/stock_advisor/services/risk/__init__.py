"""
Risk Assessment Service

CONTRACT:
    Input:  ticker
    Output: MarketData (with RiskFlag list and risk score)

RESPONSIBILITIES:
    - Combine quote, profile, financials and earnings per ticker
    - Flag earnings, volatility, low float and valuation risk
    - Flag sector concentration across a portfolio
    - Score headline sentiment

All rules are deterministic and auditable.
"""

from stock_advisor.services.risk.service import RiskService, get_risk_service

__all__ = [
    "RiskService",
    "get_risk_service",
]
