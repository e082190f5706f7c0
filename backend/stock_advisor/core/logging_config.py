"""
Logging setup for the backend.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    # aiohttp access logs are noisy at INFO
    logging.getLogger("aiohttp").setLevel(max(numeric_level, logging.WARNING))
