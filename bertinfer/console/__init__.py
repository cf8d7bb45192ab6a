"""Rich, structured console output for bertinfer.

Usage:
    from bertinfer.console import logger

    logger.info("Mapping weights...")
    logger.elapsed("bundle", 0.012)
    logger.predictions([("positive", 0.91), ("neutral", 0.06)])
"""
from bertinfer.console.logger import Logger, get_logger

# Module-level singleton for convenient import
logger = get_logger()

__all__ = ["Logger", "get_logger", "logger"]
