"""
Utilities module for the Content Ranking Engine.
"""
from .logger import logger, init_logging, setup_logging
from .clock import utcnow, whole_hours_between

__all__ = ["logger", "init_logging", "setup_logging", "utcnow", "whole_hours_between"]
