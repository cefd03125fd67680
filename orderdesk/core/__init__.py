"""
OrderDesk Core
==============

Core utilities shared by OrderDesk modules.
"""

from .config import Config, get_config_value
from .logging_service import LoggingService, db_log

__all__ = ['Config', 'get_config_value', 'LoggingService', 'db_log']
