"""Core types shared by every layer."""

from .config import Config, ConfigError, load_config
from .errors import ErrorCode
from .logging_config import setup_logging
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    # errors
    "ErrorCode",
    # logging
    "setup_logging",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
