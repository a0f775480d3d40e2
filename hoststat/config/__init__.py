"""
Configuration parsing module with nginx-like syntax support.
"""

from .lexer import Lexer, LexerError, Token, TokenType
from .loader import ConfigError, ConfigLoader, load_config
from .parser import ConfigParser, ParseError
from .schema import Config, DefaultsConfig, LoggingConfig, OutputConfig, SystemConfig

__all__ = [
    "Lexer",
    "LexerError",
    "Token",
    "TokenType",
    "ConfigParser",
    "ParseError",
    "Config",
    "ConfigError",
    "ConfigLoader",
    "DefaultsConfig",
    "LoggingConfig",
    "OutputConfig",
    "SystemConfig",
    "load_config",
]
