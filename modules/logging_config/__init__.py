"""
Logging Configuration Module
============================

Responsibility:
- Root logger setup from the 'logging' config section.
- Colored console output (colorama) and rotating UTF-8 file logs.
"""

from .logging_config import ColoredFormatter, LoggingConfigurator

__all__ = ['ColoredFormatter', 'LoggingConfigurator']
