"""Configuration module using Pydantic Settings.

Usage:
    from recordcopy.config import CopySettings

    settings = CopySettings(max_concurrent=8)
"""

from recordcopy.config.settings import CopySettings

__all__ = [
    "CopySettings",
]
