"""
Local package for the launchbox entrypoint.

This package provides the effective configuration, the process supervisor
and the command console.
"""

from .config import effective_settings

__all__ = ["effective_settings"]
