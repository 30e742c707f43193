"""
Vulcan CLI Module.
"""

from .app import app, run_cli

__all__ = ["app", "run_cli"]
