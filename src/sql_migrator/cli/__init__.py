"""
CLI module.

Provides commands:
- migrate: Apply pending migrations and show status
- status: Show applied/pending migrations
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
