# src/fxsync/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (Fixer API)
- Persistence (relational rate store)
- Telegram (bot interface)
- Formatting (output)
"""

__all__ = []
