# src/fxsync/__init__.py
"""
fxsync - Currency Conversion and Daily Rate Snapshots

Converts amounts between currencies using Fixer exchange rates, keeps a
daily snapshot of all rates in a relational store, and answers historical
range queries over that store through a Telegram bot.
"""

__version__ = "1.0.0"
