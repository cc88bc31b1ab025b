# src/fxsync/config/__init__.py
"""
Configuration Module

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables and an optional .env file.
"""

from fxsync.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
