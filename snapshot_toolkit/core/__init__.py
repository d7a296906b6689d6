"""
Core module - Base abstractions and interfaces

Provides foundational components used across the toolkit:
- Interfaces and protocols
- Base exception hierarchy
- Configuration management
- Reference path resolution
"""

from snapshot_toolkit.core.config import (
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
]
