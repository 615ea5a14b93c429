"""Configuration helpers for formations and runtime settings."""

from .formations import Formation, get_formation, iter_formations
from .settings import Settings, load_settings

__all__ = [
    "Formation",
    "Settings",
    "get_formation",
    "iter_formations",
    "load_settings",
]
