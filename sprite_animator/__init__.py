"""Spritesheet animation: animation descriptions, frame caches, iteration and time-driven playback."""

__version__ = "2.1.0"

__all__ = ["animation", "cache", "iterator", "animator"]