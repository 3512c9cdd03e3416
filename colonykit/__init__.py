"""Data model for a tile-based colony simulation: variants, assets, bodies, buildings, power and settings."""

__version__ = "0.1.0"
__all__ = ["assets", "body", "buildings", "jsonio", "power", "serialization", "settings"]