"""PokeArena - Pokemon catalog arena service."""

__version__ = "0.1.0"
