"""Zappy game server: world rules, client sessions and a TCP front end."""

__version__ = "0.1.0"
__all__ = ["__version__"]