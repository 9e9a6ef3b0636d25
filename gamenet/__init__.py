"""Networking toolkit for games: TCP/UDP servers and clients, a relay peer table and helpers."""

__version__ = "0.1.0"