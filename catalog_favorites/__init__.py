"""Catalog Favorites API: user accounts and favorite products backed by a remote catalog."""

__version__ = "0.1.0"
