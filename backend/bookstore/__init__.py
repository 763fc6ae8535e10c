# bookstore/__init__.py
"""Bookstore REST backend: users, authentication and per-user book listings."""

__version__ = "1.0.0"
