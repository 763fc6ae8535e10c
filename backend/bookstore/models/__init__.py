# bookstore/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- Book: Book listing owned by a User
"""
from .user import User
from .book import Book
