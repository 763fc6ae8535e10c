# bookstore/schemas/__init__.py
"""
Schema module initialization.
Exports all schema classes from submodules for convenient imports.
"""
from .patch import *
from .auth import *
from .user import *
from .book import *
