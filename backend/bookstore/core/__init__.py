# bookstore/core/__init__.py
"""
Core application modules.
Contains the infrastructure shared by the API and the store:
- bootstrap: Default admin creation on first startup
- db: Tortoise ORM configuration and connection management
- errors: Domain errors raised by the store and the validators
- security: Password hashing and JWT issuance/verification
"""
