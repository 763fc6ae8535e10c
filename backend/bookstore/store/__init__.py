# bookstore/store/__init__.py
"""
Resource store: the single place where persisted state is read and mutated.

- query: BookQuery, the immutable filter/sort/pagination builder for books
- users: User CRUD, existence checks and credential check
- books: Book CRUD and search

All functions are async and expect Tortoise to be initialised
(see bookstore.core.db.init_db). Point lookups return None when the row does
not exist; driver failures are raised as bookstore.core.errors.StoreError.
"""
