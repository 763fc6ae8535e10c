# bookstore/models/book.py
"""
Database model for books.
A book listing belongs to exactly one user; (user, title) is unique.
"""
from tortoise import fields, models

class Book(models.Model):
    """
    Book database model.

    Relationships:
    - Belongs to a User (many-to-one); cascade delete with the user

    Constraints:
    - (user_id, title) unique
    - price is an integer amount in the minor currency unit, never negative
    """
    id = fields.IntField(pk=True)  # Primary key: generated book identifier
    user = fields.ForeignKeyField(
        "models.User",
        related_name="books",
        on_delete=fields.CASCADE
    )  # Owner; if the user is deleted, their books are deleted
    title = fields.CharField(max_length=512)  # Book title (unique per owner)
    description = fields.TextField(default="")  # Free text description
    price = fields.IntField(default=0)  # Price in cents
    image_url = fields.CharField(max_length=2048, default="")  # Cover image URL (may be empty)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "books"  # Database table name
        unique_together = (("user", "title"),)
