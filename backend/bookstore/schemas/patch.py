# bookstore/schemas/patch.py
"""
Base model for partial-update ("patch") requests.

A field is part of the patch only when the client sent it, even when the
value sent is empty. Defaults on the subclasses exist only so that absent
fields validate; they are never written.
"""
from typing import Any

from pydantic import BaseModel

__all__ = ["PatchModel"]


class PatchModel(BaseModel):
    """Request model whose explicitly sent fields form a changeset."""

    def is_set(self, name: str) -> bool:
        """True if the client sent `name` (whatever its value)."""
        return name in self.model_fields_set

    def changes(self) -> dict[str, Any]:
        """Return only the fields present in the request."""
        return self.model_dump(include=self.model_fields_set)

    def apply_to(self, obj: Any) -> list[str]:
        """
        Overwrite the present fields on `obj`.

        Returns:
            Names of the attributes that were written, in declaration order
        """
        written = []
        for name, value in self.changes().items():
            setattr(obj, name, value)
            written.append(name)
        return written
