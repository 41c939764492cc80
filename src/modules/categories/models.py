"""Category model.

Categories form a tree through the optional ``parent`` reference;
``subcategories`` is the derived reverse relation.  Deleting a category
detaches its children and products instead of deleting them.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(max_length=1000, blank=True, default="")
    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="subcategories",
    )

    class Meta:
        db_table = "categories"
        ordering = ["name"]

    def ancestor_ids(self) -> list:
        """Walk up the tree and return the ids of every ancestor."""
        ids = []
        node = self.parent
        while node is not None and node.id not in ids:
            ids.append(node.id)
            node = node.parent
        return ids

    def __str__(self) -> str:
        return self.name
