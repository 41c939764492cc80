"""Exceptions shared across modules.

Module-specific "not found" errors subclass ``NotFound`` so callers that
only care about the 404 category can catch them together.
"""

from __future__ import annotations


class NotFound(Exception):
    """A referenced order, product or category identifier does not exist."""
