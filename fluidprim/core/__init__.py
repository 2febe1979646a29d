"""Core utilities: precision, errors, status codes, validation, records, traversal."""

from __future__ import annotations

__all__ = [
    "precision",
    "errors",
    "status",
    "validation",
    "records",
    "traversal",
]
