"""Shared SQLAlchemy models registry for the workspace database.

Currently holds the biller mapping table read by ``expense_extraction``.
"""

from .mappings import Base, BillerMappingRow

__all__ = [
    "Base",
    "BillerMappingRow",
]
