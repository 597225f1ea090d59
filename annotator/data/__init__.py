"""Data output modules."""

from .writer import RowWriter

__all__ = ["RowWriter"]
