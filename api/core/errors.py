"""
Error types raised by the mapping layer and the domain modules.
"""

from __future__ import annotations


class MappingError(RuntimeError):
    pass


class EmptyRecord(MappingError):
    """
    A write was asked to persist (or filter on) a record with no fields left
    after strict projection.
    """


class CoercionFailure(MappingError, ValueError):
    """
    A single field value could not be parsed into its declared kind.

    Never escapes the coercion engine: the field is set to None instead.
    """


class StorageOperationFailure(MappingError):
    """
    The database call itself failed. The original message is preserved.
    """


class NotFound(MappingError):
    pass
