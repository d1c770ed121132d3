"""
Custom exceptions for AstraCatalogue.

This module defines domain-specific exceptions used throughout the application
to provide clear error context and enable precise error handling.
"""


class CatalogueError(Exception):
    """Base exception for all AstraCatalogue-specific errors."""
    pass


class InvalidAttributeError(CatalogueError, ValueError):
    """Raised when an object or orbit attribute is outside its valid domain."""

    def __init__(self, attribute: str, value, message: str = None):
        self.attribute = attribute
        self.value = value
        super().__init__(message or f"Invalid value for '{attribute}': {value!r}")


class DuplicateNameError(CatalogueError):
    """Raised when an object name is already present in a catalogue."""

    def __init__(self, name: str, catalogue_name: str = ""):
        self.name = name
        self.catalogue_name = catalogue_name
        super().__init__(f"Object '{name}' already exists in catalogue '{catalogue_name}'")


class ObjectNotFoundError(CatalogueError, KeyError):
    """Raised when a name lookup does not match any object."""

    def __init__(self, name: str, catalogue_name: str = ""):
        self.name = name
        self.catalogue_name = catalogue_name
        super().__init__(f"Object '{name}' not found in catalogue '{catalogue_name}'")

    def __str__(self):
        return self.args[0]


class IndexOutOfRangeError(CatalogueError, IndexError):
    """Raised when a positional lookup is outside [0, size)."""

    def __init__(self, index: int, size: int, container: str = "collection"):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} is out of range for {container} of size {size}")


class ParentingError(CatalogueError):
    """Base exception for refused parent/child bindings."""
    pass


class AlreadyParentedError(ParentingError):
    """Raised when the prospective child already has a parent."""

    def __init__(self, child_name: str, parent_name: str, parent_kind: str):
        self.child_name = child_name
        self.parent_name = parent_name
        self.parent_kind = parent_kind
        super().__init__(
            f"Object '{child_name}' is already parented to {parent_kind} '{parent_name}'"
        )


class SelfParentParadoxError(ParentingError):
    """Raised when an object would become its own parent."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot parent object '{name}' to itself")


class CyclicParentageError(ParentingError):
    """Raised when a binding would close a parent/child loop."""

    def __init__(self, parent_name: str, child_name: str):
        self.parent_name = parent_name
        self.child_name = child_name
        super().__init__(
            f"Cannot parent '{child_name}' to '{parent_name}': "
            f"'{parent_name}' already descends from '{child_name}'"
        )


class DetachedObjectError(ParentingError):
    """Raised when parenting involves an object not held by the same catalogue."""
    pass


class UnsupportedSortKeyError(CatalogueError):
    """Raised when a catalogue cannot be sorted by the requested parameter."""

    def __init__(self, parameter):
        self.parameter = parameter
        super().__init__(f"Cannot sort a full catalogue by parameter '{parameter}'")


class MalformedRecordError(CatalogueError):
    """Raised when a record or relationship line cannot be parsed."""

    def __init__(self, reason: str, line: str = "", line_number: int = None):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}{reason}")


class UnresolvedRelationshipEndpointError(CatalogueError):
    """Raised when a relationship names a parent or child absent from the catalogue."""

    def __init__(self, name: str, role: str, line_number: int = None):
        self.name = name
        self.role = role
        self.line_number = line_number
        location = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{location}cannot find {role} object '{name}'")


class DestinationExistsError(CatalogueError):
    """Raised when an export target already exists and no overwrite policy was chosen."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Export destination already exists: {path}")


class DataLoadError(CatalogueError):
    """Raised when catalogue data cannot be loaded from a file."""
    pass


class DataSaveError(CatalogueError):
    """Raised when catalogue data cannot be saved to a file."""
    pass


__all__ = [
    'CatalogueError',
    'InvalidAttributeError',
    'DuplicateNameError',
    'ObjectNotFoundError',
    'IndexOutOfRangeError',
    'ParentingError',
    'AlreadyParentedError',
    'SelfParentParadoxError',
    'CyclicParentageError',
    'DetachedObjectError',
    'UnsupportedSortKeyError',
    'MalformedRecordError',
    'UnresolvedRelationshipEndpointError',
    'DestinationExistsError',
    'DataLoadError',
    'DataSaveError'
]
