"""
Exception hierarchy of the serion engine.

Every error raised by the engine inherits from SerionError, so callers
can catch the whole family at once. The concrete class tells the caller
what to do next: a version mismatch calls for a migration step, a
truncated or corrupt stream means the data is damaged, an unknown type
means the registry and the producer of the stream have drifted apart.
"""


class SerionError(Exception):
    """Base exception for all serion errors."""


class DuplicateTypeError(SerionError):
    """Raised when a type id is registered twice."""

    def __init__(self, type_id: str) -> None:
        super().__init__(f"Type '{type_id}' is already registered")
        self.type_id = type_id


class RegistryFrozenError(SerionError):
    """Raised when registering into a registry that is already in use."""


class UnknownTypeError(SerionError):
    """Raised when a type id is looked up but was never registered."""

    def __init__(self, type_id: str) -> None:
        super().__init__(f"Unknown type '{type_id}'")
        self.type_id = type_id


class UnregisteredTypeError(SerionError):
    """Raised when encoding an instance whose type is not in the registry."""

    def __init__(self, type_id: str) -> None:
        super().__init__(f"Cannot encode instance of unregistered type '{type_id}'")
        self.type_id = type_id


class DecodeError(SerionError):
    """Base exception for streams that cannot be turned back into objects."""


class VersionMismatchError(DecodeError):
    """
    Raised when a record was written with another version of its type
    than the one currently registered.
    """

    def __init__(self, type_id: str, expected: int, found: int) -> None:
        super().__init__(
            f"Version mismatch for type '{type_id}': "
            f"expected {expected}, found {found}"
        )
        self.type_id = type_id
        self.expected = expected
        self.found = found


class TruncatedStreamError(DecodeError):
    """Raised when the byte buffer ends in the middle of a record."""


class MalformedFieldError(DecodeError):
    """Raised when a value cannot be read or written as its declared kind."""


class CorruptStreamError(DecodeError):
    """
    Raised when the stream parses but breaks its own structure:
    duplicate or dangling graph ids, missing root, trailing bytes.
    """
