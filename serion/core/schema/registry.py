import logging
import zlib
from typing import Any, Iterator

from serion.core.errors import DuplicateTypeError, RegistryFrozenError, UnknownTypeError
from serion.core.models.schema import TypeDescriptor
from serion.core.ports.serializer import Serializer


class SchemaRegistry:
    """
    Authoritative mapping of type identifiers to their descriptors.

    The registry is built once and read many times. Descriptors can only
    be added, never removed or replaced. Once frozen, registration is
    refused, which makes it safe to share a single registry between any
    number of concurrent encode and decode calls without locking.
    """

    def __init__(self, descriptors: list[TypeDescriptor] | None = None) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._frozen = False
        self._logger = logging.getLogger("core.schema.registry")

        for descriptor in descriptors or ():
            self.register(descriptor)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, descriptor: TypeDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{descriptor.type_id}': registry is frozen"
            )

        if descriptor.type_id in self._types:
            raise DuplicateTypeError(descriptor.type_id)

        self._types[descriptor.type_id] = descriptor
        self._logger.debug(
            f"Registered type {descriptor.type_id} v{descriptor.version} "
            f"({len(descriptor.fields)} fields)"
        )

    def lookup(self, type_id: str) -> TypeDescriptor:
        descriptor = self._types.get(type_id)
        if descriptor is None:
            raise UnknownTypeError(type_id)
        return descriptor

    def freeze(self) -> None:
        """Refuse any further registration. Idempotent."""
        self._frozen = True

    def fingerprint(self, serializer: Serializer) -> int:
        """
        CRC32 of the serialized registry. Two registries with the same
        types, versions and field layouts share the same fingerprint.
        """
        types = sorted(self.to_dict()["types"], key=lambda t: t["type_id"])
        return zlib.crc32(serializer.serialize(types))

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def to_dict(self) -> dict[str, Any]:
        return {"types": [d.to_dict() for d in self._types.values()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchemaRegistry":
        if not isinstance(data, dict) or "types" not in data:
            raise KeyError("Missing 'types' key")
        return cls([TypeDescriptor.from_dict(t) for t in data["types"] or []])
