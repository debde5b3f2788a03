from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class FieldKind(StrEnum):
    """
    Semantic type of a field. The kind alone decides how a value is laid
    out on the wire, since the stream carries no per-field tags.
    """
    Int64 = "Int64"
    Float64 = "Float64"
    Bool = "Bool"
    String = "String"
    ObjectRef = "ObjectRef"
    ObjectRefList = "ObjectRefList"

    @property
    def is_reference(self) -> bool:
        return self in (FieldKind.ObjectRef, FieldKind.ObjectRefList)

    def zero(self) -> Any:
        """Return the value an excluded or missing field takes."""
        if self is FieldKind.ObjectRefList:
            # fresh list on every call, never shared between instances
            return []
        return _ZERO_VALUES[self]


_ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.Int64: 0,
    FieldKind.Float64: 0.0,
    FieldKind.Bool: False,
    FieldKind.String: "",
    FieldKind.ObjectRef: None,
}


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """
    A single field of a registered type.
    """
    name: str
    """
    Field name, unique inside its type. Never written to the stream.
    """

    kind: FieldKind
    """
    Semantic type of the field value.
    """

    included: bool = True
    """
    False marks a transient field: it is skipped by the encoder and
    reset to its kind's zero value by the decoder.
    """

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name must not be empty")
        # FieldKind("Int63") raises ValueError
        object.__setattr__(self, "kind", FieldKind(self.kind))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": str(self.kind),
            "included": self.included,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldDescriptor":
        if "name" not in data:
            raise KeyError("Missing 'name' key")
        if "kind" not in data:
            raise KeyError(f"Missing 'kind' key for field '{data['name']}'")
        return cls(
            name=str(data["name"]),
            kind=FieldKind(data["kind"]),
            included=bool(data.get("included", True)),
        )


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """
    Layout of a registered type: its identifier, its version tag and its
    ordered fields. The declared field order is the wire order.
    """
    type_id: str
    version: int
    fields: tuple[FieldDescriptor, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.type_id:
            raise ValueError("type_id must not be empty")

        if not 0 <= self.version < 1 << 64:
            raise ValueError(
                f"Version of '{self.type_id}' must fit in an unsigned 64-bit integer"
            )

        # accept any iterable, store an immutable tuple
        object.__setattr__(self, "fields", tuple(self.fields))

        seen: set[str] = set()
        for fd in self.fields:
            if fd.name in seen:
                raise ValueError(
                    f"Duplicate field '{fd.name}' in type '{self.type_id}'"
                )
            seen.add(fd.name)

    def get_field(self, name: str) -> FieldDescriptor:
        for fd in self.fields:
            if fd.name == name:
                return fd
        raise KeyError(f"Type '{self.type_id}' has no field '{name}'")

    @property
    def included_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(fd for fd in self.fields if fd.included)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type_id": self.type_id,
            "version": self.version,
            "fields": [fd.to_dict() for fd in self.fields],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TypeDescriptor":
        if "type_id" not in data:
            raise KeyError("Missing 'type_id' key")
        return cls(
            type_id=str(data["type_id"]),
            version=int(data.get("version", 1)),
            fields=tuple(
                FieldDescriptor.from_dict(f) for f in data.get("fields", [])
            ),
        )
