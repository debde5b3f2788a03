from dataclasses import dataclass
from typing import Any

from serion.core.models.schema import FieldKind, TypeDescriptor


@dataclass(frozen=True, slots=True)
class Record:
    """
    One object as it appears on the wire.

    Scalar values are stored as-is. An ObjectRef value is the graph id of
    the cited record (or None for an absent reference), an ObjectRefList
    value is a tuple of such ids. Excluded fields have no entry: the
    values line up with the type's included fields, in declared order.
    """
    graph_id: int
    type_id: str
    version: int
    field_values: tuple[Any, ...]

    def cited_ids(self, descriptor: TypeDescriptor) -> list[int]:
        """Return every graph id this record refers to, in field order."""
        cited: list[int] = []
        for fd, value in zip(descriptor.included_fields, self.field_values):
            if fd.kind is FieldKind.ObjectRef:
                if value is not None:
                    cited.append(value)
            elif fd.kind is FieldKind.ObjectRefList:
                cited.extend(v for v in value if v is not None)
        return cited

    def to_dict(self, descriptor: TypeDescriptor) -> dict[str, Any]:
        """
        Return a plain representation, naming each value after its field.
        References are rendered as '@<graph_id>'.
        """
        values: dict[str, Any] = {}
        for fd, value in zip(descriptor.included_fields, self.field_values):
            if fd.kind is FieldKind.ObjectRef:
                values[fd.name] = _ref(value)
            elif fd.kind is FieldKind.ObjectRefList:
                values[fd.name] = [_ref(v) for v in value]
            else:
                values[fd.name] = value
        return {
            "graph_id": self.graph_id,
            "type_id": self.type_id,
            "version": self.version,
            "fields": values,
        }


def _ref(graph_id: int | None) -> str | None:
    return None if graph_id is None else f"@{graph_id}"


EncodedStream = list[Record]
"""
Ordered records of one encode call. The record with graph id 0 is the root.
"""
