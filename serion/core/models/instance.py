from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class ObjectInstance:
    """
    Runtime value of a registered type.

    Instances compare and hash by identity: two instances holding the same
    field values are still two distinct objects of the graph. Reference
    fields hold other ObjectInstance values (or None), reference list
    fields hold lists of them.
    """
    type_id: str
    """
    Identifier of the TypeDescriptor this instance conforms to.
    """

    fields: dict[str, Any] = field(default_factory=dict)
    """
    Field values keyed by field name. Missing fields read as the zero
    value of their kind when encoded.
    """

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.fields[name] = value

    def __repr__(self) -> str:
        # reference fields may form cycles, print them by type only
        parts = []
        for name, value in self.fields.items():
            if isinstance(value, ObjectInstance):
                parts.append(f"{name}=<{value.type_id}>")
            elif isinstance(value, list) and any(isinstance(v, ObjectInstance) for v in value):
                parts.append(f"{name}=[{len(value)} refs]")
            else:
                parts.append(f"{name}={value!r}")
        return f"{self.type_id}({', '.join(parts)})"
