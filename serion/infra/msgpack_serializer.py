import msgpack
from typing import Any

from serion.core.ports.serializer import Serializer


class MsgPackSerializer(Serializer):
    """
    MsgPack-based implementation of the Serializer interface, used for
    blob metadata and registry fingerprints.

    Mappings are packed with their keys sorted, so two dictionaries
    holding the same items always produce the same bytes whatever their
    insertion order. Tuples are packed as arrays and come back as lists.
    """
    def serialize(self, message: Any) -> bytes:
        return msgpack.packb(self._canonical(message), use_bin_type=True)

    def deserialize(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False)

    def _canonical(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {
                k: self._canonical(obj[k])
                for k in sorted(obj, key=lambda key: (type(key).__name__, key))
            }

        if isinstance(obj, (list, tuple)):
            return [self._canonical(x) for x in obj]

        return obj
