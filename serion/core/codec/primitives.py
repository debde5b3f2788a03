import struct
from typing import Any

from serion.core.errors import MalformedFieldError, TruncatedStreamError

# "!" = big-endian (network order), no padding
UINT8 = struct.Struct("!B")
UINT32 = struct.Struct("!I")
UINT64 = struct.Struct("!Q")
INT64 = struct.Struct("!q")
FLOAT64 = struct.Struct("!d")

NULL_REF: int = 0xFFFFFFFF
"""
Graph id written for an absent reference. Real graph ids stay below it.
"""

MAX_GRAPH_ID: int = NULL_REF - 1


class StreamWriter:
    """
    Append-only buffer of fixed-width and length-prefixed values.

    Writers validate the Python value against the wire type and raise
    MalformedFieldError when it does not fit, so a bad value is reported
    before any byte of it is written.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    def write_uint32(self, value: int) -> None:
        self._pack(UINT32, value, "uint32")

    def write_uint64(self, value: int) -> None:
        self._pack(UINT64, value, "uint64")

    def write_int64(self, value: Any) -> None:
        # bool is an int subclass but never a valid Int64
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedFieldError(f"Expected an integer, got {type(value).__name__}")
        self._pack(INT64, value, "int64")

    def write_float64(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedFieldError(f"Expected a float, got {type(value).__name__}")
        try:
            self._buffer.extend(FLOAT64.pack(float(value)))
        except OverflowError as ex:
            raise MalformedFieldError(f"Value {value!r} does not fit in float64") from ex

    def write_bool(self, value: Any) -> None:
        if not isinstance(value, bool):
            raise MalformedFieldError(f"Expected a bool, got {type(value).__name__}")
        self._buffer.extend(UINT8.pack(1 if value else 0))

    def write_string(self, value: Any) -> None:
        if not isinstance(value, str):
            raise MalformedFieldError(f"Expected a string, got {type(value).__name__}")
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as ex:
            raise MalformedFieldError(f"String is not encodable as utf-8: {ex}") from ex
        self.write_uint32(len(raw))
        self._buffer.extend(raw)

    def write_ref(self, graph_id: int | None) -> None:
        self.write_uint32(NULL_REF if graph_id is None else graph_id)

    def _pack(self, fmt: struct.Struct, value: int, name: str) -> None:
        try:
            self._buffer.extend(fmt.pack(value))
        except struct.error as ex:
            raise MalformedFieldError(f"Value {value!r} does not fit in {name}") from ex


class StreamReader:
    """
    Forward-only cursor over an immutable byte buffer.

    Every read checks the remaining length first and raises
    TruncatedStreamError when the buffer ends before the value does.
    """

    def __init__(self, data: bytes) -> None:
        self._view = memoryview(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def read_uint32(self) -> int:
        return self._unpack(UINT32)

    def read_uint64(self) -> int:
        return self._unpack(UINT64)

    def read_int64(self) -> int:
        return self._unpack(INT64)

    def read_float64(self) -> float:
        return self._unpack(FLOAT64)

    def read_bool(self) -> bool:
        raw = self._unpack(UINT8)
        if raw not in (0, 1):
            raise MalformedFieldError(
                f"Invalid bool byte 0x{raw:02x} at offset {self._pos - 1}"
            )
        return raw == 1

    def read_string(self) -> str:
        length = self.read_uint32()
        raw = self._take(length)
        try:
            return str(raw, "utf-8")
        except UnicodeDecodeError as ex:
            raise MalformedFieldError(
                f"Invalid utf-8 string at offset {self._pos - length}: {ex}"
            ) from ex

    def read_ref(self) -> int | None:
        graph_id = self.read_uint32()
        return None if graph_id == NULL_REF else graph_id

    def _take(self, size: int) -> bytes:
        if self.remaining < size:
            raise TruncatedStreamError(
                f"Stream ended at offset {len(self._view)}, "
                f"{size} bytes needed at offset {self._pos}"
            )
        chunk = self._view[self._pos: self._pos + size].tobytes()
        self._pos += size
        return chunk

    def _unpack(self, fmt: struct.Struct) -> Any:
        return fmt.unpack(self._take(fmt.size))[0]

