import logging
from typing import Any

from serion.core.codec.primitives import NULL_REF, StreamReader
from serion.core.errors import CorruptStreamError, MalformedFieldError, VersionMismatchError
from serion.core.models.instance import ObjectInstance
from serion.core.models.record import EncodedStream, Record
from serion.core.models.schema import FieldKind, TypeDescriptor
from serion.core.schema.registry import SchemaRegistry


class BinaryDecoder:
    """
    Rebuilds an object graph from a stream written by BinaryEncoder.

    Decoding mirrors the encoder's two-phase discipline:

    1. A single forward pass reads every record. Each record's type is
       looked up in the registry and its version compared with the
       registered one; the included field values are read in declared
       order. Nothing is materialized yet.
    2. One empty instance is allocated per graph id, then every instance
       is populated. Reference ids resolve to the allocated instances, so
       a record may cite an id defined later in the stream, and cycles
       come back as cycles. Excluded fields get their kind's zero value.

    Any failure raises a DecodeError subclass (or UnknownTypeError) and
    no partially populated graph escapes.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        max_stream_size: int | None = None
    ) -> None:
        self._registry = registry
        self._max_stream_size = max_stream_size
        self._logger = logging.getLogger("core.codec.decoder")

    def decode(self, data: bytes) -> ObjectInstance:
        stream = self.records(data)
        return self.materialize(stream)

    def records(self, data: bytes) -> EncodedStream:
        """Phase 1: parse and validate every record of the stream."""
        if self._max_stream_size is not None and len(data) > self._max_stream_size:
            raise CorruptStreamError(
                f"Stream of {len(data)} bytes exceeds the "
                f"{self._max_stream_size} bytes limit"
            )

        reader = StreamReader(data)
        count = reader.read_uint32()
        if count == 0:
            raise CorruptStreamError("Stream contains no record")

        stream: EncodedStream = []
        defined: set[int] = set()

        for _ in range(count):
            record = self._read_record(reader)
            if record.graph_id in defined:
                raise CorruptStreamError(
                    f"Graph id {record.graph_id} is defined more than once"
                )
            defined.add(record.graph_id)
            stream.append(record)

        if reader.remaining:
            raise CorruptStreamError(
                f"{reader.remaining} unexpected bytes after the last record"
            )

        self._logger.debug(f"Read {len(stream)} records from {len(data)} bytes")
        return stream

    def materialize(self, stream: EncodedStream) -> ObjectInstance:
        """Phase 2: allocate every instance, then populate their fields."""
        descriptors = {r.type_id: self._registry.lookup(r.type_id) for r in stream}

        instances: dict[int, ObjectInstance] = {
            record.graph_id: ObjectInstance(type_id=record.type_id)
            for record in stream
        }

        if 0 not in instances:
            raise CorruptStreamError("Stream has no root record (graph id 0)")

        for record in stream:
            descriptor = descriptors[record.type_id]
            for cited in record.cited_ids(descriptor):
                if cited not in instances:
                    raise CorruptStreamError(
                        f"Record {record.graph_id} cites undefined graph id {cited}"
                    )

        for record in stream:
            self._populate(
                instances[record.graph_id],
                descriptors[record.type_id],
                record,
                instances
            )

        return instances[0]

    def _read_record(self, reader: StreamReader) -> Record:
        graph_id = reader.read_uint32()
        if graph_id == NULL_REF:
            raise CorruptStreamError(
                f"Reserved graph id 0x{NULL_REF:08x} used as a record id"
            )

        type_id = reader.read_string()
        version = reader.read_uint64()

        descriptor = self._registry.lookup(type_id)
        if version != descriptor.version:
            raise VersionMismatchError(
                type_id=type_id,
                expected=descriptor.version,
                found=version
            )

        values = []
        for fd in descriptor.included_fields:
            try:
                values.append(self._read_value(reader, fd.kind))
            except MalformedFieldError as ex:
                raise MalformedFieldError(f"{type_id}.{fd.name}: {ex}") from ex

        return Record(
            graph_id=graph_id,
            type_id=type_id,
            version=version,
            field_values=tuple(values),
        )

    @staticmethod
    def _read_value(reader: StreamReader, kind: FieldKind) -> Any:
        match kind:
            case FieldKind.Int64:
                return reader.read_int64()
            case FieldKind.Float64:
                return reader.read_float64()
            case FieldKind.Bool:
                return reader.read_bool()
            case FieldKind.String:
                return reader.read_string()
            case FieldKind.ObjectRef:
                return reader.read_ref()
            case FieldKind.ObjectRefList:
                count = reader.read_uint32()
                return tuple(reader.read_ref() for _ in range(count))

    @staticmethod
    def _populate(
        instance: ObjectInstance,
        descriptor: TypeDescriptor,
        record: Record,
        instances: dict[int, ObjectInstance],
    ) -> None:
        values = iter(record.field_values)

        for fd in descriptor.fields:
            if not fd.included:
                instance.fields[fd.name] = fd.kind.zero()
                continue

            value = next(values)
            if fd.kind is FieldKind.ObjectRef:
                instance.fields[fd.name] = None if value is None else instances[value]
            elif fd.kind is FieldKind.ObjectRefList:
                instance.fields[fd.name] = [
                    None if v is None else instances[v] for v in value
                ]
            else:
                instance.fields[fd.name] = value
