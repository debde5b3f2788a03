import logging
from typing import Any

from serion.core.codec.primitives import MAX_GRAPH_ID, StreamWriter
from serion.core.errors import MalformedFieldError
from serion.core.graph.walker import GraphWalker
from serion.core.models.instance import ObjectInstance
from serion.core.models.record import EncodedStream, Record
from serion.core.models.schema import FieldDescriptor, FieldKind, TypeDescriptor
from serion.core.schema.registry import SchemaRegistry


class BinaryEncoder:
    """
    Turns an object graph into a self-describing byte stream.

    Encoding runs in two phases. A full walker pass first assigns a graph
    id to every reachable object, so that any reference field, even one
    pointing forward or back into a cycle, can cite an id that exists.
    Records are then produced in graph-id order and written as:

        Stream := RecordCount(uint32) Record*
        Record := GraphId(uint32) TypeId(string) Version(uint64) FieldValue*

    Field values carry no tag and no name: their order and layout come
    from the registered descriptor, and excluded fields are not written
    at all. The output depends only on the graph and the registry, so
    encoding the same graph twice yields identical bytes.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._walker = GraphWalker(registry)
        self._logger = logging.getLogger("core.codec.encoder")

    def encode(self, root: ObjectInstance) -> bytes:
        return self.write(self.records(root))

    def records(self, root: ObjectInstance) -> EncodedStream:
        # Phase 1: pre-assign every graph id before any value is produced
        graph_ids: dict[int, int] = {}
        instances: list[ObjectInstance] = []

        for graph_id, instance in self._walker.walk(root):
            if graph_id > MAX_GRAPH_ID:
                raise MalformedFieldError(
                    f"Object graph exceeds {MAX_GRAPH_ID + 1} objects"
                )
            graph_ids[id(instance)] = graph_id
            instances.append(instance)

        # Phase 2: every reference can now cite an existing id
        stream: EncodedStream = []
        for graph_id, instance in enumerate(instances):
            descriptor = self._registry.lookup(instance.type_id)
            values = tuple(
                self._field_value(descriptor, fd, instance, graph_ids)
                for fd in descriptor.included_fields
            )
            stream.append(
                Record(
                    graph_id=graph_id,
                    type_id=descriptor.type_id,
                    version=descriptor.version,
                    field_values=values,
                )
            )

        return stream

    def write(self, stream: EncodedStream) -> bytes:
        writer = StreamWriter()
        writer.write_uint32(len(stream))

        for record in stream:
            descriptor = self._registry.lookup(record.type_id)
            writer.write_uint32(record.graph_id)
            writer.write_string(record.type_id)
            writer.write_uint64(record.version)

            for fd, value in zip(descriptor.included_fields, record.field_values):
                try:
                    self._write_value(writer, fd.kind, value)
                except MalformedFieldError as ex:
                    raise MalformedFieldError(
                        f"{descriptor.type_id}.{fd.name}: {ex}"
                    ) from ex

        data = writer.getvalue()
        self._logger.debug(f"Encoded {len(stream)} records into {len(data)} bytes")
        return data

    @staticmethod
    def _field_value(
        descriptor: TypeDescriptor,
        fd: FieldDescriptor,
        instance: ObjectInstance,
        graph_ids: dict[int, int],
    ) -> Any:
        if fd.name not in instance.fields:
            value = fd.kind.zero()
        else:
            value = instance.fields[fd.name]

        if fd.kind is FieldKind.ObjectRef:
            return None if value is None else graph_ids[id(value)]

        if fd.kind is FieldKind.ObjectRefList:
            if value is None:
                return ()
            return tuple(None if v is None else graph_ids[id(v)] for v in value)

        if value is None:
            raise MalformedFieldError(
                f"{descriptor.type_id}.{fd.name}: None is not a valid {fd.kind} value"
            )
        return value

    @staticmethod
    def _write_value(writer: StreamWriter, kind: FieldKind, value: Any) -> None:
        match kind:
            case FieldKind.Int64:
                writer.write_int64(value)
            case FieldKind.Float64:
                writer.write_float64(value)
            case FieldKind.Bool:
                writer.write_bool(value)
            case FieldKind.String:
                writer.write_string(value)
            case FieldKind.ObjectRef:
                writer.write_ref(value)
            case FieldKind.ObjectRefList:
                writer.write_uint32(len(value))
                for graph_id in value:
                    writer.write_ref(graph_id)
