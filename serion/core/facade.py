from serion.core.codec.decoder import BinaryDecoder
from serion.core.codec.encoder import BinaryEncoder
from serion.core.models.instance import ObjectInstance
from serion.core.models.record import EncodedStream
from serion.core.models.schema import TypeDescriptor
from serion.core.schema.registry import SchemaRegistry


class Serion:
    """
    Caller-facing entry point of the engine.

    Types are registered up front; the first encode or decode call
    freezes the registry, after which it is shared read-only by every
    call. Serion also satisfies the Serializer port, so it can be handed
    to any component that stores or ships bytes.
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        max_stream_size: int | None = None,
    ) -> None:
        self.registry = registry if registry is not None else SchemaRegistry()
        self._encoder = BinaryEncoder(self.registry)
        self._decoder = BinaryDecoder(self.registry, max_stream_size=max_stream_size)

    def register_type(self, descriptor: TypeDescriptor) -> None:
        self.registry.register(descriptor)

    def encode(self, root: ObjectInstance) -> bytes:
        self.registry.freeze()
        return self._encoder.encode(root)

    def decode(self, data: bytes) -> ObjectInstance:
        self.registry.freeze()
        return self._decoder.decode(data)

    def records(self, data: bytes) -> EncodedStream:
        """Parse and validate the records of a stream without materializing it."""
        self.registry.freeze()
        return self._decoder.records(data)

    def materialize(self, stream: EncodedStream) -> ObjectInstance:
        self.registry.freeze()
        return self._decoder.materialize(stream)

    def serialize(self, message: ObjectInstance) -> bytes:
        return self.encode(message)

    def deserialize(self, data: bytes) -> ObjectInstance:
        return self.decode(data)
