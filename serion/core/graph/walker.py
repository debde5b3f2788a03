import logging
from typing import Any, Iterator

from serion.core.errors import MalformedFieldError, UnregisteredTypeError
from serion.core.models.instance import ObjectInstance
from serion.core.models.schema import FieldKind, TypeDescriptor
from serion.core.schema.registry import SchemaRegistry


class GraphWalker:
    """
    Visits every object reachable from a root exactly once.

    The walk is a depth-first, pre-order traversal driven by the included
    reference fields of each type, in declared field order. The first
    time an object is met it receives the next graph id, starting with 0
    for the root. Identity is object identity: an instance reached along
    two paths is yielded once, two equal but distinct instances are
    yielded twice. Revisiting an object never walks its fields again,
    which is what makes cyclic graphs terminate.

    Traversal uses an explicit stack, so deep chains do not hit the
    interpreter recursion limit. Excluded reference fields are not
    followed since they never reach the wire.
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry
        self._logger = logging.getLogger("core.graph.walker")

    def walk(self, root: ObjectInstance) -> Iterator[tuple[int, ObjectInstance]]:
        """
        Lazily yield (graph_id, instance) pairs. The returned iterator is
        one-shot: ids are scoped to this single traversal.
        """
        self._check_instance(root, "<root>")

        seen: set[int] = set()
        next_id = 0
        stack: list[ObjectInstance] = [root]

        while stack:
            instance = stack.pop()
            if id(instance) in seen:
                continue

            seen.add(id(instance))
            descriptor = self._descriptor_of(instance)
            yield next_id, instance
            next_id += 1

            # push children reversed so the first field is visited first
            children = self._children(instance, descriptor)
            for child in reversed(children):
                if id(child) not in seen:
                    stack.append(child)

        self._logger.debug(f"Walked {next_id} objects from {root.type_id}")

    def _descriptor_of(self, instance: ObjectInstance) -> TypeDescriptor:
        if instance.type_id not in self._registry:
            raise UnregisteredTypeError(instance.type_id)
        return self._registry.lookup(instance.type_id)

    def _children(
        self,
        instance: ObjectInstance,
        descriptor: TypeDescriptor
    ) -> list[ObjectInstance]:
        children: list[ObjectInstance] = []

        for fd in descriptor.fields:
            if not fd.included or not fd.kind.is_reference:
                continue

            value = instance.fields.get(fd.name)
            where = f"{descriptor.type_id}.{fd.name}"

            if fd.kind is FieldKind.ObjectRef:
                if value is not None:
                    self._check_instance(value, where)
                    children.append(value)
                continue

            if value is None:
                continue

            if not isinstance(value, (list, tuple)):
                raise MalformedFieldError(
                    f"{where}: expected a list of objects, got {type(value).__name__}"
                )

            for item in value:
                if item is not None:
                    self._check_instance(item, where)
                    children.append(item)

        return children

    @staticmethod
    def _check_instance(value: Any, where: str) -> None:
        if not isinstance(value, ObjectInstance):
            raise MalformedFieldError(
                f"{where}: expected an object, got {type(value).__name__}"
            )
