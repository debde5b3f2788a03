from typing import Any

from serion.core.models.instance import ObjectInstance
from serion.core.models.schema import FieldKind
from serion.core.schema.registry import SchemaRegistry

TYPE_KEY = "$type"


class DocumentError(ValueError):
    pass


class DocumentBuilder:
    """
    Builds an object graph out of a plain document, as produced by
    yaml.safe_load.

    Every object is a mapping naming its type under the `$type` key; the
    other keys are field values. Reference fields hold nested mappings
    (or null), reference list fields hold lists of mappings. The same
    mapping object reached twice becomes the same instance, so YAML
    anchors and aliases express sharing and cycles:

        $type: Catalog
        name: favourites
        movies:
          - &shrek {$type: Movie, title: Shrek, director: Eddie Murphy, year: 2001, rating: 7.5}
          - *shrek
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry

    def build(self, document: Any) -> ObjectInstance:
        memo: dict[int, ObjectInstance] = {}
        # mappings whose instance exists but whose fields are not filled yet
        pending: list[tuple[dict, ObjectInstance]] = []

        root = self._instance(document, memo, pending, "<root>")
        while pending:
            node, instance = pending.pop()
            self._fill(node, instance, memo, pending)
        return root

    def _instance(
        self,
        node: Any,
        memo: dict[int, ObjectInstance],
        pending: list[tuple[dict, ObjectInstance]],
        where: str
    ) -> ObjectInstance:
        if not isinstance(node, dict):
            raise DocumentError(f"{where}: expected a mapping, got {type(node).__name__}")

        cached = memo.get(id(node))
        if cached is not None:
            return cached

        type_id = node.get(TYPE_KEY)
        if not isinstance(type_id, str):
            raise DocumentError(f"{where}: missing '{TYPE_KEY}' key")

        self._registry.lookup(type_id)
        instance = ObjectInstance(type_id=type_id)
        # memoized before its fields are filled so that cycles resolve to it
        memo[id(node)] = instance
        pending.append((node, instance))
        return instance

    def _fill(
        self,
        node: dict,
        instance: ObjectInstance,
        memo: dict[int, ObjectInstance],
        pending: list[tuple[dict, ObjectInstance]]
    ) -> None:
        descriptor = self._registry.lookup(instance.type_id)

        for key, value in node.items():
            if key == TYPE_KEY:
                continue
            try:
                fd = descriptor.get_field(key)
            except KeyError as ex:
                raise DocumentError(f"{instance.type_id}: {ex.args[0]}") from ex

            path = f"{instance.type_id}.{key}"
            match fd.kind:
                case FieldKind.ObjectRef:
                    instance[key] = (
                        None if value is None
                        else self._instance(value, memo, pending, path)
                    )
                case FieldKind.ObjectRefList:
                    if not isinstance(value, list):
                        raise DocumentError(f"{path}: expected a list")
                    instance[key] = [
                        None if item is None
                        else self._instance(item, memo, pending, path)
                        for item in value
                    ]
                case _:
                    instance[key] = value
