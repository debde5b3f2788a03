from pathlib import Path

import yaml

from serion.core.schema.registry import SchemaRegistry


class YamlSchemaLoader:
    """
    Loads and saves schema files.

    A schema file lists the registered types in order:

        types:
          - type_id: Account
            version: 1
            fields:
              - {name: id, kind: String}
              - {name: balance, kind: Float64}
              - {name: pin, kind: String, included: false}
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> SchemaRegistry:
        if not self.path.exists():
            raise FileNotFoundError(f"schema not found: {self.path}")

        data = yaml.safe_load(self.path.read_text())
        try:
            return SchemaRegistry.from_dict(data)
        except (KeyError, TypeError, ValueError) as ex:
            raise ValueError(f"schema format is invalid: {self.path.absolute()}: {ex}") from ex

    def save(self, registry: SchemaRegistry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        yaml_str = yaml.safe_dump(registry.to_dict(), sort_keys=False)
        self.path.write_text(yaml_str)
