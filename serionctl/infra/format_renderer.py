import json

import yaml

from serionctl.core.ports.render import Renderer


class JsonRenderer(Renderer):
    def render(self, data: dict) -> str:
        return json.dumps(data, indent=2, sort_keys=False, default=_bytes_to_hex)


class YamlRenderer(Renderer):
    def render(self, data: dict) -> str:
        normalized = self._normalize(data)
        return yaml.safe_dump(normalized, sort_keys=False, allow_unicode=True)

    def _normalize(self, obj):
        if isinstance(obj, bytes):
            return obj.hex()

        if isinstance(obj, dict):
            return {self._normalize(k): self._normalize(v) for k, v in obj.items()}

        if isinstance(obj, (list, tuple)):
            return [self._normalize(x) for x in obj]

        return obj


def _bytes_to_hex(obj):
    if isinstance(obj, bytes):
        return obj.hex()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def get_renderer(name: str) -> Renderer:
    if name == "json":
        return JsonRenderer()
    return YamlRenderer()
