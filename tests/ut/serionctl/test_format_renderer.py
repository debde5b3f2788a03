import json

import pytest
import yaml

from serionctl.infra.format_renderer import JsonRenderer, YamlRenderer, get_renderer


@pytest.mark.ut
def test_yaml_renderer_normalizes_tuples_and_bytes():
    out = YamlRenderer().render({"ids": (1, 2), "raw": b"\x01\xff", "name": "Amélie"})

    assert yaml.safe_load(out) == {"ids": [1, 2], "raw": "01ff", "name": "Amélie"}
    # keys keep insertion order
    assert out.index("ids") < out.index("raw") < out.index("name")


@pytest.mark.ut
def test_json_renderer():
    out = JsonRenderer().render({"ids": (1, 2), "raw": b"\x01"})

    assert json.loads(out) == {"ids": [1, 2], "raw": "01"}


@pytest.mark.ut
def test_get_renderer():
    assert isinstance(get_renderer("json"), JsonRenderer)
    assert isinstance(get_renderer("yaml"), YamlRenderer)
