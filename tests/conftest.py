import pytest
import yaml

from tests.helpers import ALL_TYPES, make_registry

from serion.core.facade import Serion
from serion.core.schema.registry import SchemaRegistry
from serion.infra.msgpack_serializer import MsgPackSerializer


@pytest.fixture
def registry() -> SchemaRegistry:
    return make_registry()


@pytest.fixture
def engine(registry) -> Serion:
    return Serion(registry=registry)


@pytest.fixture
def serializer() -> MsgPackSerializer:
    return MsgPackSerializer()


@pytest.fixture
def schema_file(tmp_path):
    file = tmp_path / "schema.yaml"
    data = {"types": [d.to_dict() for d in ALL_TYPES]}
    file.write_text(yaml.safe_dump(data, sort_keys=False))
    return file


@pytest.fixture
def config_file(tmp_path, schema_file):
    file = tmp_path / "serion.yaml"
    data = {
        "registry": {
            "schema_file": str(schema_file),
        },
        "store": {
            "backend": "file",
            "data_dir": str(tmp_path / "data"),
        },
        "codec": {
            "max_stream_size": 1024 * 1024,
        },
    }
    file.write_text(yaml.safe_dump(data))
    return file
