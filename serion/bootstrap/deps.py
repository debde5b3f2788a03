import json
from functools import lru_cache

from pydantic import ValidationError

from serion.bootstrap.config.settings import SerionConfig
from serion.core.errors import SerionError
from serion.core.facade import Serion
from serion.core.ports.storage import BlobStore
from serion.infra.file_store import FileBlobStore
from serion.infra.lmdb_store.store import LMDBBlobStore
from serion.infra.msgpack_serializer import MsgPackSerializer
from serion.infra.yaml_schema import YamlSchemaLoader


@lru_cache
def get_engine() -> Serion:
    config = get_config()
    loader = YamlSchemaLoader(config.registry.schema_file)

    try:
        registry = loader.load()
    except (OSError, ValueError, SerionError) as ex:
        raise SystemExit(f"Unable to load schema: {ex}")

    return Serion(
        registry=registry,
        max_stream_size=config.codec.max_stream_size
    )


def get_store() -> BlobStore:
    config = get_config()
    data_dir = config.store.data_dir

    if config.store.backend == "lmdb":
        serializer = MsgPackSerializer()
        return LMDBBlobStore(
            path=data_dir,
            serializer=serializer,
            schema_fingerprint=get_engine().registry.fingerprint(serializer),
            map_size=config.store.map_size
        )

    return FileBlobStore(data_dir)


@lru_cache
def get_config() -> SerionConfig:
    try:
        return SerionConfig()  # type: ignore[call-arg]
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(map(str, err['loc']))}: {err['msg']}")
        raise SystemExit("\n".join(msg))
