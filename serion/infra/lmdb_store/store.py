import logging
import zlib
from pathlib import Path
from typing import Any

from serion.core.errors import CorruptStreamError
from serion.core.helpers.utils import validate_blob_name
from serion.core.ports.serializer import Serializer
from serion.core.ports.storage import BlobStore
from serion.infra.lmdb_store.backend import LMDBBackend


class LMDBBlobStore(BlobStore):
    """
    BlobStore backed by an LMDB environment.

    Each blob lives in the `data` database. Next to it, the `meta`
    database holds a small serialized record describing the blob:

        {"size": <bytes>, "crc32": <checksum>, "schema": <fingerprint>}

    Blob and metadata are written in the same write transaction. Reads
    recompute the checksum and reject a blob whose bytes no longer match
    its metadata with CorruptStreamError.
    """
    DATASPACE = b"data"
    METASPACE = b"meta"

    def __init__(
        self,
        path: str | Path,
        serializer: Serializer,
        schema_fingerprint: int | None = None,
        map_size: int = 1 << 30,
    ) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)
        self._backend = LMDBBackend(str(path), map_size=map_size)
        self._serializer = serializer
        self._fingerprint = schema_fingerprint
        self._logger = logging.getLogger("infra.lmdb_store")

    def write(self, name: str, data: bytes) -> None:
        key = self._key(name)
        meta = {
            "size": len(data),
            "crc32": zlib.crc32(data),
            "schema": self._fingerprint,
        }
        self._backend.put_many([
            (self.DATASPACE, key, data),
            (self.METASPACE, key, self._serializer.serialize(meta)),
        ])
        self._logger.debug(f"Stored blob {name} ({len(data)} bytes)")

    def read(self, name: str) -> bytes | None:
        key = self._key(name)
        data, raw_meta = self._backend.get_many([
            (self.DATASPACE, key),
            (self.METASPACE, key),
        ])
        if data is None:
            return None

        if raw_meta is not None:
            meta = self._serializer.deserialize(raw_meta)
            if meta.get("size") != len(data) or meta.get("crc32") != zlib.crc32(data):
                self._logger.warning(f"Checksum mismatch for blob {name}")
                raise CorruptStreamError(f"Blob '{name}' does not match its checksum")

        return data

    def metadata(self, name: str) -> dict[str, Any] | None:
        raw = self._backend.get(self.METASPACE, self._key(name))
        if raw is None:
            return None
        return self._serializer.deserialize(raw)

    def delete(self, name: str) -> None:
        key = self._key(name)
        self._backend.delete_many([
            (self.DATASPACE, key),
            (self.METASPACE, key),
        ])

    def names(self) -> list[str]:
        return [k.decode("utf-8") for k in self._backend.keys(self.DATASPACE)]

    def close(self) -> None:
        self._backend.close()

    def __enter__(self) -> "LMDBBlobStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _key(name: str) -> bytes:
        return validate_blob_name(name).encode("utf-8")
