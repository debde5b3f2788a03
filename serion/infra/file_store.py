import logging
import os
import tempfile
from pathlib import Path

from serion.core.helpers.utils import validate_blob_name
from serion.core.ports.storage import BlobStore


class FileBlobStore(BlobStore):
    """
    BlobStore keeping one file per blob, named `<name>.ser`, inside a
    single directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a crash never leaves a half-written blob
    behind under the final name.
    """
    SUFFIX = ".ser"

    def __init__(self, directory: str | Path, fsync: bool = True) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._fsync = fsync
        self._logger = logging.getLogger("infra.file_store")

    def path_of(self, name: str) -> Path:
        return self._dir / f"{validate_blob_name(name)}{self.SUFFIX}"

    def write(self, name: str, data: bytes) -> None:
        target = self.path_of(name)
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{name}.", suffix=".tmp")

        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                if self._fsync:
                    os.fsync(fh.fileno())
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

        self._logger.debug(f"Wrote {len(data)} bytes to {target}")

    def read(self, name: str) -> bytes | None:
        target = self.path_of(name)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None

    def delete(self, name: str) -> None:
        self.path_of(name).unlink(missing_ok=True)

    def names(self) -> list[str]:
        return sorted(
            p.name[: -len(self.SUFFIX)]
            for p in self._dir.glob(f"*{self.SUFFIX}")
            if p.is_file()
        )

    def close(self) -> None:
        pass

    def __enter__(self) -> "FileBlobStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
