from collections.abc import Callable

from serion.core.facade import Serion
from serion.core.ports.storage import BlobStore


class Session:
    """
    Resources shared by the commands of one serionctl run. The blob store
    is only opened by the first command that needs it, and released by
    close().
    """

    def __init__(
        self,
        engine_factory: Callable[[], Serion],
        store_factory: Callable[[], BlobStore],
    ) -> None:
        self._engine_factory = engine_factory
        self._store_factory = store_factory
        self._engine: Serion | None = None
        self._store: BlobStore | None = None

    @property
    def engine(self) -> Serion:
        if self._engine is None:
            self._engine = self._engine_factory()
        return self._engine

    @property
    def store(self) -> BlobStore:
        if self._store is None:
            self._store = self._store_factory()
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
