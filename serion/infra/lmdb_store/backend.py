import threading

import lmdb


class LMDBBackend:
    """
    Thin synchronous wrapper around an LMDB environment. Each named
    database (DBI) is opened lazily on first use and cached.
    """
    def __init__(
        self,
        path: str,
        map_size: int = 1 << 30,
        max_dbs: int = 8,
        readahead: bool = True,
        writemap: bool = False,
        sync: bool = True,
        lock: bool = True,
    ) -> None:
        self._env = lmdb.open(
            path,
            map_size=map_size,
            max_dbs=max_dbs,
            lock=lock,
            writemap=writemap,
            sync=sync,
            readahead=readahead,
        )
        self._dbis: dict[bytes, object] = {}
        self._dbis_lock = threading.Lock()

    def get(self, db_name: bytes, key: bytes) -> bytes | None:
        dbi = self._get_dbi(db_name)
        with self._env.begin(db=dbi, write=False) as txn:
            return txn.get(key)

    def get_many(self, keys: list[tuple[bytes, bytes]]) -> list[bytes | None]:
        """Read several (db_name, key) pairs inside one read transaction."""
        dbis = {db_name: self._get_dbi(db_name) for db_name, _ in keys}
        with self._env.begin(write=False) as txn:
            return [txn.get(key, db=dbis[db_name]) for db_name, key in keys]

    def put_many(self, items: list[tuple[bytes, bytes, bytes]]) -> None:
        dbis: dict[bytes, object] = {}
        for db_name, _, _ in items:
            if db_name not in dbis:
                dbis[db_name] = self._get_dbi(db_name)

        with self._env.begin(write=True) as txn:
            for db_name, key, value in items:
                txn.put(key, value, db=dbis[db_name])

    def delete_many(self, keys: list[tuple[bytes, bytes]]) -> None:
        dbis = {db_name: self._get_dbi(db_name) for db_name, _ in keys}
        with self._env.begin(write=True) as txn:
            for db_name, key in keys:
                txn.delete(key, db=dbis[db_name])

    def keys(self, db_name: bytes) -> list[bytes]:
        dbi = self._get_dbi(db_name)
        with self._env.begin(write=False) as txn:
            with txn.cursor(db=dbi) as cursor:
                return list(cursor.iternext(keys=True, values=False))

    def close(self) -> None:
        self._dbis.clear()
        self._env.close()

    def _get_dbi(self, name: bytes) -> object:
        with self._dbis_lock:
            dbi = self._dbis.get(name)
            if dbi is None:
                dbi = self._env.open_db(name)
                self._dbis[name] = dbi
            return dbi
