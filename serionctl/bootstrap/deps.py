from functools import lru_cache

from serion.bootstrap.deps import get_engine, get_store
from serionctl.core.cmd import SerionCmd
from serionctl.core.session import Session


@lru_cache
def get_cli() -> SerionCmd:
    session = Session(engine_factory=get_engine, store_factory=get_store)
    cli = SerionCmd(session)
    return cli
