import argparse
import functools
from typing import Any, Protocol

from serionctl.core.session import Session


class CommandHandler(Protocol):
    def __call__(
        self,
        session: Session,
        namespace: argparse.Namespace,
    ) -> dict[str, Any]:
        ...


class CommandDispatcher:
    def __init__(self) -> None:
        self._commands: dict[tuple[str, ...], CommandHandler] = {}

    def dispatch(
        self,
        *arguments: str,
        session: Session,
        namespace: argparse.Namespace
    ) -> dict[str, Any]:
        command = self._commands.get(arguments)
        if command is None:
            raise RuntimeError(f"Unknown '{' '.join(arguments)}' Command")
        return command(session, namespace)

    def command(self, *arguments: str):
        def decorator(func: CommandHandler):

            @functools.wraps(func)
            def wrapper(
                session: Session,
                namespace: argparse.Namespace,
            ) -> dict[str, Any]:
                return func(session, namespace)

            self._commands[arguments] = wrapper

            return wrapper

        return decorator
