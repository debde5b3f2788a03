import argparse
import cmd
import logging
import os
import shlex

from serion.bootstrap.config.loader import CONFIG_ENV
from serionctl.core.dispatcher import CommandDispatcher, CommandHandler
from serionctl.core.ports.render import Renderer
from serionctl.core.session import Session
from serionctl.infra.format_renderer import get_renderer

USAGE = {
    "schema": "schema",
    "list": "list",
    "encode": "encode <document.yaml> <name>",
    "decode": "decode <name>",
    "inspect": "inspect <file>",
    "delete": "delete <name>",
}


class SerionCmd(cmd.Cmd):
    intro = "Entering serionctl interactive mode. Type 'exit' or 'quit' to leave."
    prompt = "serionctl> "

    def __init__(self, session: Session, argv: list[str] | None = None) -> None:
        super().__init__()

        self._argparser = self._argparse()
        self._args = self._argparser.parse_args(argv)
        self._session = session
        self._renderer: Renderer = get_renderer(self._args.output)
        self._dispatcher = CommandDispatcher()
        self._logger = logging.getLogger("serionctl.cmd")
        self.failed = False

        if self._args.config:
            # the engine's config loader resolves the file from the environment
            os.environ[CONFIG_ENV] = self._args.config

    @property
    def args(self) -> argparse.Namespace:
        return self._args

    @property
    def interactive(self) -> bool:
        return self._args.namespace is None

    def command(self, *arguments: str) -> CommandHandler:
        return self._dispatcher.command(*arguments)

    def close(self):
        self._session.close()

    def handle(self, *arguments: str) -> None:
        try:
            data = self._dispatcher.dispatch(
                *arguments,
                session=self._session,
                namespace=self.args
            )
            print(self._renderer.render(data), end="")
        except Exception as ex:
            self.failed = True
            self._logger.debug(f"Command '{' '.join(arguments)}' failed", exc_info=ex)
            print(f"error: {type(ex).__name__}: {ex}")

    def do_schema(self, line):
        self.handle("schema")

    def do_list(self, line):
        self.handle("list")

    def do_encode(self, line):
        if self._bind(line, "encode", "document", "name"):
            self.handle("encode")

    def do_decode(self, line):
        if self._bind(line, "decode", "name"):
            self.handle("decode")

    def do_inspect(self, line):
        if self._bind(line, "inspect", "file"):
            self.handle("inspect")

    def do_delete(self, line):
        if self._bind(line, "delete", "name"):
            self.handle("delete")

    def do_exit(self, arg):
        return True

    def do_quit(self, arg):
        return True

    def do_EOF(self, arg):
        print()
        return True

    def _bind(self, line: str, command: str, *names: str) -> bool:
        """
        In interactive mode, copy the positional words of `line` onto the
        namespace under `names`. One-shot mode already parsed them.
        """
        if not self.interactive:
            return True

        argv = shlex.split(line)
        if len(argv) != len(names):
            print(f"Usage: {USAGE[command]}")
            return False

        for name, value in zip(names, argv):
            setattr(self._args, name, value)
        return True

    @staticmethod
    def _argparse() -> argparse.ArgumentParser:
        global_opts = argparse.ArgumentParser(
            prog="serionctl",
            description="Encode, store and inspect serion object graphs."
        )
        global_opts.add_argument("--config", help="Path to a serion configuration file")
        global_opts.add_argument(
            "-o", "--output",
            default="yaml",
            choices=["yaml", "json"],
            help="Output format"
        )
        global_opts.add_argument(
            "-l", "--log-level",
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Logging verbosity"
        )

        sub = global_opts.add_subparsers(dest="namespace")

        sub.add_parser("schema", help="Show the registered types")
        sub.add_parser("list", help="List stored blobs")

        encode = sub.add_parser("encode", help="Encode a YAML document into a stored blob")
        encode.add_argument("document")
        encode.add_argument("name")

        decode = sub.add_parser("decode", help="Decode a stored blob")
        decode.add_argument("name")

        inspect = sub.add_parser("inspect", help="Show the records of a raw blob file")
        inspect.add_argument("file")

        delete = sub.add_parser("delete", help="Delete a stored blob")
        delete.add_argument("name")

        return global_opts
