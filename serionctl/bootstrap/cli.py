import sys

from serion.core.helpers.utils import scan, setup_logging
from serionctl.bootstrap.deps import get_cli


@scan("serionctl.bootstrap.commands")
def main():
    cli = get_cli()
    setup_logging(cli.args.log_level)

    try:
        if cli.interactive:
            cli.cmdloop()
        else:
            cli.onecmd(cli.args.namespace)
    finally:
        cli.close()

    if cli.failed and not cli.interactive:
        sys.exit(1)


if __name__ == "__main__":
    main()
