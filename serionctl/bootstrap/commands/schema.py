from serionctl.bootstrap.deps import get_cli
from serionctl.core import handlers

cli = get_cli()

cli.command("schema")(handlers.cmd_schema)
