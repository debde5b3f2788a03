from serionctl.bootstrap.deps import get_cli
from serionctl.core import handlers

cli = get_cli()

cli.command("list")(handlers.cmd_list)
cli.command("encode")(handlers.cmd_encode)
cli.command("decode")(handlers.cmd_decode)
cli.command("inspect")(handlers.cmd_inspect)
cli.command("delete")(handlers.cmd_delete)
