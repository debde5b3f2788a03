import os
from pathlib import Path

CONFIG_ENV = "SERIONCONFIG"
DEFAULT_FILE = "serion.yaml"


def get_configfile(cli_path: str | None = None) -> Path:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv(CONFIG_ENV)

    if raw is None:
        file = Path.cwd() / DEFAULT_FILE
    else:
        file = Path(raw).expanduser()

    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            f"  - Or set the {CONFIG_ENV} environment variable\n"
            f"  - Or place a '{DEFAULT_FILE}' file in the current working directory."
        )

    return file
