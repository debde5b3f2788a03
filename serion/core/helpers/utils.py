import functools
import importlib
import logging
import pkgutil
import re
from collections.abc import Callable

_BLOB_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )


def validate_blob_name(name: str) -> str:
    """
    Blob names become file names and LMDB keys: letters, digits, dot,
    dash and underscore only, starting with a letter or digit.
    """
    if not isinstance(name, str) or not _BLOB_NAME.match(name):
        raise ValueError(
            f"Invalid blob name {name!r}: use up to 128 letters, digits, "
            "'.', '-' or '_', starting with a letter or digit"
        )
    return name


def scan(package: str):
    """
    Decorator that triggers a component scan when the decorated function
    is called.
    """
    def decorator(func: Callable):

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            # Execute the scan BEFORE calling the function
            py_package = importlib.import_module(package)

            for module_info in pkgutil.iter_modules(py_package.__path__):
                module_name = f"{package}.{module_info.name}"
                importlib.import_module(module_name)

            return func(*args, **kwargs)

        return wrapper

    return decorator
