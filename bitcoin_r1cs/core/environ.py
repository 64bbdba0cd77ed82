"""
Loading settings from a .env file

conf.py reads its settings from the process environment. A .env file can supply them
instead: the one named by BITCOIN_R1CS_DOTENV, else the one at the project root.
Variables already set in the environment take precedence unless `override` is true.
"""
import logging
import os
import pathlib
import warnings

from ..constants import PROJECT_ROOT_DIR

__all__ = [
    "DOTENV_PATH_ENV_VAR",
    "get_dotenv_path",
    "load_bitcoin_r1cs_dotenv",
]


DOTENV_FILE = PROJECT_ROOT_DIR / ".env"
DOTENV_PATH_ENV_VAR = "BITCOIN_R1CS_DOTENV"
logger = logging.getLogger(__name__)


def get_dotenv_path() -> pathlib.Path:
    path = os.getenv(DOTENV_PATH_ENV_VAR)
    if path:
        return pathlib.Path(path).expanduser()
    return DOTENV_FILE


def load_bitcoin_r1cs_dotenv(path: str | os.PathLike | None = None, override: bool = False) -> list[str]:
    """
    Load variables from a .env file into os.environ and return the names that were set.

    A missing file is only worth a warning when it was asked for, by `path` or by
    BITCOIN_R1CS_DOTENV. Without a project .env the environment is used as is.
    """
    from dotenv import dotenv_values

    requested = path is not None or bool(os.getenv(DOTENV_PATH_ENV_VAR))
    dotenv_path = pathlib.Path(path) if path is not None else get_dotenv_path()

    if not dotenv_path.is_file():
        if requested:
            warnings.warn(f"{dotenv_path} does not exist")
        else:
            logger.debug("No %s, using the environment only", dotenv_path)
        return []

    logger.info("Loading environment variables from %s", dotenv_path)
    loaded = []
    for name, value in dotenv_values(dotenv_path).items():
        if value is None:
            # a bare `NAME` line, no value to set
            continue
        if name in os.environ and not override:
            logger.debug("%s is already set, keeping the environment value", name)
            continue
        os.environ[name] = value
        loaded.append(name)
    return loaded
