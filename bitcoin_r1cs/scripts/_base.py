"""
JSON filter harness for scripts called from other processes

A script reads one JSON object from stdin and writes one JSON object to stdout, either
`{"result": ...}` or `{"error": "...", "errorType": "..."}`. Anything the function prints
goes to stderr so that stdout stays parseable.
"""
import json
import logging
import sys
from contextlib import redirect_stdout
from typing import (
    Any,
    Callable,
    TextIO,
)

from bitcoin_r1cs.core.integrity import IntegrityTag
from bitcoin_r1cs.core.shape import TransactionShape

logger = logging.getLogger(__name__)

# Errors caused by the input. These are reported without a traceback.
INPUT_ERRORS = (ValueError, TypeError, KeyError)


class InvalidInput(ValueError):
    pass


def _to_json(obj: Any) -> Any:
    if isinstance(obj, IntegrityTag):
        return obj.hex()
    if isinstance(obj, TransactionShape):
        return obj.to_json()
    if isinstance(obj, (bytes, bytearray)):
        return obj.hex()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _error(e: Exception) -> dict:
    message = f"Missing input field {e.args[0]!r}" if isinstance(e, KeyError) else str(e)
    return {"error": message, "errorType": type(e).__name__}


def read_input(stdin: TextIO) -> dict:
    try:
        input_data = json.load(stdin)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Invalid JSON input: {e}") from e
    if not isinstance(input_data, dict):
        raise InvalidInput(f"Expected a JSON object as input, got {type(input_data).__name__}")
    return input_data


def run_py_client_script(
    func: Callable[[dict], Any],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """
    Run `func` on the JSON object read from `stdin` and write the outcome to `stdout`.
    Returns the process exit code: 0 on success, 1 on error.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    try:
        input_data = read_input(stdin)
        with redirect_stdout(sys.stderr):
            output = {"result": func(input_data)}
        output_json = json.dumps(output, default=_to_json)
    except INPUT_ERRORS as e:
        logger.warning("py-client script input error: %s", e)
        output_json = json.dumps(_error(e))
        exit_code = 1
    except Exception as e:
        logger.exception("py-client script error")
        output_json = json.dumps(_error(e))
        exit_code = 1
    else:
        exit_code = 0
    print(output_json, file=stdout)
    return exit_code
