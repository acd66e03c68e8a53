"""
Thin wrappers around subprocess for invoking external tools.
"""
import logging
import os
import shlex
import subprocess
from typing import Dict, Optional, Sequence

from ..exceptions import CommandError

logger = logging.getLogger(__name__)


def _merged_env(env: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    if not env:
        return None
    return {**os.environ, **env}


def run(args: Sequence[str], env: Optional[Dict[str, str]] = None) -> None:
    """Run a command, streaming its output to the console.

    Args:
        args: Program and arguments
        env: Extra variables for the child process only

    Raises:
        CommandError: If the program is missing or exits non-zero
    """
    args = list(args)
    logger.debug("exec: %s", shlex.join(args))
    try:
        subprocess.run(args, check=True, env=_merged_env(env))
    except FileNotFoundError as e:
        raise CommandError(f"{args[0]} not found on PATH", command=args) from e
    except subprocess.CalledProcessError as e:
        raise CommandError(
            f"{args[0]} exited with status {e.returncode}",
            command=args,
            returncode=e.returncode,
        ) from e


def output(args: Sequence[str]) -> str:
    """Run a command and return its stdout with trailing newlines removed.

    Raises:
        CommandError: If the program is missing or exits non-zero
    """
    args = list(args)
    logger.debug("exec: %s", shlex.join(args))
    try:
        result = subprocess.run(args, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise CommandError(f"{args[0]} not found on PATH", command=args) from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        message = f"{args[0]} exited with status {e.returncode}"
        if stderr:
            message = f"{message}: {stderr}"
        raise CommandError(message, command=args, returncode=e.returncode, stderr=stderr) from e
    return result.stdout.rstrip("\n")
