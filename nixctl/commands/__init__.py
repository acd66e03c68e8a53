import logging
from contextlib import contextmanager

import typer

from ..exceptions import NixctlError

logger = logging.getLogger("nixctl")


@contextmanager
def reported_errors():
    """Turn a NixctlError into a logged message and exit code 1."""
    try:
        yield
    except NixctlError as e:
        logger.error(f"❌ {e}")
        logger.debug("Traceback:", exc_info=True)
        raise typer.Exit(code=1)
