"""Logging configuration for the nixctl package."""
import logging
import sys

from .config import Config


def setup_logging(debug_mode: bool = False) -> None:
    """Configure logging based on debug mode.

    Log records go to stderr so that command output streamed to stdout
    (decrypted secrets, resolved targets) stays pipeable.
    """
    log_level = logging.DEBUG if debug_mode else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=Config.LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
