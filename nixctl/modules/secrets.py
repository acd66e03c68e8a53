"""
Decryption of the repository's sops-encrypted secrets file.
"""
import logging
from typing import Optional

from . import shell
from ..config import Config, require_env
from ..exceptions import CommandError, StepError

logger = logging.getLogger(__name__)


def decrypt_secrets(path: Optional[str] = None) -> None:
    """Decrypt the secrets file and stream the plaintext to stdout.

    sops reads the age key from SOPS_AGE_KEY, which is set for the child
    process only.
    """
    path = path or Config.SECRETS_FILE
    age_key = require_env("AGE_PRIVATE_KEY")

    logger.info(f"🔓 Decrypting {path}...")
    try:
        shell.run(["sops", "--decrypt", path], env={"SOPS_AGE_KEY": age_key})
    except CommandError as e:
        raise StepError(f"decrypt {path}", str(e)) from e

    logger.info("Decryption complete.")
    logger.warning("⚠️ The decrypted secrets were printed to your console. Be mindful of your environment.")
