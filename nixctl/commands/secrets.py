from typing import Optional

import typer

from . import reported_errors
from ..modules import secrets

app = typer.Typer(help="Work with sops-encrypted secrets")


@app.command("decrypt")
def decrypt_cmd(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Encrypted file (default: sops.secrets.yaml)"),
):
    """Decrypt the secrets file and print it. Requires AGE_PRIVATE_KEY."""
    with reported_errors():
        secrets.decrypt_secrets(file)
