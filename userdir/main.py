"""userdir CLI entry point and dependency wiring."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

import click

from userdir.config import DirectorySettings, load_config
from userdir.core.logging import setup_logging
from userdir.core.signing import Ed25519Signer
from userdir.directory.gate import AuthenticationGate, canonical_message
from userdir.directory.handlers import DirectoryHandlers
from userdir.directory.service import DirectoryService
from userdir.storage.client import StorageClient
from userdir.web import create_app, serve

logger = logging.getLogger(__name__)


def build_handlers(settings: DirectorySettings) -> DirectoryHandlers:
    client = StorageClient.from_uri(settings.storage_uri)
    logger.info("Using storage backend %s for %s", client.backend_name, settings.storage_uri)
    service = DirectoryService(client)
    gate = AuthenticationGate(
        service,
        Ed25519Signer(),
        max_signature_age_s=settings.auth.max_signature_age_s,
    )
    return DirectoryHandlers(service, gate)


def _resolve_settings(config_path: Path) -> DirectorySettings:
    if config_path.exists():
        return load_config(config_path)
    return DirectorySettings()


@click.group()
def cli() -> None:
    """userdir directory service CLI."""


@cli.command("serve")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/userdir.yaml"),
    show_default=True,
)
def serve_command(config_path: Path) -> None:
    """Run the HTTP directory service."""
    try:
        settings = _resolve_settings(config_path)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(settings.logging.level, json_output=settings.logging.json_output)
    try:
        handlers = build_handlers(settings)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    app = create_app(handlers)
    try:
        asyncio.run(
            serve(
                app,
                settings.server.host,
                settings.server.port,
                log_level=settings.logging.level.lower(),
            )
        )
    except KeyboardInterrupt:
        click.echo("Shutting down.")


@cli.command("keygen")
def keygen_command() -> None:
    """Print a fresh Ed25519 keypair as hex."""
    private_key, public_key = Ed25519Signer().generate_keypair()
    click.echo(f"private_key: {private_key}")
    click.echo(f"public_key: {public_key}")


@cli.command("sign")
@click.option("--private-key", required=True, help="Hex-encoded Ed25519 private key.")
@click.option("--uuid", "user_uuid", required=True)
@click.option("--payload", required=True, help="Credential hash carried by the request.")
@click.option("--timestamp", default=None, help="Defaults to the current epoch second.")
def sign_command(private_key: str, user_uuid: str, payload: str, timestamp: str | None) -> None:
    """Sign a request the way the service verifies it."""
    resolved_timestamp = timestamp or str(int(time.time()))
    message = canonical_message(resolved_timestamp, user_uuid, payload)
    try:
        signature = Ed25519Signer().sign(message, private_key)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"timestamp: {resolved_timestamp}")
    click.echo(f"signature: {signature}")


if __name__ == "__main__":
    cli()
