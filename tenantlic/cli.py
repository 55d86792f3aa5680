"""
Command-line interface for tenant license encryption.
"""

from __future__ import annotations

import json
import os

import click

from tenantlic.common.codec import LicenseCodec
from tenantlic.common.config import Config
from tenantlic.common.exceptions import LicenseError
from tenantlic.server import start_server


def _read_input(value: str | None, file: str | None, what: str) -> str:
    if value is not None and file is not None:
        msg = f"Pass either --{what} or --file, not both"
        raise click.UsageError(msg)
    if file is not None:
        with open(file, encoding="utf-8") as f:
            return f.read()
    if value is None:
        msg = f"One of --{what} or --file is required"
        raise click.UsageError(msg)
    return value


@click.group()
def cli() -> None:
    """Tenant license encryption CLI"""


@cli.command()
@click.option("--tenant-id", required=True, help="Tenant identifier (client id or code)")
@click.option("--payload", default=None, help="License JSON payload")
@click.option(
    "--file",
    "file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Read the payload from a file",
)
def encrypt(tenant_id: str, payload: str | None, file: str | None) -> None:
    """Encrypt a license payload for a tenant"""
    text = _read_input(payload, file, "payload")
    try:
        result = LicenseCodec().encrypt_license(text, tenant_id)
    except LicenseError as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps(result.model_dump(by_alias=True), indent=2))


@cli.command()
@click.option("--tenant-id", required=True, help="Tenant identifier (client id or code)")
@click.option("--result", default=None, help="LicenseResult JSON")
@click.option(
    "--file",
    "file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Read the LicenseResult JSON from a file",
)
def decrypt(tenant_id: str, result: str | None, file: str | None) -> None:
    """Decrypt a license result for a tenant"""
    text = _read_input(result, file, "result")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"License result is not valid JSON: {e}"
        raise click.ClickException(msg) from e
    if not isinstance(data, dict):
        msg = "License result must be a JSON object"
        raise click.ClickException(msg)
    try:
        payload = LicenseCodec().decrypt_license(data, tenant_id)
    except LicenseError as e:
        raise click.ClickException(str(e)) from e
    click.echo(payload)


@cli.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind server to (default: from TENANTLIC_SERVER_HOST env or 127.0.0.1)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind server to (default: from TENANTLIC_SERVER_PORT env or 8000)",
)
@click.option(
    "--data-dir",
    default=None,
    help="Directory for the license store (default: from TENANTLIC_DATA_DIR env or ./data)",
)
def serve(host: str | None, port: int | None, data_dir: str | None) -> None:
    """Start the license server"""
    # Set environment variables before building config
    if host:
        os.environ["TENANTLIC_SERVER_HOST"] = host
    if port:
        os.environ["TENANTLIC_SERVER_PORT"] = str(port)
    if data_dir:
        os.environ["TENANTLIC_DATA_DIR"] = data_dir

    start_server(Config())


if __name__ == "__main__":
    cli()
