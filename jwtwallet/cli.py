"""Command line interface for the JWT wallet."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Optional

import typer

from jwtwallet import JwtWalletService, WalletConfig, WalletError, load_config
from jwtwallet.registry import get_registry

app = typer.Typer(help="CLI for short-lived JWT signing keys")

# Command groups
keys_app = typer.Typer(help="Commands for inspecting published keys")

app.add_typer(keys_app, name="keys")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to a YAML config file")


@app.callback()
def main() -> None:
    """JWT wallet CLI entry point."""
    pass


def _load(config_path: Optional[str]) -> WalletConfig:
    config = load_config(config_path)
    logging.basicConfig(level=config.log_level)
    return config


@app.command("sign")
def sign(
    payload: str,
    expires_in: int = typer.Option(300, help="Token lifetime in seconds"),
    config_path: Optional[str] = ConfigOption,
) -> None:
    """
    Rotate in a fresh key, publish it and print a token signed with it.

    Example:
        jwtwallet sign '{"sub": "alice", "aud": "api"}' --expires-in 600
    """
    config = _load(config_path)
    claims = json.loads(payload)

    async def _sign() -> str:
        async with JwtWalletService(config) as wallet:
            return wallet.sign_token(claims, int(time.time()) + expires_in)

    typer.echo(asyncio.run(_sign()))


@app.command("verify")
def verify(
    token: str,
    audience: str = typer.Option(..., help="Expected audience claim"),
    config_path: Optional[str] = ConfigOption,
) -> None:
    """Verify a token against keys published in the configured registry."""
    config = _load(config_path)
    wallet = JwtWalletService(config)
    try:
        claims = asyncio.run(wallet.verify_token(token, audience))
    except WalletError as err:
        typer.echo(f"Verification failed: {err}")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(claims, indent=2, sort_keys=True))


@app.command("run")
def run(
    lifespan: Optional[float] = typer.Option(
        None, help="Seconds to keep rotating keys (default: run indefinitely)"
    ),
    config_path: Optional[str] = ConfigOption,
) -> None:
    """Run key rotation and cache sweeps until stopped or ``lifespan`` expires."""
    config = _load(config_path)

    async def _run() -> None:
        async with JwtWalletService(config):
            if lifespan is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(lifespan)

    typer.echo(f"Rotating keys every {config.key_rotation_interval_seconds}s in namespace {config.namespace}")
    asyncio.run(_run())


@keys_app.command("show")
def keys_show(
    key_id: str,
    namespace: Optional[str] = typer.Option(None, help="Registry namespace (default: from config)"),
    config_path: Optional[str] = ConfigOption,
) -> None:
    """Show the published record for ``key_id``."""
    config = _load(config_path)
    registry = get_registry(config)
    record = asyncio.run(registry.fetch(namespace or config.namespace, key_id))
    if record is None:
        typer.echo("Key not found")
        raise typer.Exit(code=1)
    typer.echo(record.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
