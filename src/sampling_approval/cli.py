"""
Sampling approval CLI — show-config | confirm
"""
import asyncio
import json

import click

from sampling_approval.approval.models import ALLOW_ONCE, DENY
from sampling_approval.config.settings import Settings, load_settings
from sampling_approval.core.exceptions import SamplingApprovalError
from sampling_approval.core.structured_logger import TraceContext, configure_logging
from sampling_approval.protocols.confirmation import ConfirmationResult, HttpConfirmationClient


def _load(config_path: str | None) -> Settings:
    try:
        settings = load_settings(config_path)
    except (SamplingApprovalError, FileNotFoundError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise SystemExit(1) from e
    configure_logging(settings.logging.level, settings.logging.format)
    return settings


@click.group()
@click.version_option(package_name="sampling-approval")
def cli() -> None:
    """Sampling approval — decide extension sampling requests."""
    pass


@cli.command("show-config")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML config file (defaults to environment only)")
def show_config(config_path: str | None) -> None:
    """Print the effective settings as JSON."""
    settings = _load(config_path)
    click.echo(json.dumps(settings.redacted(), indent=2, sort_keys=True))


@cli.command()
@click.option("--session-id", required=True, help="Conversation session id")
@click.option("--request-id", required=True, help="Id of the sampling request")
@click.option("--action", type=click.Choice([ALLOW_ONCE, DENY]), required=True)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML config file (defaults to environment only)")
def confirm(session_id: str, request_id: str, action: str, config_path: str | None) -> None:
    """Report a decision for one request to the permission service."""
    settings = _load(config_path)

    async def _submit() -> ConfirmationResult:
        async with HttpConfirmationClient(settings.service) as client:
            return await client.submit(
                session_id, request_id, action, principal_type=settings.service.principal_type
            )

    with TraceContext():
        try:
            result = asyncio.run(_submit())
        except SamplingApprovalError as e:
            click.echo(e.user_message(), err=True)
            raise SystemExit(1) from e

    if result.error:
        click.echo(f"Permission service rejected {request_id}: {result.error}", err=True)
        raise SystemExit(1)
    click.echo(f"{request_id}: {action} confirmed")


if __name__ == "__main__":
    cli()
