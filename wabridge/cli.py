"""Click CLI for the relay bridge."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from wabridge.app import RelayBridge, create_client, load_client_factory
from wabridge.config import DEFAULT_WEBHOOK_URL, RelayConfig
from wabridge.session.lifecycle import StartupError
from wabridge.webhook.client import WebhookClient, WebhookError

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option("--webhook-url", default=None, help="Webhook URL (env: WEBHOOK_URL).")
@click.option("--store", "store_path", default=None, help="Session store path (env: SESSION_STORE_PATH).")
@click.option("--timeout", "request_timeout", type=float, default=None, help="Webhook timeout in seconds.")
@click.option("--log-level", default=None, help="Log level (env: LOG_LEVEL).")
@click.option("--fallback-reply", default=None, help="Reply sent when the webhook fails.")
@click.pass_context
def cli(
    ctx: click.Context,
    webhook_url: str | None,
    store_path: str | None,
    request_timeout: float | None,
    log_level: str | None,
    fallback_reply: str | None,
) -> None:
    """Relay chat messages to a webhook and send its replies back."""
    ctx.ensure_object(dict)
    try:
        config = RelayConfig.from_env().with_overrides(
            webhook_url=webhook_url,
            store_path=store_path,
            request_timeout=request_timeout,
            log_level=log_level,
            fallback_reply=fallback_reply,
        )
    except ValueError as exc:
        raise click.UsageError(f"Invalid configuration: {exc}") from exc

    logging.basicConfig(level=config.log_level, format=_LOG_FORMAT)
    if config.webhook_url == DEFAULT_WEBHOOK_URL:
        logger.warning("Webhook URL not set, using default %s", DEFAULT_WEBHOOK_URL)
    ctx.obj["config"] = config


@cli.command()
@click.option(
    "--client",
    "client_path",
    envvar="WABRIDGE_CLIENT",
    required=True,
    help="Protocol client factory as 'package.module:factory' (env: WABRIDGE_CLIENT).",
)
@click.pass_context
def run(ctx: click.Context, client_path: str) -> None:
    """Pair or resume the session, then relay messages until SIGINT/SIGTERM."""
    config: RelayConfig = ctx.obj["config"]
    try:
        client = create_client(config, load_client_factory(client_path))
        asyncio.run(RelayBridge(config, client).run())
    except StartupError as exc:
        logger.error("Startup failed: %s", exc)
        raise click.ClickException(str(exc)) from exc


@cli.command("check-webhook")
@click.argument("message", default="ping")
@click.option("--sender", default="wabridge-check", help="Sender identifier to report.")
@click.pass_context
def check_webhook(ctx: click.Context, message: str, sender: str) -> None:
    """Send one test message to the webhook and print its reply."""
    config: RelayConfig = ctx.obj["config"]
    webhook = WebhookClient(config.webhook_url, timeout=config.request_timeout)
    try:
        reply = asyncio.run(webhook.notify(sender, message))
    except WebhookError as exc:
        raise click.ClickException(f"Webhook check failed: {exc}") from exc
    click.echo(json.dumps({"webhook_url": config.webhook_url, "reply": reply}, indent=2))
