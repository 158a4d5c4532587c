import logging
import sys

import click
from rich.console import Console
from rich.table import Table
import structlog

from recaptcha_client.config import ENV_PRIVATE_KEY, ENV_PUBLIC_KEY, ENV_USE_SSL, ServiceConfig
from recaptcha_client.errors import RecaptchaError
from recaptcha_client.mailhide import MailHide, reveal
from recaptcha_client.utils import parse_key_values
from recaptcha_client.verify import Verifier
from recaptcha_client.widget import build_widget_markup


def configure_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Send structlog output to stderr so command output stays clean."""
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def key_values(ctx, param, value):
    try:
        return dict(parse_key_values(list(value)))
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


credential_options = [
    click.option("--public-key", envvar=ENV_PUBLIC_KEY, required=True, help="Public API key"),
    click.option("--private-key", envvar=ENV_PRIVATE_KEY, required=True, help="Private API key"),
    click.option("--ssl/--no-ssl", "use_ssl", envvar=ENV_USE_SSL, default=False, help="Use https URLs"),
]


def with_credentials(fn):
    for option in reversed(credential_options):
        fn = option(fn)
    return fn


def load_config(public_key: str, private_key: str, use_ssl: bool) -> ServiceConfig:
    try:
        return ServiceConfig(public_key=public_key, private_key=private_key, use_ssl=use_ssl)
    except RecaptchaError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def cli(verbose: bool, json_logs: bool):
    configure_logging(verbose, json_logs)


@cli.command("mailhide-url")
@click.argument("email")
@with_credentials
def mailhide_url(email: str, public_key: str, private_key: str, use_ssl: bool):
    """Print the MailHide URL that reveals EMAIL."""
    config = load_config(public_key, private_key, use_ssl)
    try:
        click.echo(MailHide(config).url(email))
    except RecaptchaError as e:
        raise click.ClickException(str(e)) from e


@cli.command("mailhide-html")
@click.argument("email")
@with_credentials
def mailhide_html(email: str, public_key: str, private_key: str, use_ssl: bool):
    """Print the abridged-address HTML for EMAIL."""
    config = load_config(public_key, private_key, use_ssl)
    try:
        click.echo(MailHide(config).html(email))
    except RecaptchaError as e:
        raise click.ClickException(str(e)) from e


@cli.command("mailhide-reveal")
@click.argument("url")
@click.option("--private-key", envvar=ENV_PRIVATE_KEY, required=True, help="Private API key")
def mailhide_reveal(url: str, private_key: str):
    """Decrypt the address hidden in a MailHide URL."""
    try:
        click.echo(reveal(url, private_key))
    except (RecaptchaError, ValueError) as e:
        raise click.ClickException(f"Could not reveal address: {e}") from e


@cli.command()
@click.option("--public-key", envvar=ENV_PUBLIC_KEY, required=True, help="Public API key")
@click.option("--ssl/--no-ssl", "use_ssl", envvar=ENV_USE_SSL, default=False, help="Use https URLs")
@click.option("--error", default=None, help="Error code from a failed verification")
@click.option("--option", "-o", "options", multiple=True, callback=key_values, help="RecaptchaOptions entry as KEY=VALUE")
def widget(public_key: str, use_ssl: bool, error: str, options: dict):
    """Print the challenge widget HTML."""
    click.echo(build_widget_markup(public_key, error=error, use_ssl=use_ssl, options=options))


@cli.command()
@with_credentials
@click.option("--remote-ip", required=True, help="IP address of the user who solved the challenge")
@click.option("--challenge", default="", help="Value of recaptcha_challenge_field")
@click.option("--response", default="", help="Value of recaptcha_response_field")
@click.option("--field", "-f", "fields", multiple=True, callback=key_values, help="Extra POST field as KEY=VALUE")
def verify(public_key: str, private_key: str, use_ssl: bool, remote_ip: str, challenge: str, response: str, fields: dict):
    """Verify a challenge response against the service."""
    config = load_config(public_key, private_key, use_ssl)
    try:
        with Verifier(config) as verifier:
            outcome = verifier.verify(remote_ip, challenge, response, fields)
    except RecaptchaError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title="Verification")
    table.add_column("success")
    table.add_column("error code")
    table.add_row(
        "[green]yes[/green]" if outcome.success else "[red]no[/red]",
        outcome.error_code or "-",
    )
    Console().print(table)

    if not outcome.success:
        sys.exit(1)


if __name__ == "__main__":
    cli()
