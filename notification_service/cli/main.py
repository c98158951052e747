"""Main CLI entry point for notification-service management commands."""

import click

from notification_service import __version__
from notification_service.cli.commands import database, messaging, server
from notification_service.core.settings import get_logging_settings
from notification_service.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="notification-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Notification service CLI.

    \b
    Commands:
      serve      Run the HTTP API and queue worker
      consume    Run the queue worker without HTTP
      publish    Publish sample notification events
      db         Database management

    \b
    Quick Start:
      notification-service db init --seed
      notification-service serve
      notification-service publish --count 100
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(messaging.consume)
cli.add_command(messaging.publish)
cli.add_command(database.db)


def main() -> None:
    """Entry point for CLI."""
    setup_logging(get_logging_settings())
    cli(obj={})


if __name__ == "__main__":
    main()
