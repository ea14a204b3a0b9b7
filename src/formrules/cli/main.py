"""formrules CLI entry point."""

import click

from formrules.settings import Settings


@click.group()
@click.pass_context
def cli(ctx: click.Context):
    """formrules — rule-based form validation CLI."""
    settings = Settings.from_env()
    settings.configure_logging()
    ctx.obj = settings


# Register subcommands
from formrules.cli.validate_cmd import check_config, rules, validate  # noqa: E402

cli.add_command(validate)
cli.add_command(rules)
cli.add_command(check_config)
