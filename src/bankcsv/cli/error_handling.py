"""CLI error handling helpers."""

import click

from bankcsv.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    missing = getattr(error, "missing_columns", None)
    if missing:
        click.echo(f"Missing columns: {', '.join(missing)}", err=True)
    ctx.exit(1)
