"""Main CLI entry point."""

import logging

import click
from bankcsv.database.factories import DB_PATH_ENV, create_database

# Import and register all commands at module level
from bankcsv.cli.commands import (
    account,
    import_cmd,
    view,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Database file path or SQLAlchemy URL (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option("--verbose", "-v", is_flag=True, help="Log parsing and import details")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """bankcsv - Import bank CSV exports without duplicates.

    Column layouts are detected automatically and saved per account, so
    later exports from the same bank import without re-mapping.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
import_cmd.register_commands(cli)
view.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
