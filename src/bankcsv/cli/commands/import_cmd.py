"""CSV preview and import commands."""

from pathlib import Path

import click
from bankcsv.cli.account_resolution import resolve_account_or_exit
from bankcsv.cli.error_handling import handle_domain_error
from bankcsv.cli.mapping_options import describe_mapping, mapping_options
from bankcsv.domain.account import AccountService
from bankcsv.domain.csv_import import CSVImportService
from bankcsv.domain.entities import ImportStep, ParseError
from bankcsv.domain.errors import DomainError
from bankcsv.domain.mapping import mapping_to_dict, merge_mapping

MAX_ERRORS_SHOWN = 20


def _echo_errors(errors: list[ParseError]) -> None:
    if not errors:
        return
    click.echo(f"  Errors: {len(errors)}")
    for error in errors[:MAX_ERRORS_SHOWN]:
        click.echo(f"    {error}", err=True)
    if len(errors) > MAX_ERRORS_SHOWN:
        click.echo(f"    ... and {len(errors) - MAX_ERRORS_SHOWN} more", err=True)


@click.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def preview_csv(ctx, csv_file: str):
    """Show the columns of a CSV file and the detected mapping."""
    service = CSVImportService(ctx.obj["db"])

    try:
        preview = service.preview_file(Path(csv_file).read_bytes())
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Columns: {', '.join(preview.headers)}")
    click.echo(f"Data rows: {preview.total_rows}")
    click.echo("\nDetected mapping:")
    for line in describe_mapping(preview.detected_mapping):
        click.echo(line)
    if preview.date_format_ambiguous:
        click.echo(
            "\nWarning: day and month cannot be told apart in these dates; "
            f"{preview.detected_mapping.get('date_format')} was assumed. "
            "Use --date-format to override."
        )

    click.echo("\nSample rows:")
    for row in preview.sample_rows:
        click.echo("  " + " | ".join(row.get(h, "") for h in preview.headers))


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--dry-run", is_flag=True, help="Show what would be imported without writing anything")
@mapping_options
@click.pass_context
def import_csv(ctx, csv_file: str, account: str, dry_run: bool, mapping_overrides: dict):
    """Import transactions from a CSV file.

    The account's saved column mapping is reused when it fits the file.
    Otherwise the mapping is auto-detected from the headers, completed
    with the mapping options, and saved on the account when the import is
    committed. Transactions already imported are skipped.
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    data = Path(csv_file).read_bytes()

    try:
        session = service.start_session(data, account_id=account_id)
        if session.step == ImportStep.MAPPING or mapping_overrides:
            if session.missing_columns:
                click.echo(
                    "Saved mapping does not fit this file, missing columns: "
                    f"{', '.join(session.missing_columns)}",
                    err=True,
                )
            base = mapping_to_dict(session.mapping) if session.mapping else session.detected_mapping
            session = service.confirm_mapping(session, merge_mapping(base, mapping_overrides))

        if dry_run:
            preview = service.preview_import(data, mapping=session.mapping, account_id=account_id)
            click.echo("\nDry run (nothing imported):")
            click.echo(f"  Transactions: {preview.total_count}")
            click.echo(f"  Duplicates: {preview.duplicate_count}")
            click.echo(f"  Would import: {preview.total_count - preview.duplicate_count}")
            _echo_errors(preview.errors)
            click.echo("\nMapping:")
            for line in describe_mapping(mapping_to_dict(session.mapping)):
                click.echo(line)
            return

        result = service.commit_session(session, data)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.skipped} duplicates")
    _echo_errors(result.errors)


def register_commands(cli):
    """Register preview and import commands with main CLI."""
    cli.add_command(preview_csv)
    cli.add_command(import_csv)
