"""Imported transaction viewing command."""

import click
from bankcsv.cli.account_resolution import resolve_account_or_exit
from bankcsv.domain.account import AccountService
from bankcsv.domain.entities import TransactionType


@click.command("view")
@click.option("--account", help="Account name or ID")
@click.pass_context
def view_transactions(ctx, account: str | None):
    """View imported transactions, newest first."""
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transactions = db.list_transactions(account_id=account_id)
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Status':<8} {'Account':<20} {'Description':<40}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        sign = "-" if txn.type == TransactionType.EXPENSE else ""
        amount_str = f"{sign}{txn.amount:,.2f}"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:>12} {txn.status.value:<8} "
            f"{accounts.get(txn.account_id, 'Unknown'):<20} {txn.description[:40]:<40}"
        )


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_transactions)
