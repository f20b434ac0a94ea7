"""Account management commands."""

import click
from bankcsv.cli.account_resolution import resolve_account_or_exit
from bankcsv.cli.error_handling import handle_domain_error
from bankcsv.cli.mapping_options import describe_mapping, mapping_options
from bankcsv.domain.account import AccountService
from bankcsv.domain.errors import DomainError
from bankcsv.domain.mapping import mapping_to_dict, merge_mapping


@click.group()
def account_group():
    """Manage import accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--institution", help="Bank or institution name (defaults to account name)")
@mapping_options
@click.pass_context
def create_account(ctx, name: str, institution: str | None, mapping_overrides: dict):
    """Create a new import account.

    A column mapping can be saved right away with the mapping options, or
    later with 'account map' or on the first import.

    Examples:
        bankcsv account create "Chase Checking" --institution Chase
        bankcsv account create "Savings" --date-column Date --date-format YYYY-MM-DD --amount-column Amount
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    institution_name = institution if institution is not None else name
    mapping = merge_mapping({}, mapping_overrides) if mapping_overrides else None

    try:
        account_id = service.create_account(name=name, institution=institution_name, mapping=mapping)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{name}' (ID: {account_id})")
    if institution is None:
        click.echo(f"Institution set to '{institution_name}'")
    if mapping is None:
        click.echo("No column mapping saved yet; it will be requested on first import.")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        synced = acc.last_synced_at.strftime("%Y-%m-%d %H:%M") if acc.last_synced_at else "never"
        mapped = "yes" if acc.column_mapping else "no"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Institution: {acc.institution:15s} "
            f"| Mapping: {mapped:3s} | Synced: {synced}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show an account and its saved column mapping.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    click.echo(f"Account: {acc.name} (ID: {acc.id})")
    click.echo(f"Institution: {acc.institution}")
    click.echo(f"Last synced: {acc.last_synced_at or 'never'}")
    if acc.column_mapping is None:
        click.echo("Column mapping: not configured")
        return
    click.echo("Column mapping:")
    for line in describe_mapping(mapping_to_dict(acc.column_mapping)):
        click.echo(line)


@account_group.command("map")
@click.argument("account", metavar="ACCOUNT")
@mapping_options
@click.pass_context
def map_account(ctx, account: str, mapping_overrides: dict):
    """Update the saved column mapping of an account.

    Options not given keep their saved value.

    Examples:
        bankcsv account map "Chase Checking" --date-format DD/MM/YYYY
        bankcsv account map 1 --debit-column "Money Out" --credit-column "Money In"
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    if not mapping_overrides:
        click.echo("Error: No mapping options given", err=True)
        ctx.exit(1)

    acc = service.get_account(account_id)
    base = mapping_to_dict(acc.column_mapping) if acc.column_mapping else {}
    try:
        saved = service.update_account_mapping(account_id, merge_mapping(base, mapping_overrides))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated column mapping for '{acc.name}':")
    for line in describe_mapping(mapping_to_dict(saved)):
        click.echo(line)


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--institution", help="New institution name (optional)")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, institution: str | None) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name, institution=institution)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed account to '{new_name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. Accounts with imported
    transactions cannot be deleted.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    # Confirm deletion
    if not click.confirm(f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
