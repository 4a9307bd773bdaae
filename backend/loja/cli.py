# Overview: Flask CLI command groups for schema provisioning and account/grant inspection.

# backend/loja/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv and `pip install -e .`.
# - Set FLASK_APP (PowerShell: $env:FLASK_APP="loja:create_app").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, projection views, the GERENCIA /
#   FUNCIONARIO / CLIENTE groups and one account per group.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables and views (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all accounts with their group.
# - python -m flask users create --name "Maria" --group FUNCIONARIO
#   Create an account in a group.
#
# Grant inspection:
# - python -m flask perms list [--role FUNCIONARIO]
#   List grants (optionally for one role).
# - python -m flask perms check FUNCIONARIO ItensVenda INSERT
#   Check whether a role holds a grant.

import click
from flask.cli import with_appcontext

from .errors import LojaError
from .extensions import db
from .permissions import AccessRole, Operation, Resource, get_role_grants
from .services import account_service
from .services.permission_service import DEFAULT_POLICY, context_for_role


def _system_context():
    """CLI commands run as the store manager (gerencia)."""
    return context_for_role(AccessRole.MANAGER)


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the store database: schema, views, groups and default accounts.

    Creates:
    - Tables and indexes (Clientes, Funcionarios, Produtos, Vendas, ItensVenda, ...)
    - Views: v_produtos_cliente, v_produtos_funcionario
    - Groups: GERENCIA, FUNCIONARIO, CLIENTE
    - Accounts: gerencia, funcionario, cliente
    """
    click.echo("START Initializing store database...")

    db.create_all()
    click.echo("PASS Schema and projection views ready")

    groups = account_service.ensure_default_groups()
    click.echo(f"PASS Groups: {', '.join(g.name for g in groups)}")

    users = account_service.ensure_default_accounts()
    for user in users:
        click.echo(f"PASS Account: {user.name} (ID: {user.id}, group: {user.group.name})")

    click.echo("DONE Store database initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and views and recreate the schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to seed groups and accounts.")


@click.group('users')
def users_group():
    """Account management commands."""


@users_group.command('create')
@click.option('--name', prompt=True, help='Account name')
@click.option('--group', 'group_name', type=click.Choice(list(AccessRole.ALL)), prompt=True, help='Group (role)')
@with_appcontext
def create_user_cli(name, group_name):
    """Create an account in a group."""
    try:
        user = account_service.create_user(name, group_name, access=_system_context())
    except LojaError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user: {user.name} (ID: {user.id}) in group '{group_name}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all accounts with their group."""
    users = account_service.list_users(access=_system_context())

    click.echo(f"\n{'ID':<5} {'Name':<30} {'Group'}")
    click.echo("-" * 50)
    for user in users:
        click.echo(f"{user.id:<5} {user.name:<30} {user.group.name}")
    click.echo(f"\n Total: {len(users)} users\n")


@click.group('perms')
def perms_group():
    """Grant inspection commands."""


@perms_group.command('list')
@click.option('--role', type=click.Choice(list(AccessRole.ALL)), help='Filter by role')
@with_appcontext
def list_grants_cli(role):
    """List grants, optionally for a single role."""
    roles = [role] if role else list(AccessRole.ALL)
    grants = [grant for r in roles for grant in get_role_grants(r)]

    click.echo(f"\n{'Role':<14} {'Resource':<24} {'Operations':<30} {'Description'}")
    click.echo("-" * 100)
    for grant in grants:
        operations = ",".join(grant["operations"])
        click.echo(f"{grant['role']:<14} {grant['resource']:<24} {operations:<30} {grant['description']}")
    click.echo(f"\n Total: {len(grants)} grants\n")


@perms_group.command('check')
@click.argument('role', type=click.Choice(list(AccessRole.ALL)))
@click.argument('resource', type=click.Choice(list(Resource.ALL)))
@click.argument('operation', type=click.Choice(list(Operation.ALL), case_sensitive=False))
@with_appcontext
def check_grant_cli(role, resource, operation):
    """Check whether ROLE may run OPERATION on RESOURCE."""
    operation = operation.upper()
    if DEFAULT_POLICY.allows(role, resource, operation):
        click.echo(f"PASS {role} has {operation} on {resource}")
    else:
        click.echo(f"FAIL {role} lacks {operation} on {resource}")
        raise click.exceptions.Exit(1)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(perms_group)
