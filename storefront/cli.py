# Flask CLI commands (run with: flask --app storefront.app <command>)
#
# - flask init-db
#   Create all tables.
# - flask create-admin --email admin@shop.local --firstname Store --lastname Admin
#   Create an admin account (prompts for the password).
# - flask promote-user someone@shop.local [--role admin|user]
#   Change the role of an existing account.
# - flask purge-sessions
#   Delete expired sessions.

import click
from flask import current_app
from flask.cli import with_appcontext

from storefront.models.database import db
from storefront.services.auth_service import AuthService, ROLES
from storefront.services.errors import StoreError


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all database tables."""
    db.create_all()
    click.echo("Database initialized.")


@click.command("create-admin")
@with_appcontext
@click.option("--email", prompt=True, help="Email address")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Password")
@click.option("--firstname", default="Store", show_default=True)
@click.option("--lastname", default="Admin", show_default=True)
def create_admin_command(email, password, firstname, lastname):
    """Create an admin account."""
    try:
        user = AuthService.register_user(
            firstname=firstname,
            lastname=lastname,
            email=email,
            password=password,
            role="admin",
        )
    except StoreError as e:
        raise click.ClickException(e.message)
    click.echo(f"Admin {user.email} created.")


@click.command("promote-user")
@with_appcontext
@click.argument("email")
@click.option("--role", type=click.Choice(ROLES), default="admin", show_default=True)
def promote_user_command(email, role):
    """Set the role of an existing user."""
    try:
        user = AuthService.set_role(email, role)
    except StoreError as e:
        raise click.ClickException(e.message)
    click.echo(f"{user.email} is now {user.role}.")


@click.command("purge-sessions")
@with_appcontext
def purge_sessions_command():
    """Delete expired sessions."""
    removed = current_app.extensions["session_store"].purge_expired()
    click.echo(f"Removed {removed} expired session(s).")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_admin_command)
    app.cli.add_command(promote_user_command)
    app.cli.add_command(purge_sessions_command)
