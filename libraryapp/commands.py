"""
Flask CLI commands for database maintenance.

    flask --app libraryapp init-db [--sample-data]
    flask --app libraryapp clear-users
    flask --app libraryapp list-users
"""

import logging

import click
from flask import Flask

from libraryapp.db.database import get_db_session, init_db
from libraryapp.db.userdb import SqlAlchemyUserStore

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    ("Demo User", 30),
    ("Test User", None),
]


def register_commands(app: Flask) -> None:
    """Register the user maintenance commands on app.cli."""

    @app.cli.command("init-db")
    @click.option(
        "--sample-data", is_flag=True, help="Insert sample users after creating tables"
    )
    def init_db_command(sample_data):
        """Create the users table, optionally with sample users."""
        init_db()
        click.echo("✓ Schema applied successfully")

        if sample_data:
            with get_db_session() as db:
                created = SqlAlchemyUserStore(db).insert_all(SAMPLE_USERS)
                click.echo(f"✓ Created {len(created)} sample users")

    @app.cli.command("clear-users")
    def clear_users_command():
        """Delete every user."""
        with get_db_session() as db:
            SqlAlchemyUserStore(db).delete_all()
        logger.info("All users deleted from the command line")
        click.echo("✓ All users deleted")

    @app.cli.command("list-users")
    def list_users_command():
        """Print every user as id, name and age."""
        with get_db_session() as db:
            users = SqlAlchemyUserStore(db).find_all()
            for user in sorted(users, key=lambda u: u.id):
                age = "-" if user.age is None else user.age
                click.echo(f"{user.id}\t{user.name}\t{age}")
            click.echo(f"{len(users)} users")
