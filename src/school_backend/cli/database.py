import click

from school_backend.database import get_db, get_engine
from school_backend.model import Base
from school_backend.seeder import seed, seed_admin


@click.command()
def init_db():
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(get_engine())
    click.echo("Database schema created")


@click.command("seed")
def seed_data():
    """Seed permissions, built-in roles and the admin account."""
    db = next(get_db())
    try:
        seed(db)
    finally:
        db.close()
    click.echo("Seeding completed")


@click.command()
@click.option("--email", "-e", "email", prompt=True)
@click.option("--username", "-u", "username", prompt=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True, confirmation_prompt=True)
def create_admin(email, username, password):
    """Create an additional administrator account."""
    db = next(get_db())
    try:
        admin = seed_admin(db, email=email, username=username, password=password)
        click.echo(f"Admin user {admin.username} ready")
    finally:
        db.close()
