import click

from .database import create_admin, init_db, seed_data

@click.group()
def cli():
    pass

cli.add_command(init_db,"init-db")
cli.add_command(seed_data,"seed")
cli.add_command(create_admin,"create-admin")

if __name__ == '__main__':
    cli()
