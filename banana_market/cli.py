"""Flask CLI commands: sweeps for cron, seeding, and admin creation."""

import click
from flask.cli import AppGroup, with_appcontext
from banana_market.extensions import db
from banana_market.models import Cultivar, Profile, Role, User, UserRole
from banana_market.services import sweeps

sweep_cli = AppGroup('sweep', help='Run scheduled order sweeps.')

SAMPLE_CULTIVARS = [
    ('Gros Michel', 'กล้วยหอมทอง', 'The classic banana variety with sweet flavor and creamy texture',
     'Sweet, creamy, aromatic'),
    ('Cavendish', 'กล้วยหอม', 'Most commonly exported banana, resistant to Panama disease',
     'Sweet, firm, versatile'),
    ('Lady Finger', 'กล้วยเล็บมือนาง', 'Small, sweet bananas popular in Thai cuisine',
     'Small, very sweet, aromatic'),
    ('Red Banana', 'กล้วยหักมุก', 'Reddish-purple skin with sweet, creamy flesh',
     'Sweet, creamy, distinctive color'),
    ('Plantain', 'กล้วยน้ำว้า', 'Starchy cooking banana, used in savory dishes',
     'Starchy, firm, less sweet'),
]


def _report(stats):
    click.echo(f"{stats['message']} (checked {stats['checked']}, errors {stats['errors']})")
    if stats['errors']:
        raise SystemExit(1)


@sweep_cli.command('check-farm-confirm')
@click.option('--hours', type=int, default=None, help='Override the confirmation window.')
def check_farm_confirm(hours):
    """Cancel pending orders the farm did not confirm in time."""
    _report(sweeps.cancel_unconfirmed_orders(window_hours=hours))


@sweep_cli.command('auto-cancel-orders')
@click.option('--days', type=int, default=None, help='Override the post-harvest window.')
def auto_cancel_orders(days):
    """Cancel open orders past the post-harvest pickup window."""
    _report(sweeps.cancel_post_harvest_orders(window_days=days))


def seed_cultivars():
    """Insert the sample cultivars that are missing. Returns how many were added."""
    added = 0
    for name, thai_name, description, characteristics in SAMPLE_CULTIVARS:
        if Cultivar.query.filter_by(name=name).first():
            continue
        cultivar = Cultivar(
            name=name,
            thai_name=thai_name,
            description=description,
            characteristics=characteristics
        )
        cultivar.generate_slug()
        db.session.add(cultivar)
        db.session.flush()
        added += 1
    db.session.commit()
    return added


@click.command('seed-cultivars')
@with_appcontext
def seed_cultivars_command():
    """Load the sample cultivar knowledge base."""
    added = seed_cultivars()
    click.echo(f'Added {added} cultivars')


@click.command('create-admin')
@click.option('--email', required=True)
@click.option('--password', required=True)
@click.option('--name', required=True)
@with_appcontext
def create_admin(email, password, name):
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if user:
        user.add_role(Role.ADMIN)
        db.session.commit()
        click.echo(f'Granted admin to {user.email}')
        return

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.add(Profile(user=user, full_name=name))
    db.session.add(UserRole(user=user, role=Role.USER))
    db.session.add(UserRole(user=user, role=Role.ADMIN))
    db.session.commit()
    click.echo(f'Admin created: {user.id} {user.email}')


def register_cli(app):
    app.cli.add_command(sweep_cli)
    app.cli.add_command(seed_cultivars_command)
    app.cli.add_command(create_admin)
