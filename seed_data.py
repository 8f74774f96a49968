"""Seed script to populate database with sample data."""

from datetime import date, timedelta
from decimal import Decimal
from banana_market import create_app
from banana_market.cli import seed_cultivars
from banana_market.extensions import db
from banana_market.models import (Cultivar, FarmProfile, Product, Profile,
                                  Role, User, UserRole)


def _create_user(email, password, full_name, roles, address=None):
    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.add(Profile(user=user, full_name=full_name, address=address))
    for role in roles:
        db.session.add(UserRole(user=user, role=role))
    return user


def seed_database():
    """Seed the database with sample data."""
    app = create_app()

    with app.app_context():
        # Create tables
        db.create_all()

        # Check if already seeded
        if User.query.filter_by(email='admin@bananamarket.local').first():
            print('Database already seeded!')
            return

        print('Seeding database...')
        seed_cultivars()

        _create_user('admin@bananamarket.local', 'admin123', 'Admin User',
                     [Role.USER, Role.ADMIN])

        farms_data = [
            {
                'user': ('somchai@example.com', 'farm123', 'Somchai Jaidee'),
                'farm': {
                    'farm_name': 'Suan Kluay Chanthaburi',
                    'farm_location': 'Chanthaburi',
                    'farm_description': 'Family farm growing Gros Michel and Lady Finger since 1998.',
                    'verified': True,
                },
                'products': [
                    {'name': 'Gros Michel bunch', 'cultivar': 'Gros Michel', 'product_type': 'fruit',
                     'price_per_unit': Decimal('45.00'), 'available_quantity': 120, 'harvest_in_days': 3},
                    {'name': 'Lady Finger hand', 'cultivar': 'Lady Finger', 'product_type': 'fruit',
                     'price_per_unit': Decimal('35.00'), 'available_quantity': 80, 'harvest_in_days': 1},
                    {'name': 'Gros Michel shoots', 'cultivar': 'Gros Michel', 'product_type': 'shoot',
                     'price_per_unit': Decimal('25.00'), 'available_quantity': 200, 'unit': 'shoot',
                     'harvest_in_days': 10},
                ],
            },
            {
                'user': ('malee@example.com', 'farm123', 'Malee Srisuk'),
                'farm': {
                    'farm_name': 'Baan Kluay Nam Wa',
                    'farm_location': 'Nakhon Pathom',
                    'farm_description': 'Organic plantain and red banana.',
                },
                'products': [
                    {'name': 'Plantain', 'cultivar': 'Plantain', 'product_type': 'fruit',
                     'price_per_unit': Decimal('20.00'), 'available_quantity': 300, 'harvest_in_days': 5},
                    {'name': 'Red banana', 'cultivar': 'Red Banana', 'product_type': 'fruit',
                     'price_per_unit': Decimal('60.00'), 'available_quantity': 40, 'harvest_in_days': 2},
                ],
            },
        ]

        for data in farms_data:
            email, password, full_name = data['user']
            farmer = _create_user(email, password, full_name, [Role.USER, Role.FARM])
            db.session.flush()
            db.session.add(FarmProfile(user_id=farmer.id, **data['farm']))

            for item in data['products']:
                cultivar = Cultivar.query.filter_by(name=item['cultivar']).first()
                db.session.add(Product(
                    farm_id=farmer.id,
                    cultivar_id=cultivar.id if cultivar else None,
                    name=item['name'],
                    product_type=item['product_type'],
                    price_per_unit=item['price_per_unit'],
                    available_quantity=item['available_quantity'],
                    unit=item.get('unit', 'kg'),
                    harvest_date=date.today() + timedelta(days=item['harvest_in_days']),
                ))

        _create_user('buyer@example.com', 'user123', 'Niran Buyer', [Role.USER],
                     address='99 Sukhumvit Rd, Bangkok 10110')

        db.session.commit()
        print('Database seeded successfully!')
        print('\nTest Accounts:')
        print('  Admin: admin@bananamarket.local / admin123')
        print('  Farm: somchai@example.com / farm123')
        print('  Buyer: buyer@example.com / user123')


if __name__ == '__main__':
    seed_database()
