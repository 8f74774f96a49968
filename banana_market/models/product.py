"""Product model."""

from datetime import datetime
from banana_market.extensions import db


class ProductType:
    SHOOT = 'shoot'
    FRUIT = 'fruit'

    ALL = (SHOOT, FRUIT)


class Product(db.Model):
    """Product listed by a farm."""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    farm_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    cultivar_id = db.Column(db.Integer, db.ForeignKey('cultivars.id'))
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    product_type = db.Column(db.String(10), nullable=False)  # shoot, fruit
    price_per_unit = db.Column(db.Numeric(10, 2), nullable=False)
    available_quantity = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(20), nullable=False, default='kg')
    harvest_date = db.Column(db.Date, nullable=False)
    expiry_date = db.Column(db.Date)
    image_url = db.Column(db.String(255))
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    farm = db.relationship('User', foreign_keys=[farm_id])
    orders = db.relationship('Order', backref='product', lazy='dynamic')

    @property
    def farm_profile(self):
        return self.farm.farm_profile if self.farm else None

    def is_in_stock(self):
        """Check if product is in stock."""
        return self.available_quantity > 0 and self.is_active

    def reduce_stock(self, quantity):
        """Reduce stock by given quantity."""
        if self.available_quantity >= quantity:
            self.available_quantity -= quantity
            return True
        return False

    def restore_stock(self, quantity):
        self.available_quantity += quantity

    def to_dict(self):
        farm = self.farm_profile
        return {
            'id': self.id,
            'farm_id': self.farm_id,
            'cultivar_id': self.cultivar_id,
            'name': self.name,
            'description': self.description,
            'product_type': self.product_type,
            'price_per_unit': str(self.price_per_unit),
            'available_quantity': self.available_quantity,
            'unit': self.unit,
            'harvest_date': self.harvest_date.isoformat() if self.harvest_date else None,
            'expiry_date': self.expiry_date.isoformat() if self.expiry_date else None,
            'image_url': self.image_url,
            'is_active': bool(self.is_active),
            'farm': {
                'farm_name': farm.farm_name,
                'farm_location': farm.farm_location,
            } if farm else None,
        }

    def __repr__(self):
        return f'<Product {self.name}>'
