"""Order and Reservation models."""

from datetime import datetime
from banana_market.extensions import db


class OrderStatus:
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'
    REVIEWED = 'reviewed'

    ALL = (PENDING, CONFIRMED, SHIPPED, DELIVERED, CANCELLED, REVIEWED)
    CANCELLABLE = (PENDING, CONFIRMED)
    TERMINAL = (CANCELLED, REVIEWED)


class Order(db.Model):
    """Order placed by a buyer for a single farm product."""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    farm_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    # Status
    status = db.Column(db.String(20), nullable=False, default=OrderStatus.PENDING, index=True)

    # Shipping
    tracking_number = db.Column(db.String(100))
    carrier = db.Column(db.String(100))
    delivery_address = db.Column(db.Text, nullable=False)
    delivery_notes = db.Column(db.Text)

    cancellation_reason = db.Column(db.String(500))

    # Timestamps
    confirmed_at = db.Column(db.DateTime)
    shipped_at = db.Column(db.DateTime)
    delivered_at = db.Column(db.DateTime)
    cancelled_at = db.Column(db.DateTime)
    reviewed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    farm = db.relationship('User', foreign_keys=[farm_id])
    reservation = db.relationship('Reservation', backref='order', uselist=False, cascade='all, delete-orphan')
    review = db.relationship('Review', backref='order', uselist=False)

    def can_cancel(self):
        """Check if order can be cancelled."""
        return self.status in OrderStatus.CANCELLABLE

    def to_dict(self):
        product = self.product
        return {
            'id': self.id,
            'user_id': self.user_id,
            'farm_id': self.farm_id,
            'product_id': self.product_id,
            'product': {
                'name': product.name,
                'product_type': product.product_type,
                'harvest_date': product.harvest_date.isoformat(),
            } if product else None,
            'quantity': self.quantity,
            'total_price': str(self.total_price),
            'status': self.status,
            'tracking_number': self.tracking_number,
            'carrier': self.carrier,
            'delivery_address': self.delivery_address,
            'delivery_notes': self.delivery_notes,
            'cancellation_reason': self.cancellation_reason,
            'confirmed_at': _iso(self.confirmed_at),
            'shipped_at': _iso(self.shipped_at),
            'delivered_at': _iso(self.delivered_at),
            'cancelled_at': _iso(self.cancelled_at),
            'reviewed_at': _iso(self.reviewed_at),
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Order {self.id} {self.status}>'


class Reservation(db.Model):
    """Stock held for an order until the farm confirms or it is released."""
    __tablename__ = 'reservations'

    HELD = 'held'
    CONFIRMED = 'confirmed'
    RELEASED = 'released'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=HELD)
    expires_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'quantity': self.quantity,
            'status': self.status,
            'expires_at': _iso(self.expires_at),
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Reservation {self.order_id} {self.status}>'


def _iso(value):
    return value.isoformat() if value else None
