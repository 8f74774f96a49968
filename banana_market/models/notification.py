"""Notification model."""

from datetime import datetime
from banana_market.extensions import db


class NotificationType:
    NEW_ORDER = 'new_order'
    ORDER_CONFIRMED = 'order_confirmed'
    ORDER_SHIPPED = 'order_shipped'
    ORDER_DELIVERED = 'order_delivered'
    ORDER_CANCELLED = 'order_cancelled'
    ORDER_REVIEWED = 'order_reviewed'
    CONFIRMATION_MISSED = 'confirmation_missed'
    FARM_UPGRADE = 'farm_upgrade'


class Notification(db.Model):
    """User notifications."""
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(50), nullable=False)
    is_read = db.Column(db.Boolean, default=False)
    related_order_id = db.Column(db.Integer, db.ForeignKey('orders.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def create_order_notification(user_id, order_id, status):
        """Create an order status notification for the buyer."""
        status_messages = {
            'confirmed': ('Order Confirmed', 'Your order has been confirmed by the farm!'),
            'shipped': ('Order Shipped', 'Your order is on its way!'),
            'delivered': ('Order Delivered', 'Your order has been delivered. Enjoy!'),
            'cancelled': ('Order Cancelled', 'Your order has been cancelled.'),
        }
        title, message = status_messages.get(
            status, ('Order Updated', f'Order status updated to: {status}')
        )
        return Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=f'order_{status}',
            related_order_id=order_id
        )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'message': self.message,
            'type': self.type,
            'is_read': bool(self.is_read),
            'related_order_id': self.related_order_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Notification {self.title}>'
