"""Database models package."""

from .user import User, Profile, UserRole, Role
from .farm import FarmProfile, FarmUpgradeRequest
from .cultivar import Cultivar
from .product import Product, ProductType
from .order import Order, OrderStatus, Reservation
from .review import Review
from .notification import Notification, NotificationType

__all__ = [
    'User',
    'Profile',
    'UserRole',
    'Role',
    'FarmProfile',
    'FarmUpgradeRequest',
    'Cultivar',
    'Product',
    'ProductType',
    'Order',
    'OrderStatus',
    'Reservation',
    'Review',
    'Notification',
    'NotificationType',
]
