"""Farm profile and farm upgrade request models."""

from datetime import datetime
from decimal import Decimal
from banana_market.extensions import db


class FarmProfile(db.Model):
    """Additional info for farm users."""
    __tablename__ = 'farm_profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    farm_name = db.Column(db.String(150), nullable=False)
    farm_description = db.Column(db.Text)
    farm_location = db.Column(db.String(255), nullable=False)
    farm_image_url = db.Column(db.String(255))
    total_sales = db.Column(db.Numeric(10, 2), default=0)
    rating = db.Column(db.Numeric(2, 1), default=0)
    total_reviews = db.Column(db.Integer, default=0)
    verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def update_rating(self):
        """Recompute farm rating from the reviews it received."""
        from .review import Review
        reviews = Review.query.filter_by(farm_id=self.user_id).all()
        if reviews:
            average = sum(r.rating for r in reviews) / len(reviews)
            self.rating = Decimal(str(round(average, 1)))
            self.total_reviews = len(reviews)
        else:
            self.rating = Decimal('0')
            self.total_reviews = 0

    def record_sale(self, amount):
        self.total_sales = (self.total_sales or Decimal('0')) + amount

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'farm_name': self.farm_name,
            'farm_description': self.farm_description,
            'farm_location': self.farm_location,
            'farm_image_url': self.farm_image_url,
            'total_sales': str(self.total_sales or 0),
            'rating': float(self.rating or 0),
            'total_reviews': self.total_reviews or 0,
            'verified': bool(self.verified),
        }

    def __repr__(self):
        return f'<FarmProfile {self.farm_name}>'


class FarmUpgradeRequest(db.Model):
    """A user's request to become a farm, reviewed by an admin."""
    __tablename__ = 'farm_upgrade_requests'

    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    farm_name = db.Column(db.String(150), nullable=False)
    farm_location = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=PENDING)
    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id'))
    reviewed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User', foreign_keys=[user_id])

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'farm_name': self.farm_name,
            'farm_location': self.farm_location,
            'description': self.description,
            'status': self.status,
            'reviewed_by': self.reviewed_by,
            'reviewed_at': self.reviewed_at.isoformat() if self.reviewed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<FarmUpgradeRequest {self.farm_name} {self.status}>'
