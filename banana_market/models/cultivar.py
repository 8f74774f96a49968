"""Banana cultivar knowledge base model."""

from datetime import datetime
from slugify import slugify
from banana_market.extensions import db


class Cultivar(db.Model):
    """Banana cultivar."""
    __tablename__ = 'cultivars'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    thai_name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    characteristics = db.Column(db.Text)
    growing_conditions = db.Column(db.Text)
    uses = db.Column(db.Text)
    image_url = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = db.relationship('Product', backref='cultivar', lazy='dynamic')

    def generate_slug(self):
        """Generate a unique slug for the cultivar."""
        base_slug = slugify(self.name) if self.name else 'cultivar'
        slug = base_slug
        counter = 1
        while Cultivar.query.filter(Cultivar.slug == slug, Cultivar.id != self.id).first() is not None:
            slug = f"{base_slug}-{counter}"
            counter += 1
        self.slug = slug

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'thai_name': self.thai_name,
            'slug': self.slug,
            'description': self.description,
            'characteristics': self.characteristics,
            'growing_conditions': self.growing_conditions,
            'uses': self.uses,
            'image_url': self.image_url,
        }

    def __repr__(self):
        return f'<Cultivar {self.name}>'
