"""User, Profile and UserRole models."""

from datetime import datetime
from flask_login import UserMixin
from banana_market.extensions import db, bcrypt


class Role:
    """Account roles."""
    USER = 'user'
    FARM = 'farm'
    ADMIN = 'admin'

    ALL = (USER, FARM, ADMIN)


class User(UserMixin, db.Model):
    """Login account for buyers, farms, and admins."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    profile = db.relationship('Profile', backref='user', uselist=False, cascade='all, delete-orphan')
    roles = db.relationship('UserRole', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    farm_profile = db.relationship('FarmProfile', backref='owner', uselist=False, cascade='all, delete-orphan')
    orders = db.relationship('Order', backref='buyer', lazy='dynamic', foreign_keys='Order.user_id')
    notifications = db.relationship('Notification', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        """Hash and set the password."""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if password matches."""
        return bcrypt.check_password_hash(self.password_hash, password)

    def has_role(self, role):
        """Check if the user holds the given role."""
        return self.roles.filter_by(role=role).first() is not None

    def add_role(self, role):
        """Grant a role unless it is already held."""
        if not self.has_role(role):
            db.session.add(UserRole(user=self, role=role))

    def role_names(self):
        return sorted(r.role for r in self.roles)

    def is_admin(self):
        return self.has_role(Role.ADMIN)

    def is_farm(self):
        return self.has_role(Role.FARM)

    @property
    def display_name(self):
        return self.profile.full_name if self.profile else self.email

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'roles': self.role_names(),
            'profile': self.profile.to_dict() if self.profile else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'


class Profile(db.Model):
    """Public profile, one per user."""
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    full_name = db.Column(db.String(100), nullable=False, default='User')
    phone = db.Column(db.String(20))
    address = db.Column(db.Text)
    avatar_url = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'full_name': self.full_name,
            'phone': self.phone,
            'address': self.address,
            'avatar_url': self.avatar_url,
        }

    def __repr__(self):
        return f'<Profile {self.full_name}>'


class UserRole(db.Model):
    """Role granted to a user. A user may hold several."""
    __tablename__ = 'user_roles'
    __table_args__ = (db.UniqueConstraint('user_id', 'role', name='uq_user_roles_user_role'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=Role.USER)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<UserRole {self.role}>'
