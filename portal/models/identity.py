"""
Identity Model

Sign-in principal. Its profile row is created by portal.triggers.
"""

from flask_login import UserMixin

from portal.extensions import db
from portal.models.base import new_id, utcnow


class Identity(UserMixin, db.Model):
    """Authenticated principal (email + password)"""
    __tablename__ = 'identities'
    
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    # Registration metadata copied into the profile
    full_name = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    profile = db.relationship('Profile', backref='identity', uselist=False,
                              cascade='all, delete-orphan', passive_deletes=True)
    
    def __repr__(self):
        return f'<Identity {self.email}>'
