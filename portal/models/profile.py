"""
Profile and RoleAssignment Models
"""

import enum

from portal.extensions import db
from portal.models.base import TimestampMixin, new_id, utcnow


class AppRole(str, enum.Enum):
    ADMIN = 'admin'
    USER = 'user'


class Profile(TimestampMixin, db.Model):
    """Public profile, one per identity"""
    __tablename__ = 'profiles'
    
    id = db.Column(db.String(36), db.ForeignKey('identities.id', ondelete='CASCADE'),
                   primary_key=True)
    email = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255))
    avatar_url = db.Column(db.String(500))
    
    roles = db.relationship('RoleAssignment', backref='profile', lazy=True,
                            cascade='all, delete-orphan', passive_deletes=True)
    
    def __repr__(self):
        return f'<Profile {self.email}>'


class RoleAssignment(db.Model):
    """Grants a role to a profile; (profile, role) is unique"""
    __tablename__ = 'role_assignments'
    __table_args__ = (
        db.UniqueConstraint('profile_id', 'role', name='uq_role_assignments_profile_role'),
    )
    
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    profile_id = db.Column(db.String(36), db.ForeignKey('profiles.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    role = db.Column(db.Enum(AppRole, name='app_role',
                             values_callable=lambda roles: [r.value for r in roles]),
                     nullable=False, default=AppRole.USER)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    def __repr__(self):
        return f'<RoleAssignment {self.profile_id}:{self.role.value}>'
