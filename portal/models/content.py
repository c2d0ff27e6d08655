"""
Content Models

News, staff and activities shown on the public site. created_by is nulled
when the authoring profile goes away; the content itself stays.
"""

from portal.extensions import db
from portal.models.base import TimestampMixin, new_id, utcnow


def _creator_column():
    return db.Column(db.String(36), db.ForeignKey('profiles.id', ondelete='SET NULL'),
                     nullable=True, index=True)


class NewsItem(TimestampMixin, db.Model):
    """News post"""
    __tablename__ = 'news_items'
    
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    body = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(500))
    published_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    created_by = _creator_column()
    
    def __repr__(self):
        return f'<NewsItem {self.title}>'


class StaffMember(TimestampMixin, db.Model):
    """Staff directory entry"""
    __tablename__ = 'staff_members'
    
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    full_name = db.Column(db.String(255), nullable=False)
    position = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(255))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    image_url = db.Column(db.String(500))
    bio = db.Column(db.Text)
    created_by = _creator_column()
    
    def __repr__(self):
        return f'<StaffMember {self.full_name}>'


class Activity(TimestampMixin, db.Model):
    """Scheduled activity or event"""
    __tablename__ = 'activities'
    
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    scheduled_at = db.Column(db.DateTime, nullable=False, index=True)
    location = db.Column(db.String(255))
    image_url = db.Column(db.String(500))
    created_by = _creator_column()
    
    def __repr__(self):
        return f'<Activity {self.title} at {self.scheduled_at}>'
