# Database models (User, Post)
from datetime import datetime, timezone

from . import db

DEFAULT_STATUS = 'I am new!'


def _utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)  # salted hash, never plaintext
    name = db.Column(db.String(120), nullable=False)
    status = db.Column(db.String(255), nullable=False, default=DEFAULT_STATUS)

    posts = db.relationship(
        'Post',
        back_populates='creator',
        order_by='Post.id',
        cascade='all, delete-orphan',
    )

    def to_public_dict(self):
        return {
            '_id': str(self.id),
            'name': self.name,
            'email': self.email,
            'status': self.status,
        }

    def __repr__(self):
        return f'<User {self.email}>'


class Post(db.Model):
    __tablename__ = 'posts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(512), nullable=False)
    creator_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    creator = db.relationship('User', back_populates='posts')

    def to_dict(self):
        return {
            '_id': str(self.id),
            'title': self.title,
            'content': self.content,
            'imageUrl': self.image_url,
            'creator': self.creator.to_public_dict() if self.creator else str(self.creator_id),
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Post {self.id} title={self.title!r}>'
