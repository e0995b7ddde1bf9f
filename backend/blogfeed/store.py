# Persistence of users and posts
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from . import db
from .errors import AuthzError, NotFoundError, ValidationError
from .images import clear_image_logged, same_image
from .models import Post, User

# --- Users ---

def create_user(email, name, password_hash):
    if find_user_by_email(email) is not None:
        raise ValidationError('Email address already exists')
    user = User(email=email, name=name, password=password_hash)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        # Another request registered the same address between check and commit
        db.session.rollback()
        raise ValidationError('Email address already exists') from e
    current_app.logger.debug(f'Created user id={user.id}')
    return user


def find_user_by_email(email):
    return db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()


def find_user_by_id(user_id):
    return db.session.get(User, user_id)


def get_user(user_id):
    user = find_user_by_id(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user


def update_user_status(user_id, status):
    user = get_user(user_id)
    user.status = status
    db.session.commit()
    return user

# --- Posts ---

def count_posts():
    return db.session.scalar(db.select(db.func.count()).select_from(Post))


def list_posts(page, per_page):
    """One page of posts, newest first, creators loaded alongside."""
    query = (
        db.select(Post)
        .options(joinedload(Post.creator))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return db.session.execute(query).scalars().all()


def find_post(post_id):
    return db.session.get(Post, post_id)


def get_post(post_id):
    post = find_post(post_id)
    if post is None:
        raise NotFoundError('Could not find post')
    return post


def _owned_post(post_id, caller_id):
    post = get_post(post_id)
    if post.creator_id != caller_id:
        raise AuthzError('Not authorized')
    return post


def create_post(title, content, image_url, creator_id):
    creator = get_user(creator_id)
    post = Post(title=title, content=content, image_url=image_url)
    # Appending sets post.creator; post and user change in a single commit
    creator.posts.append(post)
    db.session.add(post)
    db.session.commit()
    current_app.logger.debug(f'Created post id={post.id} for user id={creator.id}')
    return post


def update_post(post_id, title, content, image_url, caller_id, uploaded=False):
    """Overwrite a post's fields.

    ``image_url`` is either a freshly stored upload (``uploaded=True``) or the
    reference the client echoed back, which must name the post's own image.
    """
    post = _owned_post(post_id, caller_id)
    if not uploaded:
        if not same_image(image_url, post.image_url):
            raise ValidationError('No image file picked')
        image_url = post.image_url
    elif not same_image(image_url, post.image_url):
        clear_image_logged(post.image_url)
    post.title = title
    post.content = content
    post.image_url = image_url
    db.session.commit()
    current_app.logger.debug(f'Updated post id={post.id}')
    return post


def delete_post(post_id, caller_id):
    post = _owned_post(post_id, caller_id)
    clear_image_logged(post.image_url)
    post.creator.posts.remove(post)
    db.session.delete(post)
    db.session.commit()
    current_app.logger.debug(f'Deleted post id={post_id}')
