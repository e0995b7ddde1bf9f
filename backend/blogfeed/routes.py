# All API routes are in this one file
from flask import Blueprint, current_app, g, jsonify, request, send_from_directory

from . import store
from .errors import AuthError, ValidationError
from .images import accept_image, clear_image_logged
from .security import get_token_service, hash_password, is_auth, verify_password
from .validation import (
    normalize_email,
    parse_page,
    validate_post_fields,
    validate_signup,
    validate_status,
)

feed = Blueprint('feed', __name__)
auth = Blueprint('auth', __name__)
site = Blueprint('site', __name__)


def _body():
    # JSON bodies for auth calls, multipart form fields for posts
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


@site.route('/health', methods=['GET'])
def health():
    current_app.logger.debug('GET /health invoked')
    return jsonify({'status': 'ok'}), 200


@site.route('/images/<path:filename>', methods=['GET'])
def serve_image(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)

# --- Feed ---

@feed.route('/posts', methods=['GET'])
@is_auth
def get_posts():
    current_app.logger.debug('GET /feed/posts invoked')
    page = parse_page(request.args.get('page'))
    per_page = current_app.config['POSTS_PER_PAGE']

    total_items = store.count_posts()
    posts = store.list_posts(page, per_page)
    return jsonify({
        'message': 'Fetched posts successfully',
        'posts': [post.to_dict() for post in posts],
        'totalItems': total_items,
    }), 200


@feed.route('/post', methods=['POST'])
@is_auth
def create_post():
    current_app.logger.debug('POST /feed/post invoked')
    title, content = validate_post_fields(_body())

    image_url = accept_image(request.files.get('image'))
    if not image_url:
        raise ValidationError('No image provided')

    try:
        post = store.create_post(title, content, image_url, g.user_id)
    except Exception:
        clear_image_logged(image_url)
        raise

    creator = post.creator
    return jsonify({
        'message': 'Post created successfully',
        'post': post.to_dict(),
        'creator': {'_id': str(creator.id), 'name': creator.name},
    }), 201


@feed.route('/post/<int:post_id>', methods=['GET'])
@is_auth
def get_post(post_id):
    current_app.logger.debug(f'GET /feed/post/{post_id} invoked')
    post = store.get_post(post_id)
    return jsonify({'message': 'Post fetched', 'post': post.to_dict()}), 200


@feed.route('/post/<int:post_id>', methods=['PUT'])
@is_auth
def update_post(post_id):
    current_app.logger.debug(f'PUT /feed/post/{post_id} invoked')
    body = _body()
    title, content = validate_post_fields(body)

    # A new upload wins over the existing reference echoed back by the client
    uploaded_url = accept_image(request.files.get('image'))
    image_url = uploaded_url or body.get('image')
    if not image_url or not isinstance(image_url, str):
        raise ValidationError('No image file picked')

    try:
        post = store.update_post(post_id, title, content, image_url, g.user_id,
                                 uploaded=bool(uploaded_url))
    except Exception:
        if uploaded_url:
            clear_image_logged(uploaded_url)
        raise

    return jsonify({'message': 'Post updated', 'post': post.to_dict()}), 200


@feed.route('/post/<int:post_id>', methods=['DELETE'])
@is_auth
def delete_post(post_id):
    current_app.logger.debug(f'DELETE /feed/post/{post_id} invoked')
    store.delete_post(post_id, g.user_id)
    return jsonify({'message': 'Deleted post'}), 200

# --- Auth ---

@auth.route('/signup', methods=['PUT'])
def signup():
    current_app.logger.debug('PUT /auth/signup invoked')
    email, name, password = validate_signup(_body())
    user = store.create_user(email, name, hash_password(password))
    return jsonify({'message': 'User created', 'userId': str(user.id)}), 201


@auth.route('/login', methods=['POST'])
def login():
    current_app.logger.debug('POST /auth/login invoked')
    body = _body()
    email = normalize_email(body.get('email'))
    password = body.get('password')
    password = password.strip() if isinstance(password, str) else ''

    user = store.find_user_by_email(email) if email else None
    if user is None:
        raise AuthError('A user with this email could not be found')
    if not verify_password(password, user.password):
        raise AuthError('Wrong password')

    token = get_token_service().issue(user.id, user.email)
    return jsonify({'token': token, 'userId': str(user.id)}), 200


@auth.route('/status', methods=['GET'])
@is_auth
def get_user_status():
    current_app.logger.debug('GET /auth/status invoked')
    user = store.get_user(g.user_id)
    return jsonify({'status': user.status}), 200


@auth.route('/status', methods=['PATCH'])
@is_auth
def update_user_status():
    current_app.logger.debug('PATCH /auth/status invoked')
    status = validate_status(_body())
    store.update_user_status(g.user_id, status)
    return jsonify({'message': 'User status updated'}), 200
