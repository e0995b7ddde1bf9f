# Request field checks; failures collect into one ValidationError
from email_validator import EmailNotValidError, validate_email

from .errors import ValidationError
from .store import find_user_by_email

MIN_TEXT_LENGTH = 5
MIN_PASSWORD_LENGTH = 5


def _field_error(param, msg):
    return {'location': 'body', 'param': param, 'msg': msg}


def _text(body, key):
    value = body.get(key)
    return value.strip() if isinstance(value, str) else ''


def normalize_email(value):
    """Validate an email address and return it lower cased, or None if invalid."""
    if not isinstance(value, str):
        return None
    try:
        return validate_email(value.strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        return None


def validate_post_fields(body):
    """Return trimmed (title, content) or raise ValidationError."""
    title = _text(body, 'title')
    content = _text(body, 'content')
    errors = []
    if len(title) < MIN_TEXT_LENGTH:
        errors.append(_field_error('title', f'Must be at least {MIN_TEXT_LENGTH} characters long'))
    if len(content) < MIN_TEXT_LENGTH:
        errors.append(_field_error('content', f'Must be at least {MIN_TEXT_LENGTH} characters long'))
    if errors:
        raise ValidationError('Validation failed, entered data is incorrect', data=errors)
    return title, content


def validate_signup(body):
    """Return (email, name, password) ready for account creation or raise ValidationError."""
    errors = []
    email = normalize_email(body.get('email'))
    if email is None:
        errors.append(_field_error('email', 'Please enter a valid email.'))
    elif find_user_by_email(email) is not None:
        errors.append(_field_error('email', 'Email address already exists'))

    password = _text(body, 'password')
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(_field_error('password', f'Must be at least {MIN_PASSWORD_LENGTH} characters long'))

    name = _text(body, 'name')
    if not name:
        errors.append(_field_error('name', 'Must not be empty'))

    if errors:
        raise ValidationError('Validation failed', data=errors)
    return email, name, password


def validate_status(body):
    status = _text(body, 'status')
    if not status:
        raise ValidationError('Validation failed', data=[_field_error('status', 'Must not be empty')])
    return status


def parse_page(raw):
    """Page number from the query string; missing means the first page."""
    if raw is None or raw == '':
        return 1
    try:
        page = int(raw)
    except (TypeError, ValueError):
        page = 0
    if page < 1:
        raise ValidationError(
            'Validation failed',
            data=[{'location': 'query', 'param': 'page', 'msg': 'Must be a positive integer'}],
        )
    return page
