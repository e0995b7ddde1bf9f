# Password hashing, signed identity tokens and the auth decorator
from collections import namedtuple
from datetime import timedelta
from functools import wraps
import logging
import secrets

from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from flask import current_app, g, request
from flask_jwt_extended import JWTManager, create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from .errors import AuthError

HASH_SCHEME = 'pbkdf2_sha256'
HASH_ITERATIONS = 200_000
SALT_BYTES = 16

TOKEN_SERVICE_KEY = 'blogfeed.tokens'

Identity = namedtuple('Identity', ['user_id', 'email'])

# --- Password hashing (PBKDF2-HMAC-SHA256) ---

def _derive_key(password: str, salt: bytes, iterations: int = HASH_ITERATIONS) -> bytes:
    logging.debug(f'Deriving key with PBKDF2: iterations={iterations}, salt_len={len(salt)}')
    return PBKDF2(password, salt, dkLen=32, count=iterations, hmac_hash_module=SHA256)


def hash_password(password: str) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>`` for storage."""
    salt = get_random_bytes(SALT_BYTES)
    digest = _derive_key(password, salt)
    return f'{HASH_SCHEME}${HASH_ITERATIONS}${salt.hex()}${digest.hex()}'


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest_hex = stored.split('$')
        if scheme != HASH_SCHEME:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        candidate = _derive_key(password, salt, int(iterations))
    except (AttributeError, ValueError):
        logging.debug('Stored password hash is malformed')
        return False
    return secrets.compare_digest(candidate, expected)

# --- Signed identity tokens ---

class TokenService:
    """Issues and verifies signed, time limited identity tokens.

    The signing key is handed in at construction and served to
    flask-jwt-extended through its key loaders, so every app bound to a
    service signs with that service's key only.
    """

    def __init__(self, secret_key, expires_in=timedelta(hours=1)):
        if not secret_key:
            raise ValueError('A token signing key must be provided')
        self._secret_key = secret_key
        self.expires_in = expires_in
        self._jwt = JWTManager()
        self._jwt.encode_key_loader(self._signing_key)
        self._jwt.decode_key_loader(self._verifying_key)

    def _signing_key(self, identity):
        return self._secret_key

    def _verifying_key(self, jwt_header, jwt_data):
        return self._secret_key

    def init_app(self, app):
        self._jwt.init_app(app)
        app.extensions[TOKEN_SERVICE_KEY] = self

    def issue(self, user_id, email) -> str:
        token = create_access_token(
            identity=str(user_id),
            additional_claims={'email': email},
            expires_delta=self.expires_in,
        )
        logging.debug(f'Issued token for user_id={user_id}')
        return token

    def verify(self, token) -> Identity:
        if not token:
            raise AuthError('Not authenticated')
        try:
            claims = decode_token(token)
            user_id = int(claims['sub'])
        except (PyJWTError, JWTExtendedException, KeyError, ValueError) as e:
            logging.debug(f'Token verification failed: {type(e).__name__}')
            raise AuthError('Not authenticated') from e
        return Identity(user_id, claims.get('email'))


def get_token_service(app=None) -> TokenService:
    app = app or current_app
    return app.extensions[TOKEN_SERVICE_KEY]

# --- Authorization middleware ---

def is_auth(view):
    """Reject the request unless it carries a valid token; expose the caller as ``g.user_id``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        auth_value = request.headers.get('Authorization')
        if not auth_value:
            raise AuthError('Not authenticated')

        # Second whitespace separated segment; the scheme itself is not checked
        parts = auth_value.split()
        token = parts[1] if len(parts) > 1 else None

        identity = get_token_service().verify(token)
        g.user_id = identity.user_id
        return view(*args, **kwargs)

    return wrapper
