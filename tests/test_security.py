from datetime import timedelta

import jwt
import pytest
from flask import Flask

from blogfeed.errors import AuthError
from blogfeed.security import TokenService, get_token_service, hash_password, verify_password

from _helpers import SECRET


def _bare_app(secret, expires_in=timedelta(hours=1)):
    app = Flask(__name__)
    TokenService(secret, expires_in=expires_in).init_app(app)
    return app


def test_hash_is_salted_and_not_plaintext():
    first = hash_password('secret1')
    second = hash_password('secret1')
    assert 'secret1' not in first
    assert first.startswith('pbkdf2_sha256$200000$')
    assert first != second


def test_verify_password_accepts_right_and_rejects_wrong():
    stored = hash_password('secret1')
    assert verify_password('secret1', stored)
    assert not verify_password('secret2', stored)


@pytest.mark.parametrize('stored', ['', 'plaintext', 'md5$1$aa$bb', 'pbkdf2_sha256$x$zz$yy', None])
def test_verify_password_malformed_hash_is_false(stored):
    assert verify_password('secret1', stored) is False


def test_token_service_requires_key():
    with pytest.raises(ValueError):
        TokenService('')


def test_issue_and_verify_round_trip(app):
    with app.app_context():
        service = get_token_service()
        token = service.issue(42, 'a@x.com')
        identity = service.verify(token)
    assert identity.user_id == 42
    assert identity.email == 'a@x.com'


def test_token_expires_one_hour_after_issue(app):
    with app.app_context():
        token = get_token_service().issue(7, 'a@x.com')
    claims = jwt.decode(token, SECRET, algorithms=['HS256'])
    assert claims['sub'] == '7'
    assert claims['email'] == 'a@x.com'
    assert claims['exp'] - claims['iat'] == 3600


def test_expired_token_is_rejected():
    app = _bare_app(SECRET, expires_in=timedelta(seconds=-30))
    with app.app_context():
        service = get_token_service()
        token = service.issue(1, 'a@x.com')
        with pytest.raises(AuthError):
            service.verify(token)


def test_token_signed_with_other_key_is_rejected(app):
    other = _bare_app('some-other-signing-key-that-is-also-long')
    with other.app_context():
        foreign = get_token_service().issue(1, 'a@x.com')
    with app.app_context():
        with pytest.raises(AuthError):
            get_token_service().verify(foreign)


@pytest.mark.parametrize('token', [None, '', 'not-a-jwt', 'a.b.c'])
def test_malformed_token_is_rejected(app, token):
    with app.app_context():
        with pytest.raises(AuthError) as excinfo:
            get_token_service().verify(token)
    assert excinfo.value.status_code == 401


def test_missing_authorization_header(client):
    resp = client.get('/feed/posts')
    assert resp.status_code == 401
    assert resp.get_json() == {'message': 'Not authenticated'}


@pytest.mark.parametrize('header', ['Bearer', 'Bearer garbage', 'Bearer a.b.c'])
def test_bad_authorization_header_is_401(client, header):
    resp = client.get('/feed/posts', headers={'Authorization': header})
    assert resp.status_code == 401


def test_scheme_is_not_enforced(client, ann):
    _, token = ann
    resp = client.get('/feed/posts', headers={'Authorization': f'Token {token}'})
    assert resp.status_code == 200
