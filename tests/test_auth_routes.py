import pytest

from blogfeed import store
from blogfeed.security import get_token_service

from _helpers import bearer, login, signup


def _params(resp):
    return {item['param'] for item in resp.get_json()['data']}


def test_signup_creates_user_with_hashed_password(client, app):
    resp = signup(client)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['message'] == 'User created'

    with app.app_context():
        user = store.find_user_by_id(int(body['userId']))
        assert user.email == 'a@x.com'
        assert user.name == 'Ann'
        assert user.password != 'secret1'
        assert user.password.startswith('pbkdf2_sha256$')


def test_signup_normalises_email_and_rejects_duplicates(client):
    assert signup(client, email='A@X.com').status_code == 201
    resp = signup(client, email='a@x.com', name='Another Ann')
    assert resp.status_code == 422
    assert resp.get_json()['data'] == [
        {'location': 'body', 'param': 'email', 'msg': 'Email address already exists'}
    ]


@pytest.mark.parametrize('payload, params', [
    ({'email': 'not-an-email', 'name': 'Ann', 'password': 'secret1'}, {'email'}),
    ({'email': 'a@x.com', 'name': 'Ann', 'password': ' abc  '}, {'password'}),
    ({'email': 'a@x.com', 'name': '   ', 'password': 'secret1'}, {'name'}),
    ({}, {'email', 'password', 'name'}),
])
def test_signup_validation(client, payload, params):
    resp = client.put('/auth/signup', json=payload)
    assert resp.status_code == 422
    assert resp.get_json()['message'] == 'Validation failed'
    assert _params(resp) == params


def test_login_returns_token_for_user(client, app):
    user_id = signup(client).get_json()['userId']
    resp = login(client)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['userId'] == user_id
    with app.app_context():
        identity = get_token_service().verify(body['token'])
    assert str(identity.user_id) == user_id
    assert identity.email == 'a@x.com'


def test_login_email_is_case_insensitive(client):
    signup(client)
    assert login(client, email='A@X.COM').status_code == 200


def test_login_unknown_email(client):
    resp = login(client, email='ghost@x.com')
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'A user with this email could not be found'


def test_login_wrong_password(client):
    signup(client)
    resp = login(client, password='secret2')
    assert resp.status_code == 401
    assert resp.get_json()['message'] == 'Wrong password'


def test_status_round_trip(client, ann):
    _, token = ann
    resp = client.get('/auth/status', headers=bearer(token))
    assert resp.status_code == 200
    assert resp.get_json() == {'status': 'I am new!'}

    resp = client.patch('/auth/status', json={'status': '  Busy writing  '}, headers=bearer(token))
    assert resp.status_code == 200
    assert resp.get_json() == {'message': 'User status updated'}

    assert client.get('/auth/status', headers=bearer(token)).get_json() == {'status': 'Busy writing'}


def test_status_is_per_user(client, ann, bob):
    client.patch('/auth/status', json={'status': 'Ann here'}, headers=bearer(ann[1]))
    assert client.get('/auth/status', headers=bearer(bob[1])).get_json() == {'status': 'I am new!'}


def test_empty_status_is_rejected(client, ann):
    resp = client.patch('/auth/status', json={'status': '   '}, headers=bearer(ann[1]))
    assert resp.status_code == 422


def test_status_requires_token(client):
    assert client.get('/auth/status').status_code == 401
    assert client.patch('/auth/status', json={'status': 'hi'}).status_code == 401


def test_status_of_vanished_user_is_404(client, app):
    with app.app_context():
        token = get_token_service().issue(999, 'ghost@x.com')
    resp = client.get('/auth/status', headers=bearer(token))
    assert resp.status_code == 404
    assert resp.get_json() == {'message': 'User not found'}
