import pytest

from blogfeed import create_app, db

from _helpers import SECRET, register


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / 'images'
    path.mkdir()
    return path


@pytest.fixture
def app(tmp_path, upload_dir):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'JWT_SECRET_KEY': SECRET,
        'UPLOAD_FOLDER': str(upload_dir),
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ann(client):
    return register(client)


@pytest.fixture
def bob(client):
    return register(client, email='b@x.com', name='Bob', password='hunter22')
