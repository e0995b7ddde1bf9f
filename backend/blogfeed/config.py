# Configuration settings
import os
from dotenv import load_dotenv

# Pull variables from a local .env file into the environment
load_dotenv()


def _csv(value):
    return {item.strip().lower() for item in value.split(',') if item.strip()}


# This class holds all the configuration variables for the app
class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-change-me')
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
    JWT_EXPIRES_SECONDS = int(os.environ.get('JWT_EXPIRES_SECONDS', 3600))

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'sqlite:///' + os.path.join(os.getcwd(), 'blogfeed.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploaded images live here and are served under /<IMAGE_URL_PREFIX>/<name>
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'images'))
    IMAGE_URL_PREFIX = 'images'
    ALLOWED_IMAGE_TYPES = _csv(os.environ.get('ALLOWED_IMAGE_TYPES', 'image/png,image/jpeg,image/jpg'))
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))

    POSTS_PER_PAGE = int(os.environ.get('POSTS_PER_PAGE', 5))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG').upper()
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
