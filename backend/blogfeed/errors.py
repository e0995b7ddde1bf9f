# Error taxonomy and the JSON error boundary
from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for failures that map onto an HTTP status and a JSON envelope."""

    status_code = 500

    def __init__(self, message, data=None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self):
        body = {'message': self.message}
        if self.data is not None:
            body['data'] = self.data
        return body


class ValidationError(ApiError):
    status_code = 422


class AuthError(ApiError):
    status_code = 401


class AuthzError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class ServerError(ApiError):
    status_code = 500


def register_error_handlers(app):
    # Shared session, rolled back after server errors
    from . import db

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            app.logger.error(f'{type(error).__name__}: {error.message}')
            db.session.rollback()
        else:
            app.logger.warning(f'{type(error).__name__} ({error.status_code}): {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        app.logger.warning(f'HTTP {error.code}: {error.description}')
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        app.logger.exception('Unhandled error while processing request')
        db.session.rollback()
        server_error = ServerError('Internal server error')
        return jsonify(server_error.to_dict()), server_error.status_code
