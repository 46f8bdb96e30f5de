# errors.py
# Domain errors. Every error carries the HTTP status the API answers with;
# the message is what the client shows to the user.

from flask import jsonify


class HackathonError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ValidationError(HackathonError):
    pass


class Unauthorized(HackathonError):
    status_code = 401


class PermissionDenied(HackathonError):
    status_code = 403


class NotFound(HackathonError):
    status_code = 404


class TeamNotFound(NotFound):
    pass


class NotAssigned(PermissionDenied):
    pass


class InvalidRound(ValidationError):
    pass


class ScoreOutOfRange(ValidationError):
    pass


class IncompleteEvaluation(ValidationError):
    pass


class InvalidScan(ValidationError):
    pass


class LedgerWriteError(HackathonError):
    """A database write failed; the caller may resubmit."""
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(HackathonError)
    def handle_hackathon_error(error):
        app.logger.warning('%s: %s', type(error).__name__, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Not found'}), 404
