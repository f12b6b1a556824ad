from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException


class TrackerError(Exception):
    def __init__(self, code: str, message: str, status: int = 400, details: dict | None = None):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)


class NotFoundError(TrackerError):
    def __init__(self, message: str = 'Resource not found', code: str = 'NOT_FOUND', details: dict | None = None):
        super().__init__(code, message, 404, details)


class ValidationError(TrackerError):
    def __init__(self, message: str = 'Invalid input', code: str = 'VALIDATION_ERROR', details: dict | None = None):
        super().__init__(code, message, 400, details)


class ConflictError(TrackerError):
    def __init__(self, message: str = 'Conflicting update', code: str = 'CONFLICT', details: dict | None = None):
        super().__init__(code, message, 409, details)


class TransitionError(ConflictError):
    def __init__(self, current: str, requested: str):
        super().__init__(
            f'Cannot move game from {current} to {requested}',
            code='ILLEGAL_TRANSITION',
            details={'current': current, 'requested': requested},
        )


class TurnOrderError(TrackerError):
    """Raised when no unpassed player is found although not everyone passed."""

    def __init__(self, message: str = 'No eligible next player', details: dict | None = None):
        super().__init__('TURN_ORDER_INCONSISTENT', message, 500, details)


def _error_payload(code, message, details=None):
    return {'error': message, 'code': code, 'details': details or {}}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(TrackerError)
    def tracker_error_handler(exc: TrackerError):
        return jsonify(_error_payload(exc.code, exc.message, exc.details)), exc.status

    @app.errorhandler(SQLAlchemyError)
    def persistence_error_handler(exc: SQLAlchemyError):
        from turn_tracker import db
        db.session.rollback()
        app.logger.exception('[persistence] request failed: %s', exc)
        return jsonify(_error_payload('PERSISTENCE_ERROR', 'Persistence failure')), 500

    @app.errorhandler(HTTPException)
    def http_error_handler(exc: HTTPException):
        return jsonify(_error_payload(exc.name.upper().replace(' ', '_'), exc.description)), exc.code
