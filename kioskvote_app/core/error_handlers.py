"""
Error handling for the kiosk backend.

Every API failure leaves the server as the same JSON envelope the kiosk
script and ``HttpKioskBackend`` read::

    {"success": false, "message": "...", "code": "NOT_FOUND", "details": {...}}

Services raise ``KioskVoteError`` subclasses; ``register_error_handlers``
turns them (and plain HTTP errors under ``/api/``) into that envelope.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException


class KioskVoteError(Exception):
    """Base class for errors reported to API clients."""

    code = 'KIOSK_ERROR'
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return _envelope(self.message, self.code, self.details)


class ValidationError(KioskVoteError):
    """A request body or parameter was rejected."""

    code = 'VALIDATION_ERROR'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message, details={'errors': errors} if errors else None)


class NotFoundError(KioskVoteError):
    """Unknown language, result or other named resource."""

    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Resource not found'

    def __init__(self, message: Optional[str] = None, resource: Optional[str] = None):
        super().__init__(message, details={'resource': resource} if resource else None)


class TranslationError(KioskVoteError):
    """A translation table exists but cannot be used."""

    code = 'TRANSLATION_ERROR'
    default_message = 'Translation table is unreadable'

    def __init__(self, message: Optional[str] = None, language: Optional[str] = None):
        super().__init__(message, details={'language': language} if language else None)


class ResultGenerationError(KioskVoteError):
    """The word-cloud image could not be produced or committed."""

    code = 'RESULT_GENERATION_FAILED'
    default_message = 'Result generation failed'

    def __init__(self, message: Optional[str] = None, language: Optional[str] = None):
        super().__init__(message, details={'language': language} if language else None)


def _envelope(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> dict:
    body = {'success': False, 'message': message, 'code': code}
    if details:
        body['details'] = details
    return body


def error_response(message: str, code: str = 'ERROR', status_code: int = 400,
                   details: Optional[Dict[str, Any]] = None) -> tuple:
    return jsonify(_envelope(message, code, details)), status_code


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return body


def register_error_handlers(app):
    """Attach the JSON error handlers to ``app``."""

    @app.errorhandler(KioskVoteError)
    def handle_kiosk_error(error):
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.warning
        log("%s %s -> %s: %s", request.method, request.path, error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code and error.code >= 500:
            current_app.logger.error("Unhandled error on %s", request.path,
                                     exc_info=getattr(error, "original_exception", None) or error)
        if not request.path.startswith('/api/'):
            return error
        code = error.name.upper().replace(' ', '_')
        return error_response(error.description or error.name, code, error.code or 500)
