"""Helper functions for the application."""
from flask import jsonify, request
from typing import Any, Optional


def handle_error(error, status_code: int, code: Optional[str] = None):
    """Handle application errors with consistent format."""
    response = {
        'error': True,
        'message': getattr(error, 'message', None) or str(error),
        'status_code': status_code
    }

    code = code or getattr(error, 'code', None)
    if isinstance(code, str):
        response['code'] = code

    return jsonify(response), status_code


def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    return jsonify(response), status_code


def error_response(message: str, status_code: int = 400):
    """Return consistent error response."""
    return jsonify({
        'error': True,
        'message': message,
        'status_code': status_code
    }), status_code


def client_ip() -> Optional[str]:
    """Socket address of the caller for the audit trail.

    Forwarded headers are only honoured through ``ProxyFix`` (``PROXY_FIX_X_FOR``).
    """
    return request.remote_addr
