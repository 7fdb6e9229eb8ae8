"""Authorization decorators for blueprints.

Stack them under ``@jwt_required()``: the token supplies the user id (``sub``)
and a ``role`` claim, and the matching identity repository confirms the user
still exists.
"""
from functools import wraps

from flask import g
from flask_jwt_extended import get_jwt, get_jwt_identity

from siwesecure.models.user import UserRole
from siwesecure.services.identity_service import Actor, resolve_actor
from siwesecure.utils.helpers import client_ip, error_response


def roles_required(*roles: UserRole):
    """Decorator to require one of the given roles."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                user_id = int(get_jwt_identity())
            except (TypeError, ValueError):
                return error_response("Invalid token", 401)

            actor = resolve_actor(user_id, get_jwt().get('role'), client_ip())
            if actor is None:
                return error_response("User not found", 401)

            if actor.role not in roles:
                return error_response("Insufficient permissions", 403)

            g.actor = actor
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def verified_supervisor_required(f):
    """Decorator to reject supervisors an admin has not verified yet."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        actor = g.get('actor')
        if actor is None:
            return error_response("Authentication required", 401)

        if actor.role.is_supervisor and not actor.verified:
            return error_response("Supervisor not verified", 403)

        return f(*args, **kwargs)
    return decorated_function


def current_actor() -> Actor:
    return g.actor
