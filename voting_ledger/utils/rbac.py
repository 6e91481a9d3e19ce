from functools import wraps
from flask import abort
from flask_jwt_extended import get_jwt

ROLE_VOTER = "VOTER"
ROLE_ADMIN = "ADMIN"


def current_role():
    return (get_jwt() or {}).get("role")


def roles_required(*allowed_roles: str):
    """
    Require JWT and restrict endpoint access to specific roles.
    Use with @jwt_required() above it.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if current_role() not in allowed_roles:
                abort(403, description="Insufficient permissions")
            return fn(*args, **kwargs)
        return wrapper
    return decorator
