"""
Shared helpers for API routes.
"""

import traceback
from functools import wraps

from flask import jsonify
from pydantic import ValidationError

from repositories import ConfigurationMissing, StorageError
from .auth import is_admin

KV_ENV_HINT = (
    "Please ensure Redis/KV is configured in your environment variables "
    "(KV_REST_API_URL/KV_REST_API_TOKEN or UPSTASH_REDIS_REST_URL/UPSTASH_REDIS_REST_TOKEN)"
)


def storage_error(action: str, error: StorageError):
    """503 for storage failures - distinct from 404 'no such record'."""
    print(f"[ERROR] {action}: {error}")
    traceback.print_exc()
    body = {"error": f"Failed to {action}", "details": str(error)}
    if isinstance(error, ConfigurationMissing):
        body["hint"] = KV_ENV_HINT
    return jsonify(body), 503


def validation_error(error: ValidationError):
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in error.errors()]
    return jsonify({"error": "Invalid request", "details": messages}), 400


def not_found(what: str = "Not found"):
    return jsonify({"error": what}), 404


def admin_required(view):
    """403 unless the caller holds an admin session."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not is_admin():
            return jsonify({"error": "Unauthorized. Admin access required."}), 403
        return view(*args, **kwargs)
    return wrapper


def clean(value):
    """Trim optional string fields the way the forms send them."""
    return value.strip() if isinstance(value, str) else value
