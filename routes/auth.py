"""
Admin session routes.

The storage layer does no authorization itself; routes gate mutations on
is_admin().
"""

import hmac

from flask import jsonify, request, session

from config import ADMIN_PASSWORD
from . import auth_bp

ADMIN_SESSION_KEY = "admin_session"


def verify_admin_password(password: str) -> bool:
    if not password or not isinstance(password, str):
        return False
    return hmac.compare_digest(password.strip().encode("utf-8"), ADMIN_PASSWORD.encode("utf-8"))


def is_admin() -> bool:
    try:
        return session.get(ADMIN_SESSION_KEY) == "authenticated"
    except RuntimeError as e:
        # Outside a request context - fail closed
        print(f"[WARN] Error checking admin status: {e}")
        return False


@auth_bp.route("/api/auth/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    if not verify_admin_password(data.get("password", "")):
        return jsonify({"error": "Invalid password"}), 401

    session[ADMIN_SESSION_KEY] = "authenticated"
    session.permanent = True
    return jsonify({"success": True})


@auth_bp.route("/api/auth/logout", methods=["POST"])
def logout():
    session.pop(ADMIN_SESSION_KEY, None)
    return jsonify({"success": True})


@auth_bp.route("/api/auth/status")
def status():
    return jsonify({"isAdmin": is_admin()})
