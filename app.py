#!/usr/bin/env python3
"""
Project Files Web API

Flask app serving projects and their uploaded files.
"""

from datetime import timedelta
from flask import Flask, jsonify

from config import SECRET_KEY
from repositories import get_repository
from routes import auth_bp, files_bp, projects_bp

app = Flask(__name__)
app.config.update(
    SECRET_KEY=SECRET_KEY,
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SAMESITE="Lax",
    PERMANENT_SESSION_LIFETIME=timedelta(days=30),
)

app.register_blueprint(projects_bp)
app.register_blueprint(files_bp)
app.register_blueprint(auth_bp)


@app.route("/api/health")
def health():
    """Which backends the current environment selects."""
    env = get_repository().selector.environment()
    return jsonify({
        "managedPlatform": env.managed_platform,
        "remoteKV": env.remote_kv_available,
        "remoteBlob": env.remote_blob_available,
    })


if __name__ == "__main__":
    print("\n" + "="*60)
    print("  Project Files API")
    print("="*60)
    print("  Listening on http://localhost:5001")
    print("="*60 + "\n")
    app.run(debug=True, port=5001)
