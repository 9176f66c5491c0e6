"""
Flask blueprints for the project files API.
"""

from flask import Blueprint

# Create blueprints
projects_bp = Blueprint('projects', __name__)
files_bp = Blueprint('files', __name__)
auth_bp = Blueprint('auth', __name__)

# Import routes to register them
from . import projects
from . import files
from . import auth
