"""
Project management API routes.

Handles CRUD operations for projects. Reads are public; anything that
changes data needs an admin session.
"""

from flask import jsonify, request
from pydantic import ValidationError

from models import ProjectUpdate
from repositories import StorageError, get_repository
from . import projects_bp
from .helpers import admin_required, clean, not_found, storage_error, validation_error


@projects_bp.route("/api/projects")
def list_projects():
    """List all projects."""
    try:
        projects = get_repository().projects.list()
    except StorageError as e:
        return storage_error("fetch projects", e)
    return jsonify([p.to_record() for p in projects])


@projects_bp.route("/api/projects", methods=["POST"])
@admin_required
def create_project():
    """Create a new project."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body. Expected JSON."}), 400

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return jsonify({"error": "Project name is required"}), 400

    try:
        project = get_repository().projects.create(
            name.strip(),
            description=clean(data.get("description")),
            module_name=clean(data.get("moduleName")),
            supervisor_name=clean(data.get("supervisorName")),
        )
    except ValidationError as e:
        return validation_error(e)
    except StorageError as e:
        return storage_error("create project", e)
    return jsonify(project.to_record()), 201


@projects_bp.route("/api/projects/<project_id>")
def get_project(project_id):
    """Get a single project with its files."""
    repo = get_repository()
    try:
        project = repo.projects.get(project_id)
        if not project:
            return not_found("Project not found")
        files = repo.files.list_by_project(project_id)
    except StorageError as e:
        return storage_error("fetch project", e)

    data = project.to_record()
    data["files"] = [f.to_record() for f in files]
    return jsonify(data)


@projects_bp.route("/api/projects/<project_id>", methods=["PATCH", "PUT"])
@admin_required
def update_project(project_id):
    """Update name, description, module or supervisor."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid request body. Expected JSON."}), 400

    try:
        changes = ProjectUpdate.model_validate({k: clean(v) for k, v in data.items()}).changes()
        project = get_repository().projects.update(project_id, **changes)
    except ValidationError as e:
        return validation_error(e)
    except StorageError as e:
        return storage_error("update project", e)

    if project is None:
        return not_found("Project not found")
    return jsonify(project.to_record())


@projects_bp.route("/api/projects/<project_id>", methods=["DELETE"])
@admin_required
def delete_project(project_id):
    """Delete a project and all of its files."""
    try:
        deleted = get_repository().projects.delete(project_id)
    except StorageError as e:
        return storage_error("delete project", e)

    if not deleted:
        return not_found("Project not found")
    return jsonify({"success": True})
