"""
File upload / download API routes.
"""

import io

from flask import jsonify, request, send_file
from pydantic import ValidationError

from repositories import BlobNotFound, StorageError, get_repository
from . import files_bp
from .helpers import admin_required, not_found, storage_error, validation_error


@files_bp.route("/api/projects/<project_id>/files")
def list_files(project_id):
    """Files of a project, optionally narrowed to one category."""
    category_id = request.args.get("category")
    files = get_repository().files
    try:
        if category_id:
            records = files.list_by_category(project_id, category_id)
        else:
            records = files.list_by_project(project_id)
    except StorageError as e:
        return storage_error("fetch files", e)
    return jsonify([f.to_record() for f in records])


@files_bp.route("/api/projects/<project_id>/files", methods=["POST"])
@admin_required
def upload_file(project_id):
    """Multipart upload: fields `file` and `categoryId`."""
    upload = request.files.get("file")
    category_id = (request.form.get("categoryId") or "").strip()
    if upload is None or not upload.filename:
        return jsonify({"error": "No file provided"}), 400
    if not category_id:
        return jsonify({"error": "Category is required"}), 400

    repo = get_repository()
    try:
        if not repo.projects.exists(project_id):
            return not_found("Project not found")
        record = repo.files.save_content(
            project_id,
            category_id,
            upload.filename,
            upload.read(),
            mime_type=upload.mimetype or None,
        )
    except ValidationError as e:
        return validation_error(e)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except StorageError as e:
        return storage_error("upload file", e)
    return jsonify(record.to_record()), 201


@files_bp.route("/api/files/<project_id>/<category_id>/<filename>")
def download_file(project_id, category_id, filename):
    files = get_repository().files
    try:
        record = files.find(project_id, category_id, filename)
        if record is None:
            return not_found("File not found")
        content = files.read_content(record)
    except BlobNotFound:
        return not_found("File content not found")
    except StorageError as e:
        return storage_error("download file", e)

    return send_file(
        io.BytesIO(content),
        mimetype=record.mime_type,
        as_attachment=True,
        download_name=record.original_name or record.filename,
    )


@files_bp.route("/api/files/<project_id>/<category_id>/<filename>", methods=["DELETE"])
@admin_required
def delete_file(project_id, category_id, filename):
    try:
        deleted = get_repository().files.delete_content(project_id, category_id, filename)
    except StorageError as e:
        return storage_error("delete file", e)

    if not deleted:
        return not_found("File not found")
    return jsonify({"success": True})
