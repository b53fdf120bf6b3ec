from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file

from jobboard.auth.service import find_account
from jobboard.exceptions import EmptyFile, ResumeNotFound, ValidationError
from jobboard.resumes import service
from jobboard.simple_logger import get_logger

logger = get_logger("resumes")

resumes_bp = Blueprint('resumes', __name__, url_prefix='/api/resumes')


def _resume_store():
    return current_app.extensions['resume_store']


@resumes_bp.route('/upload', methods=['POST'])
def upload_resume():
    """Upload a PDF resume for an 'Apply' account (multipart form)"""
    username = request.form.get('username')
    if not username:
        raise ValidationError("Username is required for resume upload.")

    file = request.files.get('file')
    if file is None:
        raise EmptyFile("No file uploaded or file is empty.")
    data = file.read() if file.filename else b''

    upload = service.upload_resume(
        _resume_store(),
        username,
        data,
        content_type=file.mimetype,
        filename=file.filename,
        extracted_skills_csv=request.form.get('extractedSkills'),
        summary=request.form.get('resumeSummary'),
    )
    return jsonify({
        'message': 'Resume uploaded successfully.',
        'gridFsId': upload.blob_id,
    }), 200


@resumes_bp.route('/recommendations/<applicant_username>', methods=['GET'])
def get_job_recommendations(applicant_username):
    account = find_account(applicant_username)
    if account is None:
        return jsonify([]), 404
    if not account.is_applicant:
        return jsonify([]), 403

    recommendations = service.recommend_jobs(applicant_username)
    return jsonify([rec.to_dict() for rec in recommendations]), 200


@resumes_bp.route('/<username>/metadata', methods=['GET'])
def get_resume_metadata(username):
    metadata = service.get_resume_metadata(username)
    if metadata is None:
        raise ResumeNotFound("No resume found for this user.")

    payload = metadata.to_dict()
    payload['downloadUrl'] = _resume_store().presigned_url(
        metadata.blob_id, expires_in=current_app.config.get('RESUME_URL_EXPIRY_SECONDS', 3600)
    )
    return jsonify(payload), 200


@resumes_bp.route('/<username>/file', methods=['GET'])
def download_resume(username):
    record, data = service.fetch_resume(_resume_store(), username)
    return send_file(
        BytesIO(data),
        mimetype=record.content_type,
        as_attachment=True,
        download_name=record.filename or f"{record.owner_username}_resume.pdf",
    )
