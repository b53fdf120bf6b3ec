from flask import Blueprint, jsonify, request

from jobboard.exceptions import ValidationError
from jobboard.jobs import service
from jobboard.simple_logger import get_logger

logger = get_logger("jobs")

jobs_bp = Blueprint('jobs', __name__, url_prefix='/api/jobs')

ALL_FIELDS_MESSAGE = "All fields (title, description, skills, experience, location, posterUsername) are required."


@jobs_bp.route('', methods=['POST'])
def create_job():
    """Create a new job posting"""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError(ALL_FIELDS_MESSAGE)

    try:
        job = service.create_job_posting(
            title=data.get('title'),
            description=data.get('description'),
            skills=data.get('skills'),
            experience=data.get('experience'),
            location=data.get('location'),
            poster_username=data.get('posterUsername'),
        )
    except ValidationError as e:
        raise ValidationError(ALL_FIELDS_MESSAGE, details=e.details)

    return jsonify({
        'message': 'Job posting created successfully.',
        'job': job.to_dict(),
    }), 201


@jobs_bp.route('', methods=['GET'])
def get_jobs():
    """Get every job posting in insertion order"""
    jobs = service.list_job_postings()
    return jsonify([job.to_dict() for job in jobs]), 200
