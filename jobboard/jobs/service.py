from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from jobboard.auth.service import find_account
from jobboard.db import db
from jobboard.exceptions import NotAuthorized, PersistenceError, PosterNotFound, ValidationError
from jobboard.models import JobPosting
from jobboard.simple_logger import get_logger

logger = get_logger("jobs")

REQUIRED_TEXT_FIELDS = ('title', 'description', 'experience', 'location', 'poster_username')


def _validate(fields: dict, skills) -> None:
    for name in REQUIRED_TEXT_FIELDS:
        value = fields.get(name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{name} is required", details={'field': name})
    if not isinstance(skills, (list, tuple)) or not skills:
        raise ValidationError("skills must be a non-empty list", details={'field': 'skills'})
    if any(not isinstance(skill, str) or not skill.strip() for skill in skills):
        raise ValidationError("skills must contain only non-empty strings", details={'field': 'skills'})


def create_job_posting(title, description, skills, experience, location, poster_username) -> JobPosting:
    """Create a posting on behalf of a 'Post' account"""
    _validate({
        'title': title,
        'description': description,
        'experience': experience,
        'location': location,
        'poster_username': poster_username,
    }, skills)

    poster = find_account(poster_username)
    if poster is None:
        logger.warning(f"[JOBS] Job posting failed: user {poster_username} not found")
        raise PosterNotFound("Failed to create job posting. Ensure the user exists and has 'Post' section.")
    if not poster.is_poster:
        logger.warning(f"[JOBS] Job posting failed: user {poster_username} is not authorized to post jobs (section: {poster.section.value})")
        raise NotAuthorized("Failed to create job posting. Ensure the user exists and has 'Post' section.")

    job = JobPosting(
        title=title,
        description=description,
        experience=experience,
        location=location,
        posted_by_account_id=poster.id,
        posted_by_username=poster.username,
        posted_at=datetime.utcnow(),
    )
    job.skills = skills

    try:
        db.session.add(job)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"[JOBS] Error creating job posting for {poster_username}: {e}")
        raise PersistenceError("Failed to create job posting.")

    logger.info(f"[JOBS] Job posting created: {job.id} by {poster.username}")
    return job


def list_job_postings() -> List[JobPosting]:
    return JobPosting.query.order_by(JobPosting.id.asc()).all()
