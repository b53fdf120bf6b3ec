"""
Resume upload, metadata lookup and job recommendations for 'Apply' accounts
"""

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from jobboard.auth.service import find_account
from jobboard.db import db
from jobboard.exceptions import (
    EmptyFile,
    NotAuthorized,
    PersistenceError,
    ResumeNotFound,
    UnsupportedMediaType,
    UserNotFound,
)
from jobboard.jobs.service import list_job_postings
from jobboard.models import ResumeRecord
from jobboard.resumes.recommend import JobRecommendation, parse_skills_csv, rank_postings
from jobboard.resumes.storage import CleanupResult, ResumeBlobStore
from jobboard.simple_logger import get_logger

logger = get_logger("resumes")

PDF_CONTENT_TYPE = 'application/pdf'


@dataclass(frozen=True)
class ResumeUpload:
    blob_id: str
    skills: FrozenSet[str]
    cleanup: Optional[CleanupResult] = None


@dataclass(frozen=True)
class ResumeMetadata:
    blob_id: str
    skills: FrozenSet[str]
    summary: Optional[str]
    filename: Optional[str]
    uploaded_at: datetime

    def to_dict(self):
        return {
            'gridFsId': self.blob_id,
            'extractedSkills': sorted(self.skills),
            'resumeSummary': self.summary,
            'filename': self.filename,
            'uploadedAt': self.uploaded_at.isoformat() if self.uploaded_at else None,
        }


def is_pdf(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return content_type.split(';', 1)[0].strip().lower() == PDF_CONTENT_TYPE


def _current_record(account) -> Optional[ResumeRecord]:
    if not account.resume_blob_id:
        return None
    return ResumeRecord.query.filter_by(blob_id=account.resume_blob_id).first()


def upload_resume(store: ResumeBlobStore, username, data: bytes, content_type, filename=None,
                  extracted_skills_csv=None, summary=None) -> ResumeUpload:
    """Store a new resume and make it the account's only live resume.

    The new blob is written before the account is repointed, so a failed
    upload leaves the previous resume in place. The previous blob is deleted
    afterwards on a best-effort basis.
    """
    account = find_account(username)
    if account is None:
        logger.warning(f"[RESUME] Upload failed: user {username} not found")
        raise UserNotFound("User not found.")
    if not account.is_applicant:
        logger.warning(f"[RESUME] Upload failed: user {username} is not authorized to upload resumes (section: {account.section.value})")
        raise NotAuthorized("Only users with 'Apply' section can upload resumes.")
    if not data:
        raise EmptyFile("No file uploaded or file is empty.")
    if not is_pdf(content_type):
        raise UnsupportedMediaType("Invalid file type. Only PDF files are allowed.",
                                   details={'content_type': content_type})

    skills = parse_skills_csv(extracted_skills_csv)
    previous_blob_id = account.resume_blob_id

    blob_id = store.put(username, data, content_type, filename)

    try:
        previous_record = _current_record(account)
        if previous_record is not None:
            db.session.delete(previous_record)
            # account_id is unique on resume_records; the old row must go first
            db.session.flush()

        record = ResumeRecord(
            blob_id=blob_id,
            account_id=account.id,
            owner_username=account.username,
            summary=summary,
            filename=filename,
            content_type=PDF_CONTENT_TYPE,
            size_bytes=len(data),
            uploaded_at=datetime.utcnow(),
        )
        record.skills = skills
        db.session.add(record)
        account.resume_blob_id = blob_id
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"[RESUME] Failed to record resume {blob_id} for {username}: {e}")
        orphan = store.delete(blob_id)
        if not orphan.deleted:
            logger.error(f"[RESUME] Orphaned blob left behind: {blob_id}")
        raise PersistenceError("Failed to upload resume.")

    cleanup = None
    if previous_blob_id and previous_blob_id != blob_id:
        cleanup = store.delete(previous_blob_id)
        if cleanup.deleted:
            logger.info(f"[RESUME] Deleted old resume for user: {username}")
        else:
            logger.error(f"[RESUME] Error deleting old resume {previous_blob_id} for user {username}: {cleanup.error}")

    logger.info(f"[RESUME] Resume uploaded for user: {username} with blob id: {blob_id} ({len(skills)} skills)")
    return ResumeUpload(blob_id=blob_id, skills=skills, cleanup=cleanup)


def get_resume_metadata(username) -> Optional[ResumeMetadata]:
    account = find_account(username)
    if account is None:
        return None
    record = _current_record(account)
    if record is None:
        return None
    return ResumeMetadata(
        blob_id=record.blob_id,
        skills=record.skills,
        summary=record.summary,
        filename=record.filename,
        uploaded_at=record.uploaded_at,
    )


def fetch_resume(store: ResumeBlobStore, username) -> Tuple[ResumeRecord, bytes]:
    account = find_account(username)
    if account is None:
        raise UserNotFound("User not found.")
    record = _current_record(account)
    if record is None:
        raise ResumeNotFound("No resume uploaded for this user.")
    return record, store.get(record.blob_id)


def recommend_jobs(applicant_username) -> List[JobRecommendation]:
    """Ranked postings for an applicant; empty when there is nothing to match on"""
    account = find_account(applicant_username)
    if account is None or not account.is_applicant:
        return []

    metadata = get_resume_metadata(applicant_username)
    if metadata is None or not metadata.skills:
        logger.info(f"[RESUME] No skills found in resume for applicant: {applicant_username}")
        return []

    postings = list_job_postings()
    recommendations = rank_postings(metadata.skills, postings)
    logger.info(f"[RESUME] Generated {len(recommendations)} recommendations for {applicant_username}")
    return recommendations
