from .db import db
from datetime import datetime
from enum import Enum
import json

from jobboard.exceptions import InvalidSection


class Section(Enum):
    """Account role tag"""
    POSTER = 'Post'
    APPLICANT = 'Apply'

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup of a wire value ('post', 'APPLY', ...)"""
        if isinstance(value, str):
            for section in cls:
                if section.value.lower() == value.lower():
                    return section
        raise InvalidSection("Invalid section. Must be 'Post' or 'Apply'.", details={'section': value})


class Account(db.Model):
    __tablename__ = "accounts"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    section = db.Column(db.Enum(Section, name="account_section"), nullable=False)
    resume_blob_id = db.Column(db.String(512), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_poster(self):
        return self.section is Section.POSTER

    @property
    def is_applicant(self):
        return self.section is Section.APPLICANT

    def to_dict(self):
        return {
            'userId': self.id,
            'username': self.username,
            'section': self.section.value,
        }

    def __repr__(self):
        return f"<Account {self.username} section={self.section.value} resume={'present' if self.resume_blob_id else 'absent'}>"


class JobPosting(db.Model):
    __tablename__ = 'job_postings'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    skills_json = db.Column(db.Text, nullable=False)  # JSON list, order as posted
    experience = db.Column(db.String(100), nullable=False)  # e.g. "0-2 years", "5+ years"
    location = db.Column(db.String(100), nullable=False)
    posted_by_account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'), nullable=False)
    posted_by_username = db.Column(db.String(150), nullable=False)
    posted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    poster = db.relationship('Account', backref='job_postings', foreign_keys=[posted_by_account_id])

    @property
    def skills(self):
        return json.loads(self.skills_json) if self.skills_json else []

    @skills.setter
    def skills(self, value):
        self.skills_json = json.dumps(list(value))

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'skills': self.skills,
            'experience': self.experience,
            'location': self.location,
            'postedByUserId': self.posted_by_account_id,
            'postedByUsername': self.posted_by_username,
            'postedDate': self.posted_at.isoformat() if self.posted_at else None,
        }


class ResumeRecord(db.Model):
    """Sidecar metadata for a resume blob; at most one row per account"""
    __tablename__ = 'resume_records'

    id = db.Column(db.Integer, primary_key=True)
    blob_id = db.Column(db.String(512), unique=True, nullable=False)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'), nullable=False, unique=True)
    owner_username = db.Column(db.String(150), nullable=False)
    skills_json = db.Column(db.Text, nullable=False, default='[]')  # sorted, lowercase
    summary = db.Column(db.Text, nullable=True)
    filename = db.Column(db.String(255), nullable=True)
    content_type = db.Column(db.String(100), nullable=False)
    size_bytes = db.Column(db.Integer, nullable=False)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def skills(self):
        return frozenset(json.loads(self.skills_json or '[]'))

    @skills.setter
    def skills(self, value):
        self.skills_json = json.dumps(sorted(value))
