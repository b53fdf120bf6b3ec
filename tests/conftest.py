import io
import os
import tempfile

import pytest
from botocore.exceptions import ClientError

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="jobboard-logs-"))

from jobboard import create_app  # noqa: E402
from jobboard.db import db  # noqa: E402
from jobboard.resumes.storage import ResumeBlobStore  # noqa: E402

TEST_JWT_KEY = "test-signing-key-0123456789abcdef0123456789abcdef"


class FakeS3Client:
    """In-memory stand-in for the handful of boto3 S3 calls the store makes"""

    def __init__(self):
        self.objects = {}
        self.fail_uploads = False
        self.fail_deletes = False
        self.deleted_keys = []

    @staticmethod
    def _error(code, operation):
        return ClientError({'Error': {'Code': code, 'Message': code}}, operation)

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        if self.fail_uploads:
            raise self._error('InternalError', 'PutObject')
        self.objects[(bucket, key)] = {
            'Body': fileobj.read(),
            'ExtraArgs': ExtraArgs or {},
        }

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise self._error('NoSuchKey', 'GetObject')
        return {'Body': io.BytesIO(self.objects[(Bucket, Key)]['Body'])}

    def delete_object(self, Bucket, Key):
        if self.fail_deletes:
            raise self._error('AccessDenied', 'DeleteObject')
        self.objects.pop((Bucket, Key), None)
        self.deleted_keys.append(Key)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://{Params['Bucket']}.s3.test/{Params['Key']}?expires={ExpiresIn}"

    def keys(self):
        return [key for (_, key) in self.objects]


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def resume_store(fake_s3):
    return ResumeBlobStore(fake_s3, 'test-resumes', 'resumes/')


@pytest.fixture
def app(resume_store):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_ENGINE_OPTIONS': {},
        'AUTO_CREATE_TABLES': True,
        'BCRYPT_ROUNDS': 4,
        'JWT_SECRET_KEY': TEST_JWT_KEY,
    }, resume_store=resume_store)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an application context for service-level tests"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def pdf_bytes(text="resume"):
    return b"%PDF-1.4\n" + text.encode() + b"\n%%EOF"


@pytest.fixture
def signup(client):
    def _signup(username, section, password="s3cret-pass"):
        response = client.post('/api/auth/signup', json={
            'username': username,
            'password': password,
            'section': section,
        })
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _signup


@pytest.fixture
def post_job(client):
    def _post_job(poster, title, skills, **overrides):
        body = {
            'title': title,
            'description': f"{title} description",
            'skills': skills,
            'experience': '2-5 years',
            'location': 'Remote',
            'posterUsername': poster,
        }
        body.update(overrides)
        return client.post('/api/jobs', json=body)
    return _post_job


@pytest.fixture
def upload(client):
    def _upload(username, data=None, content_type='application/pdf', filename='cv.pdf',
                skills=None, summary=None):
        form = {'username': username}
        if data is not False:
            form['file'] = (io.BytesIO(pdf_bytes() if data is None else data), filename, content_type)
        if skills is not None:
            form['extractedSkills'] = skills
        if summary is not None:
            form['resumeSummary'] = summary
        return client.post('/api/resumes/upload', data=form, content_type='multipart/form-data')
    return _upload
