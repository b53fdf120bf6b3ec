"""
Tests for resume upload, recommendations, metadata and download endpoints
"""

from jobboard.auth.service import find_account
from jobboard.models import ResumeRecord

MY_CV = b"%PDF-1.4\nmy cv\n%%EOF"


class TestUpload:

    def test_upload_success(self, app, fake_s3, signup, upload):
        signup('seeker', 'Apply')

        response = upload('seeker', skills='java, sql', summary='Backend developer')

        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Resume uploaded successfully.'
        assert body['gridFsId'].startswith('resumes/seeker/')
        assert fake_s3.keys() == [body['gridFsId']]
        with app.app_context():
            assert find_account('seeker').resume_blob_id == body['gridFsId']
            record = ResumeRecord.query.one()
            assert record.skills == frozenset({'java', 'sql'})
            assert record.summary == 'Backend developer'
            assert record.filename == 'cv.pdf'

    def test_reupload_keeps_one_resume(self, app, fake_s3, signup, upload):
        signup('seeker', 'Apply')
        first = upload('seeker', skills='java').get_json()['gridFsId']

        second = upload('seeker', skills='go').get_json()['gridFsId']

        assert first != second
        assert fake_s3.keys() == [second]
        assert fake_s3.deleted_keys == [first]
        with app.app_context():
            assert [r.blob_id for r in ResumeRecord.query.all()] == [second]

    def test_reupload_succeeds_when_old_blob_cannot_be_deleted(self, app, fake_s3, signup, upload):
        signup('seeker', 'Apply')
        first = upload('seeker', skills='java').get_json()['gridFsId']
        fake_s3.fail_deletes = True

        response = upload('seeker', skills='go')

        assert response.status_code == 200
        second = response.get_json()['gridFsId']
        assert sorted(fake_s3.keys()) == sorted([first, second])
        with app.app_context():
            assert find_account('seeker').resume_blob_id == second

    def test_missing_username(self, client, fake_s3):
        response = client.post('/api/resumes/upload', data={}, content_type='multipart/form-data')

        assert response.status_code == 400
        assert response.get_json()['message'] == "Username is required for resume upload."
        assert fake_s3.objects == {}

    def test_missing_file(self, signup, upload, fake_s3):
        signup('seeker', 'Apply')

        response = upload('seeker', data=False)

        assert response.status_code == 400
        assert response.get_json()['message'] == "No file uploaded or file is empty."
        assert fake_s3.objects == {}

    def test_missing_file_is_rejected_before_account_checks(self, signup, upload, fake_s3):
        signup('acme', 'Post')

        for username in ('acme', 'ghost'):
            response = upload(username, data=False)
            assert response.status_code == 400
            assert response.get_json()['error']['code'] == 'EmptyFile'
        assert fake_s3.objects == {}

    def test_empty_file(self, signup, upload):
        signup('seeker', 'Apply')
        response = upload('seeker', data=b'')
        assert response.status_code == 400

    def test_unknown_user(self, upload, fake_s3):
        response = upload('ghost')

        assert response.status_code == 404
        assert response.get_json()['message'] == "User not found."
        assert fake_s3.objects == {}

    def test_poster_is_forbidden(self, signup, upload, fake_s3):
        signup('acme', 'Post')

        response = upload('acme')

        assert response.status_code == 403
        assert response.get_json()['message'] == "Only users with 'Apply' section can upload resumes."
        assert fake_s3.objects == {}

    def test_non_pdf_is_rejected(self, app, signup, upload, fake_s3):
        signup('seeker', 'Apply')

        response = upload('seeker', data=b'\x89PNG', content_type='image/png', filename='cv.png')

        assert response.status_code == 415
        assert response.get_json()['message'] == "Invalid file type. Only PDF files are allowed."
        assert fake_s3.objects == {}
        with app.app_context():
            assert ResumeRecord.query.count() == 0

    def test_oversized_upload(self, app, signup, upload, fake_s3):
        signup('seeker', 'Apply')
        app.config['MAX_CONTENT_LENGTH'] = 512

        response = upload('seeker', data=b'%PDF' + b'0' * 4096)

        assert response.status_code == 413
        assert fake_s3.objects == {}

    def test_store_failure(self, app, signup, upload, fake_s3):
        signup('seeker', 'Apply')
        fake_s3.fail_uploads = True

        response = upload('seeker')

        assert response.status_code == 500
        assert response.get_json()['message'] == "Failed to upload resume."
        with app.app_context():
            assert find_account('seeker').resume_blob_id is None


class TestRecommendations:

    def _seed(self, signup, post_job):
        signup('acme', 'Post')
        signup('seeker', 'Apply')
        post_job('acme', 'backend', ['Java', 'SQL', 'Go'])
        post_job('acme', 'java-only', ['java'])
        post_job('acme', 'python', ['Python'])

    def test_ranked_recommendations(self, client, signup, post_job, upload):
        self._seed(signup, post_job)
        upload('seeker', skills='JAVA, sql')

        response = client.get('/api/resumes/recommendations/seeker')

        assert response.status_code == 200
        body = response.get_json()
        assert [(r['jobPosting']['title'], r['matchScore']) for r in body] == [
            ('java-only', 1.0),
            ('backend', 0.67),
        ]
        assert body[0]['jobPosting']['postedByUsername'] == 'acme'

    def test_no_resume_returns_empty_list(self, client, signup, post_job):
        self._seed(signup, post_job)

        response = client.get('/api/resumes/recommendations/seeker')

        assert response.status_code == 200
        assert response.get_json() == []

    def test_no_overlap_returns_empty_list(self, client, signup, post_job, upload):
        self._seed(signup, post_job)
        upload('seeker', skills='cobol')

        response = client.get('/api/resumes/recommendations/seeker')

        assert response.status_code == 200
        assert response.get_json() == []

    def test_unknown_user(self, client):
        response = client.get('/api/resumes/recommendations/ghost')
        assert response.status_code == 404
        assert response.get_json() == []

    def test_poster_is_forbidden(self, client, signup):
        signup('acme', 'Post')
        response = client.get('/api/resumes/recommendations/acme')
        assert response.status_code == 403
        assert response.get_json() == []


class TestMetadataAndDownload:

    def test_metadata(self, client, signup, upload):
        signup('seeker', 'Apply')
        blob_id = upload('seeker', skills='SQL,java', summary='Data person').get_json()['gridFsId']

        response = client.get('/api/resumes/seeker/metadata')

        assert response.status_code == 200
        body = response.get_json()
        assert body['gridFsId'] == blob_id
        assert body['extractedSkills'] == ['java', 'sql']
        assert body['resumeSummary'] == 'Data person'
        assert body['filename'] == 'cv.pdf'
        assert body['uploadedAt']
        assert body['downloadUrl'] == f"https://test-resumes.s3.test/{blob_id}?expires=3600"

    def test_metadata_without_resume(self, client, signup):
        signup('seeker', 'Apply')
        response = client.get('/api/resumes/seeker/metadata')
        assert response.status_code == 404

    def test_download(self, client, signup, upload):
        signup('seeker', 'Apply')
        upload('seeker', data=MY_CV, filename='jane.pdf')

        response = client.get('/api/resumes/seeker/file')

        assert response.status_code == 200
        assert response.data == MY_CV
        assert response.mimetype == 'application/pdf'
        assert 'jane.pdf' in response.headers['Content-Disposition']

    def test_download_unknown_user(self, client):
        assert client.get('/api/resumes/ghost/file').status_code == 404

    def test_download_when_blob_is_gone(self, client, fake_s3, signup, upload):
        signup('seeker', 'Apply')
        upload('seeker')
        fake_s3.objects.clear()

        response = client.get('/api/resumes/seeker/file')

        assert response.status_code == 404
        assert response.get_json()['message'] == "Resume file not found."
