"""
Integration Tests for internship completion and certificates

Completion -> certificate issue -> verification, over the HTTP API.
"""
from datetime import datetime, timedelta
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.certificate import Certificate
from app.models.internship import InternshipState
from app.models.user import InternshipStatus
from app.services.certificate_service import certificate_service


async def _complete(client: AsyncClient, internship_id: str, headers: dict):
    return await client.put(f'/api/v1/internships/complete/{internship_id}', headers=headers)


class TestCompleteInternship:
    """PUT /internships/complete/{id}"""

    async def test_complete_issues_certificate(self, client: AsyncClient, db_session, internship, intern_user, admin_auth_headers):
        response = await _complete(client, internship.id, admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'Internship completed successfully'
        assert data['internship']['status'] == 'completed'
        assert data['internship']['end_date'] is not None
        assert data['certificate']['certificateId'].startswith('NEX-')
        assert data['certificate']['internshipId'] == internship.id

        await db_session.refresh(intern_user)
        assert intern_user.internship_status == InternshipStatus.COMPLETED

    async def test_complete_twice(self, client: AsyncClient, db_session, internship, admin_auth_headers):
        """Second completion is rejected and no second certificate appears"""
        first = await _complete(client, internship.id, admin_auth_headers)
        second = await _complete(client, internship.id, admin_auth_headers)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()['detail'] == 'Internship already completed'

        count = await db_session.execute(
            select(func.count(Certificate.id)).where(Certificate.internship_id == internship.id)
        )
        assert count.scalar() == 1

    async def test_complete_unknown(self, client: AsyncClient, admin_auth_headers):
        response = await _complete(client, str(uuid.uuid4()), admin_auth_headers)

        assert response.status_code == 404
        assert response.json()['detail'] == 'Internship not found'

    async def test_intern_cannot_complete(self, client: AsyncClient, internship, intern_auth_headers):
        response = await _complete(client, internship.id, intern_auth_headers)

        assert response.status_code == 403


class TestProgress:
    """PUT /internships/progress/{id}"""

    async def test_partial_progress(self, client: AsyncClient, internship, admin_auth_headers):
        response = await client.put(
            f'/api/v1/internships/progress/{internship.id}',
            json={'progress': 40, 'notes': 'Finished onboarding'},
            headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'Progress updated successfully'
        assert data['internship']['progress'] == 40
        assert data['internship']['status'] == 'in_progress'
        assert data['certificate'] is None

    async def test_full_progress_completes(self, client: AsyncClient, internship, admin_auth_headers):
        response = await client.put(
            f'/api/v1/internships/progress/{internship.id}',
            json={'progress': 100},
            headers=admin_auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'Internship completed and certificate generated'
        assert data['internship']['status'] == 'completed'
        assert data['certificate']['certificateId'].startswith('NEX-')

    async def test_progress_out_of_range(self, client: AsyncClient, internship, admin_auth_headers):
        response = await client.put(
            f'/api/v1/internships/progress/{internship.id}',
            json={'progress': 120},
            headers=admin_auth_headers
        )

        assert response.status_code == 422


class TestInternshipAdmin:
    """Create and list internships"""

    async def test_create_for_intern(self, client: AsyncClient, db_session, intern_user, admin_auth_headers):
        response = await client.post('/api/v1/internships', json={
            'intern_id': intern_user.id,
            'internship_title': 'Data Science'
        }, headers=admin_auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data['status'] == 'in_progress'
        assert data['start_date'] is not None

        await db_session.refresh(intern_user)
        assert intern_user.internship_status == InternshipStatus.IN_PROGRESS
        assert intern_user.current_internship_id == data['id']

    async def test_create_for_non_intern(self, client: AsyncClient, member_user, admin_auth_headers):
        response = await client.post('/api/v1/internships', json={
            'intern_id': member_user.id,
            'internship_title': 'Data Science'
        }, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'User is not an intern'

    async def test_list_with_status_filter(self, client: AsyncClient, internship, admin_auth_headers):
        in_progress = await client.get('/api/v1/internships?status=in_progress', headers=admin_auth_headers)
        completed = await client.get('/api/v1/internships?status=completed', headers=admin_auth_headers)

        assert in_progress.status_code == 200
        assert in_progress.json()['total'] == 1
        assert in_progress.json()['items'][0]['id'] == internship.id
        assert completed.json()['total'] == 0

    async def test_list_invalid_status(self, client: AsyncClient, admin_auth_headers, db_session):
        response = await client.get('/api/v1/internships?status=paused', headers=admin_auth_headers)

        assert response.status_code == 400


class TestMyInternship:
    """GET /internships/me"""

    async def test_none_completed(self, client: AsyncClient, internship, intern_auth_headers):
        response = await client.get('/api/v1/internships/me', headers=intern_auth_headers)

        assert response.status_code == 404
        assert response.json()['detail'] == 'No internship found'

    async def test_completed_with_certificate(self, client: AsyncClient, internship, intern_user, admin_auth_headers, intern_auth_headers):
        completed = await _complete(client, internship.id, admin_auth_headers)
        certificate_id = completed.json()['certificate']['certificateId']

        response = await client.get('/api/v1/internships/me', headers=intern_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['internship']['id'] == internship.id
        assert data['certificate']['certificateId'] == certificate_id
        assert data['certificateData']['internName'] == intern_user.display_name
        assert data['cloudinaryUrl'] is None


class TestCertificateLookup:
    """Public verify/view and authenticated certificate lookups"""

    async def test_verify_valid(self, client: AsyncClient, internship, intern_user, admin_auth_headers):
        completed = await _complete(client, internship.id, admin_auth_headers)
        certificate_id = completed.json()['certificate']['certificateId']

        response = await client.get(f'/api/v1/certificates/verify/{certificate_id}')

        assert response.status_code == 200
        data = response.json()
        assert data['valid'] is True
        assert data['message'] == 'Certificate is valid'
        assert data['certificate']['certificateId'] == certificate_id
        assert data['certificate']['internName'] == intern_user.display_name
        assert data['certificate']['internshipTitle'] == 'Web Development'
        assert data['certificate']['verificationUrl'].endswith(certificate_id)

    async def test_verify_unknown(self, client: AsyncClient, db_session):
        response = await client.get('/api/v1/certificates/verify/NEX-nothing-000000')

        assert response.status_code == 404
        assert response.json() == {'valid': False, 'message': 'Certificate not found'}

    async def test_view(self, client: AsyncClient, internship, admin_auth_headers):
        completed = await _complete(client, internship.id, admin_auth_headers)
        certificate_id = completed.json()['certificate']['certificateId']

        response = await client.get(f'/api/v1/certificates/view/{certificate_id}')

        assert response.status_code == 200
        data = response.json()
        assert data['certificate']['certificateId'] == certificate_id
        assert data['data']['certificateId'] == certificate_id
        assert data['data']['internshipTitle'] == 'Web Development'

    async def test_view_unknown(self, client: AsyncClient, db_session):
        response = await client.get('/api/v1/certificates/view/NEX-nothing-000000')

        assert response.status_code == 404
        assert response.json()['error']['code'] == 'CERTIFICATE_NOT_FOUND'

    async def test_view_undecryptable(self, client: AsyncClient, db_session, internship, admin_auth_headers):
        completed = await _complete(client, internship.id, admin_auth_headers)
        certificate_id = completed.json()['certificate']['certificateId']

        result = await db_session.execute(select(Certificate).where(Certificate.certificate_id == certificate_id))
        certificate = result.scalar_one()
        certificate.encrypted_data = 'gcm1:AAAA'
        await db_session.commit()

        response = await client.get(f'/api/v1/certificates/view/{certificate_id}')

        assert response.status_code == 500
        body = response.json()
        assert body['success'] is False
        assert body['error']['code'] == 'CERTIFICATE_DECRYPTION_FAILED'

    async def test_my_certificate(self, client: AsyncClient, internship, admin_auth_headers, intern_auth_headers):
        before = await client.get('/api/v1/certificates/me', headers=intern_auth_headers)
        assert before.status_code == 200
        assert before.json()['certificate'] is None

        await _complete(client, internship.id, admin_auth_headers)
        after = await client.get('/api/v1/certificates/me', headers=intern_auth_headers)

        assert after.json()['certificate']['internshipId'] == internship.id

    async def test_admin_intern_lookup(self, client: AsyncClient, internship, intern_user, admin_auth_headers):
        await _complete(client, internship.id, admin_auth_headers)

        response = await client.get(f'/api/v1/certificates/intern/{intern_user.id}', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['user']['id'] == intern_user.id
        assert response.json()['certificate']['internId'] == intern_user.id

    async def test_admin_lookup_non_intern(self, client: AsyncClient, member_user, admin_auth_headers):
        response = await client.get(f'/api/v1/certificates/intern/{member_user.id}', headers=admin_auth_headers)

        assert response.status_code == 404
        assert response.json()['detail'] == 'Intern not found'


class TestCompletionCheck:
    """POST /internships/check-completions"""

    async def test_sweep_completes_overdue(self, client: AsyncClient, db_session, internship, admin_auth_headers):
        internship.end_date = datetime.utcnow() - timedelta(days=2)
        await db_session.commit()

        response = await client.post('/api/v1/internships/check-completions', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['message'] == 'Completion check completed successfully'
        assert data['completed'] == 1
        assert data['nearing_completion'] == 0

        await db_session.refresh(internship)
        assert internship.status == InternshipState.COMPLETED
        assert internship.certificate_ref is not None

    async def test_sweep_admin_only(self, client: AsyncClient, intern_auth_headers):
        response = await client.post('/api/v1/internships/check-completions', headers=intern_auth_headers)

        assert response.status_code == 403


class TestStrandedCompletion:
    """A completion whose certificate could not be issued is recoverable"""

    async def test_complete_retries_missing_certificate(self, client: AsyncClient, db_session, internship, admin_auth_headers):
        with patch.object(certificate_service, 'issue_certificate', AsyncMock(return_value=None)):
            failed = await _complete(client, internship.id, admin_auth_headers)

        assert failed.status_code == 500
        await db_session.refresh(internship)
        assert internship.status == InternshipState.COMPLETED
        assert internship.certificate_ref is None

        retried = await _complete(client, internship.id, admin_auth_headers)
        again = await _complete(client, internship.id, admin_auth_headers)

        assert retried.status_code == 200
        assert retried.json()['internship']['certificate_ref'] == retried.json()['certificate']['id']
        assert again.status_code == 400

    async def test_check_completions_backfills(self, client: AsyncClient, db_session, internship, admin_auth_headers):
        internship.status = InternshipState.COMPLETED
        internship.end_date = datetime.utcnow() - timedelta(days=1)
        await db_session.commit()

        response = await client.post('/api/v1/internships/check-completions', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['certificates_backfilled'] == 1

        await db_session.refresh(internship)
        certificate = await db_session.get(Certificate, internship.certificate_ref)
        assert certificate.internship_id == internship.id
        assert certificate.certificate_id.startswith('NEX-')

    async def test_internship_exposes_certificate_ref(self, client: AsyncClient, internship, admin_auth_headers):
        response = await _complete(client, internship.id, admin_auth_headers)

        body = response.json()
        assert 'certificate_id' not in body['internship']
        assert body['internship']['certificate_ref'] == body['certificate']['id']
        assert body['certificate']['certificateId'] != body['internship']['certificate_ref']
