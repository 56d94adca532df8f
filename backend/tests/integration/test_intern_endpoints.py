"""
Integration Tests for intern self-service (profile and offer letter)
"""
from httpx import AsyncClient

from app.models.user import OfferStatus


class TestInternProfile:
    """PUT /intern/profile"""

    async def test_update_profile(self, client: AsyncClient, db_session, intern_user, intern_auth_headers):
        response = await client.put('/api/v1/intern/profile', json={
            'firstName': 'Asha',
            'lastName': 'Verma',
            'phone': '9876543210',
            'bio': 'Backend intern',
            'skills': ['Python', 'SQL'],
        }, headers=intern_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['first_name'] == 'Asha'
        assert data['skills'] == ['Python', 'SQL']
        assert 'hashed_password' not in data

        await db_session.refresh(intern_user)
        assert intern_user.last_name == 'Verma'
        assert intern_user.phone == '9876543210'

    async def test_partial_update_keeps_other_fields(self, client: AsyncClient, db_session, intern_user, intern_auth_headers):
        await client.put('/api/v1/intern/profile', json={'bio': 'First'}, headers=intern_auth_headers)

        response = await client.put('/api/v1/intern/profile', json={'phone': '9000000000'}, headers=intern_auth_headers)

        assert response.json()['bio'] == 'First'
        assert response.json()['phone'] == '9000000000'

    async def test_member_forbidden(self, client: AsyncClient, member_auth_headers):
        response = await client.put('/api/v1/intern/profile', json={'bio': 'x'}, headers=member_auth_headers)

        assert response.status_code == 403
        assert response.json()['detail'] == 'Access denied'

    async def test_requires_token(self, client: AsyncClient):
        response = await client.put('/api/v1/intern/profile', json={'bio': 'x'})

        assert response.status_code == 401


class TestOfferLetter:
    """POST /intern/accept-offer and /intern/reject-offer"""

    async def test_accept(self, client: AsyncClient, db_session, intern_user, intern_auth_headers):
        response = await client.post('/api/v1/intern/accept-offer', headers=intern_auth_headers)

        assert response.status_code == 200
        assert response.json() == {'message': 'Offer accepted successfully', 'offer_status': 'accepted'}

        await db_session.refresh(intern_user)
        assert intern_user.offer_status == OfferStatus.ACCEPTED
        assert intern_user.offer_accepted_at is not None

    async def test_reject_with_reason(self, client: AsyncClient, db_session, intern_user, intern_auth_headers):
        response = await client.post(
            '/api/v1/intern/reject-offer',
            json={'reason': 'Accepted another offer'},
            headers=intern_auth_headers
        )

        assert response.status_code == 200
        assert response.json()['message'] == 'Offer rejected successfully'

        await db_session.refresh(intern_user)
        assert intern_user.offer_status == OfferStatus.REJECTED
        assert intern_user.offer_rejection_reason == 'Accepted another offer'
        assert intern_user.offer_rejected_at is not None

    async def test_answer_is_final(self, client: AsyncClient, db_session, intern_user, intern_auth_headers):
        await client.post('/api/v1/intern/accept-offer', headers=intern_auth_headers)

        response = await client.post('/api/v1/intern/reject-offer', json={}, headers=intern_auth_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'Offer already accepted'

        await db_session.refresh(intern_user)
        assert intern_user.offer_status == OfferStatus.ACCEPTED
        assert intern_user.offer_rejection_reason is None

    async def test_offer_status_on_me(self, client: AsyncClient, intern_auth_headers):
        before = await client.get('/api/v1/auth/me', headers=intern_auth_headers)
        await client.post('/api/v1/intern/accept-offer', headers=intern_auth_headers)
        after = await client.get('/api/v1/auth/me', headers=intern_auth_headers)

        assert before.json()['offer_status'] == 'pending'
        assert after.json()['offer_status'] == 'accepted'

    async def test_client_cannot_answer(self, client: AsyncClient, client_auth_headers):
        response = await client.post('/api/v1/intern/accept-offer', headers=client_auth_headers)

        assert response.status_code == 403
