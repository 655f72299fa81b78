import json
import pytest
from django.urls import reverse


@pytest.mark.django_db
class TestLogoutEndpoint:
    """Tests for /api/logout/ endpoint"""

    def _login(self, client, user_factory, username='alice', role='student'):
        """Creates a user with the given role, logs in and copies the JWT cookies onto the client"""
        user_factory(username, role)
        resp = client.post(
            reverse('api-login'),
            data={'username': username, 'password': 'Str0ng!Pass'},
            content_type='application/json'
        )
        assert resp.status_code == 200, f'Login failed: {resp.status_code} {resp.content}'
        client.cookies['access_token'] = resp.cookies['access_token'].value
        client.cookies['refresh_token'] = resp.cookies['refresh_token'].value
        return resp

    def test_logout_deletes_cookies(self, client, user_factory):
        """A logged-in user gets 200 and both cookies are expired on the response"""
        self._login(client, user_factory)
        resp = client.post(reverse('api-logout'), data={}, content_type='application/json')
        assert resp.status_code == 200
        body = json.loads(resp.content.decode())
        assert body['detail'] == 'Log-Out successfully! All Tokens will be deleted. Refresh token is now invalid.'
        for name in ('access_token', 'refresh_token'):
            assert name in resp.cookies
            assert resp.cookies[name].value == ''

    def test_refresh_token_is_unusable_after_logout(self, client, user_factory):
        """The refresh token is blacklisted, so a later refresh with it is rejected"""
        login = self._login(client, user_factory, username='ina', role='instructor')
        refresh_value = login.cookies['refresh_token'].value
        client.post(reverse('api-logout'), data={}, content_type='application/json')
        client.cookies['refresh_token'] = refresh_value
        resp = client.post(reverse('api-token-refresh'), data={}, content_type='application/json')
        assert resp.status_code == 401

    def test_logout_with_garbage_token_still_clears_cookies(self, client):
        client.cookies['refresh_token'] = 'not-a-jwt'
        resp = client.post(reverse('api-logout'), data={}, content_type='application/json')
        assert resp.status_code == 200

    def test_logout_unauthenticated_returns_401(self, client):
        """Given no refresh cookie, 401 Unauthorized is returned"""
        resp = client.post(reverse('api-logout'), data={}, content_type='application/json')
        assert resp.status_code == 401
        assert json.loads(resp.content.decode())['detail'] == 'Authentication credentials were not provided.'
