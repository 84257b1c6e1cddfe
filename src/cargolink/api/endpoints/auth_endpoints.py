"""
Authentication Endpoints for the CargoLink Logistics API

Login, logout, password management, two-factor enrollment and session
management. Login and logout also maintain the local session store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .base_endpoint import BaseEndpoint, EndpointError, ResourceId
from ..response_handler import ResponseProcessingError
from ..session_store import SessionCredential, SessionStore


@dataclass
class LoginResult:
    """Outcome of a login attempt that the server did not reject"""
    success: bool
    requires_two_factor: bool = False
    user: Dict[str, Any] = field(default_factory=dict)


class AuthEndpoints(BaseEndpoint):
    """
    Authentication API endpoints.

    A rejected password surfaces as AuthenticationError from ``login``;
    it never clears the local session.
    """

    def __init__(self, client, session_store: SessionStore):
        super().__init__(client)
        self.session_store = session_store

    def _get_base_path(self) -> str:
        return '/auth'

    def login(
        self,
        username: str,
        password: str,
        remember: bool = False,
        two_factor_token: Optional[str] = None
    ) -> LoginResult:
        """
        Log in and store the issued credential

        Args:
            username: Account name
            password: Account password
            remember: Keep the session across restarts (durable scope)
            two_factor_token: One-time code when two-factor is enabled

        Returns:
            LoginResult; ``requires_two_factor`` is set when the server
            asks for a one-time code, in which case nothing is stored
        """
        if not username or not password:
            raise EndpointError("Username and password are required")

        payload = {'username': username, 'password': password}
        if two_factor_token:
            payload['token'] = two_factor_token

        response = self._post_action('login', data=payload) or {}

        if response.get('requiresTwoFactor'):
            self.logger.info(f"Second factor required for {username}")
            return LoginResult(success=False, requires_two_factor=True)

        token = response.get('token')
        if not token:
            raise ResponseProcessingError("Login response did not include a token")

        user = response.get('user') or {}
        self.session_store.save(SessionCredential(token=token, user=user), remember=remember)
        self.logger.info(f"Logged in as {user.get('username', username)}")
        return LoginResult(success=True, user=user)

    def logout(self) -> Any:
        """Notify the server, then clear the local session whatever it answered"""
        try:
            return self._post_action('logout')
        finally:
            self.session_store.clear()

    def get_current_user(self) -> Dict[str, Any]:
        return self._list_resources('me')

    def refresh_user(self) -> Dict[str, Any]:
        """Fetch the current user and rewrite the stored identity record"""
        user = self.get_current_user()
        self.session_store.update_user(user)
        return user

    def forgot_password(self, email: str) -> Any:
        return self._post_action('forgot-password', data={'email': email})

    def reset_password(self, token: str, new_password: str) -> Any:
        return self._post_action('reset-password', data={'token': token, 'newPassword': new_password})

    def change_password(self, old_password: str, new_password: str) -> Any:
        return self._post_action('change-password', data={
            'oldPassword': old_password,
            'newPassword': new_password
        })

    # Two-factor authentication

    def generate_two_factor(self) -> Dict[str, Any]:
        """Start enrollment; the response carries the secret / QR code"""
        return self._post_action('2fa', 'generate')

    def verify_two_factor(self, token: str) -> Any:
        return self._post_action('2fa', 'verify', data={'token': token})

    def disable_two_factor(self) -> Any:
        return self._post_action('2fa', 'disable')

    # Sessions

    def get_sessions(self) -> Any:
        return self._list_resources('sessions')

    def revoke_session(self, session_id: ResourceId) -> Any:
        return self._delete_resource('sessions', session_id)
