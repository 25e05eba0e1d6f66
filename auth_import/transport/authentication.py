"""
Authentication handling for the provider gateway API.
Supports static bearer tokens and the OAuth 2.0 client credentials flow.
"""

import base64
import logging
import aiohttp
from datetime import datetime, timedelta
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ProviderAuthenticator:
    """Builds authorization headers for provider API requests."""

    def __init__(self, base_url: str, session: aiohttp.ClientSession, token_path: str = "/oauth2/token"):
        self.base_url = base_url
        self.session = session
        self.token_path = token_path

        # Credentials
        self.api_token: Optional[str] = None
        self.client_id: Optional[str] = None
        self.client_secret: Optional[str] = None

        # OAuth state
        self.access_token: Optional[str] = None
        self.token_expires_at: Optional[datetime] = None

        self.headers: Optional[Dict[str, str]] = None

    def set_api_token(self, api_token: str):
        """Set a static bearer token."""
        self.api_token = api_token

    def set_oauth_credentials(self, client_id: str, client_secret: str):
        """Set OAuth 2.0 client credentials."""
        self.client_id = client_id
        self.client_secret = client_secret

    async def fetch_oauth_token(self) -> Optional[str]:
        """Fetch a bearer token using the client credentials flow."""
        if not self.client_id or not self.client_secret:
            return None

        auth_header = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode()
        headers = {
            "Authorization": f"Basic {auth_header}",
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        data = {"grant_type": "client_credentials"}

        async with self.session.post(f"{self.base_url}{self.token_path}", headers=headers, data=data) as response:
            if response.status != 200:
                error_text = await response.text()
                logger.error("Failed to get OAuth token: %s - %s", response.status, error_text)
                return None
            token_data = await response.json()

        access_token = token_data.get("access_token")
        expires_in = token_data.get("expires_in", 3600)
        if access_token:
            # Refresh five minutes early
            self.token_expires_at = datetime.now() + timedelta(seconds=max(expires_in - 300, 0))
            logger.debug("OAuth token obtained, expires at %s", self.token_expires_at)
        return access_token

    async def ensure_valid_token(self) -> bool:
        """Ensure we have a valid access token, refresh if needed."""
        if self.access_token and self.token_expires_at and datetime.now() < self.token_expires_at:
            return True
        self.access_token = await self.fetch_oauth_token()
        return self.access_token is not None

    def _bearer_headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def setup_authentication(self) -> Dict[str, str]:
        """Setup authentication headers based on available credentials."""
        # Static token wins over OAuth
        if self.api_token:
            self.headers = self._bearer_headers(self.api_token)
        elif self.client_id and self.client_secret:
            if not await self.ensure_valid_token():
                raise RuntimeError("Failed to obtain OAuth access token")
            self.headers = self._bearer_headers(self.access_token)
        else:
            raise RuntimeError("No authentication credentials available (neither API token nor OAuth client credentials)")
        return self.headers

    async def get_headers(self) -> Dict[str, str]:
        """Get current authentication headers, refreshing the OAuth token if needed."""
        if self.client_id and self.client_secret and not self.api_token:
            if not await self.ensure_valid_token():
                raise RuntimeError("Failed to refresh OAuth token")
            self.headers = self._bearer_headers(self.access_token)
        return self.headers
