"""Facebook OAuth provider used as the external identity source."""

from urllib.parse import urlencode

import httpx

from backend.core import config


class FacebookOAuthProvider:
    """Handle the Facebook authorization code flow."""

    GRAPH_VERSION = "v19.0"
    AUTH_URL = f"https://www.facebook.com/{GRAPH_VERSION}/dialog/oauth"
    TOKEN_URL = f"https://graph.facebook.com/{GRAPH_VERSION}/oauth/access_token"
    PROFILE_URL = "https://graph.facebook.com/me"

    def __init__(self, client_id: str | None = None, client_secret: str | None = None, redirect_uri: str | None = None):
        self.client_id = client_id if client_id is not None else config.FACEBOOK_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else config.FACEBOOK_CLIENT_SECRET
        self.redirect_uri = redirect_uri if redirect_uri is not None else config.FACEBOOK_REDIRECT_URI

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "email,public_profile",
        }
        if state:
            params["state"] = state
        return f"{self.AUTH_URL}?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> str:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                self.TOKEN_URL,
                params={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "code": code,
                },
            )
            response.raise_for_status()
            return response.json()["access_token"]

    async def get_user_profile(self, access_token: str) -> dict:
        """Return `{id, name, email}` for the token's owner."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                self.PROFILE_URL,
                params={"fields": "id,name,email", "access_token": access_token},
            )
            response.raise_for_status()
            data = response.json()
        return {
            "id": data.get("id"),
            "name": data.get("name"),
            "email": data.get("email"),
        }


facebook_provider = FacebookOAuthProvider()
