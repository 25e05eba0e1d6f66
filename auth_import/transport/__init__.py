"""HTTP transport for talking to the identity provider gateway."""

from .api_client import ApiClient
from .authentication import ProviderAuthenticator
from .endpoints import get_provider_endpoints
from .http_facade import HttpProviderFacade

__all__ = ["ApiClient", "ProviderAuthenticator", "get_provider_endpoints", "HttpProviderFacade"]
