"""Static table of provider facade factories, resolved by provider name."""
from __future__ import annotations

from typing import Any, Callable, Dict

from .config.settings import ImportSettings
from .transport import ApiClient, HttpProviderFacade

FacadeFactory = Callable[[ImportSettings], Any]


def _http_facade_factory(settings: ImportSettings) -> HttpProviderFacade:
    client = ApiClient(
        settings.profile.base_url,
        settings.config_loader,
        api_token=settings.profile.api_token,
        client_id=settings.profile.client_id,
        client_secret=settings.profile.client_secret,
    )
    return HttpProviderFacade(client)


PROVIDERS: Dict[str, FacadeFactory] = {
    "http": _http_facade_factory,
}


def resolve_facade_factory(name: str) -> FacadeFactory:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown provider '{name}'; available: {', '.join(sorted(PROVIDERS))}") from None
