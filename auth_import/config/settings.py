"""Settings assembly for an import run."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config_loader import ConfigLoader


@dataclass
class ProviderProfile:
    name: str
    endpoint: str
    api_token: str = ""
    client_id: str = ""
    client_secret: str = ""

    @property
    def base_url(self) -> str:
        if self.endpoint.startswith(("http://", "https://")):
            return self.endpoint
        return f"https://{self.endpoint}"


@dataclass
class ImportSettings:
    config_loader: ConfigLoader
    profile: ProviderProfile
    registry_file: str

    @property
    def environment(self) -> str:
        return self.config_loader.environment

    @property
    def provider_name(self) -> str:
        return self.config_loader.get_provider_name()


def _load_profile_from_file(profile_name: str, credentials_file: str) -> Dict[str, Any]:
    if not os.path.exists(credentials_file):
        return {}

    with open(credentials_file, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    for profile in data.get("profiles", []):
        if profile.get("name") == profile_name:
            return profile
    raise ValueError(f"Profile {profile_name} not found in {credentials_file}")


def load_import_settings(
    profile_name: str = "default",
    config_file: str = "configs/config.json",
    credentials_file: str = "configs/credentials.json",
    registry_file: Optional[str] = None,
    config_loader: Optional[ConfigLoader] = None,
) -> ImportSettings:
    """Load import settings with env-var overrides."""

    config_loader = config_loader or ConfigLoader(config_file=config_file)
    profile_data = _load_profile_from_file(profile_name, credentials_file)

    profile = ProviderProfile(
        name=profile_name,
        endpoint=os.getenv("PROVIDER_ENDPOINT", "") or profile_data.get("endpoint", "") or config_loader.get("provider.endpoint", ""),
        api_token=os.getenv("PROVIDER_API_TOKEN", "") or profile_data.get("api_token", ""),
        client_id=os.getenv("PROVIDER_CLIENT_ID", "") or profile_data.get("client_id", ""),
        client_secret=os.getenv("PROVIDER_CLIENT_SECRET", "") or profile_data.get("client_secret", ""),
    )

    if not profile.endpoint:
        raise ValueError("endpoint is required via credentials file, provider.endpoint or PROVIDER_ENDPOINT env var")

    return ImportSettings(
        config_loader=config_loader,
        profile=profile,
        registry_file=registry_file or config_loader.get("import.registry_file", "amplify/backend/amplify-meta.json"),
    )
