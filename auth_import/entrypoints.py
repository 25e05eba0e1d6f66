import asyncio
from typing import Optional

from .config import ImportSettings, load_import_settings
from .inspector import JsonLocalRegistry
from .models import ResourceDescriptor
from .orchestrator import reconcile
from .providers import FacadeFactory, resolve_facade_factory
from .request import Payload, parse_import_request


async def _run_import_async(payload: Payload, settings: ImportSettings, facade_factory: FacadeFactory) -> ResourceDescriptor:
    loader = settings.config_loader
    request = parse_import_request(payload, loader.get_supported_versions())
    registry = JsonLocalRegistry(settings.registry_file)

    async with facade_factory(settings) as facade:
        return await reconcile(
            request,
            facade,
            registry,
            category=loader.get_resource_category(),
            provenance_key=loader.get_provenance_key(),
            imported_marker=loader.get_imported_marker(),
        )


def run_import(
    payload: Payload,
    profile_name: str = "default",
    config_file: str = "configs/config.json",
    credentials_file: str = "configs/credentials.json",
    registry_file: Optional[str] = None,
    facade_factory: Optional[FacadeFactory] = None,
    settings: Optional[ImportSettings] = None,
) -> ResourceDescriptor:
    """
    Synchronous helper to reconcile a headless import payload.

    The payload is validated before the provider facade is opened, so an
    invalid payload never triggers a provider call.
    """
    settings = settings or load_import_settings(
        profile_name=profile_name,
        config_file=config_file,
        credentials_file=credentials_file,
        registry_file=registry_file,
    )
    settings.config_loader.setup_logging()
    factory = facade_factory or resolve_facade_factory(settings.provider_name)
    return asyncio.run(_run_import_async(payload, settings, factory))
