"""Local state checks performed before any provider call."""
from __future__ import annotations

import json
import logging
import os
from enum import Enum
from typing import Any, Dict, Mapping

from .models import IMPORTED_SERVICE_TYPE

logger = logging.getLogger(__name__)


class PrecheckResult(str, Enum):
    PROCEED = "proceed"
    ALREADY_EXISTS = "already_exists"
    ALREADY_IMPORTED = "already_imported"


class JsonLocalRegistry:
    """Reads the project metadata file that holds locally registered resources."""

    def __init__(self, registry_file: str = "amplify/backend/amplify-meta.json"):
        self.registry_file = registry_file

    def read(self) -> Dict[str, Any]:
        if not os.path.exists(self.registry_file):
            logger.debug("Registry file %s not found; treating project as empty", self.registry_file)
            return {}
        try:
            with open(self.registry_file, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in registry file {self.registry_file}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Registry file {self.registry_file} must contain a JSON object")
        return data


def precheck(
    existing_registry: Mapping[str, Any],
    category: str = "auth",
    provenance_key: str = "serviceType",
    imported_marker: str = IMPORTED_SERVICE_TYPE,
) -> PrecheckResult:
    """Classify the local registry snapshot for the given resource category."""
    resources = existing_registry.get(category) or {}
    if not resources:
        return PrecheckResult.PROCEED

    if not isinstance(resources, Mapping):
        return PrecheckResult.ALREADY_EXISTS

    for name, resource in resources.items():
        if isinstance(resource, Mapping) and resource.get(provenance_key) == imported_marker:
            logger.debug("Resource %s/%s was imported previously", category, name)
            return PrecheckResult.ALREADY_IMPORTED
    return PrecheckResult.ALREADY_EXISTS
