"""Parsing of the serialized import payload into an ImportRequest."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping, Union

from .errors import InvalidPayloadError
from .models import ImportRequest

SUPPORTED_VERSIONS = (1,)

# wire key -> (ImportRequest field, required)
PAYLOAD_FIELDS: Dict[str, tuple] = {
    "version": ("version", True),
    "userPoolId": ("user_directory_id", True),
    "identityPoolId": ("federation_pool_id", True),
    "webClientId": ("public_client_id", False),
    "nativeClientId": ("confidential_client_id", False),
}

Payload = Union[str, bytes, Mapping[str, Any]]


def _invalid(message: str, *identifiers: str) -> InvalidPayloadError:
    return InvalidPayloadError(
        message,
        hint="Fix the import payload and run the import again.",
        identifiers=identifiers,
    )


def parse_import_request(payload: Payload, supported_versions: Iterable[int] = SUPPORTED_VERSIONS) -> ImportRequest:
    """Validate a headless import payload and build the request from it."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise _invalid(f"Import payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise _invalid("Import payload must be a JSON object.")

    unknown = sorted(set(payload) - set(PAYLOAD_FIELDS))
    if unknown:
        raise _invalid(f"Unknown field(s) in import payload: {', '.join(unknown)}.", *unknown)

    values: Dict[str, Any] = {}
    for key, (attr, required) in PAYLOAD_FIELDS.items():
        value = payload.get(key)
        if value is None:
            if required:
                raise _invalid(f"Missing required field '{key}' in import payload.", key)
            continue
        if key == "version":
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise _invalid("Field 'version' must be an integer.", key)
        elif not isinstance(value, str) or not value.strip():
            raise _invalid(f"Field '{key}' must be a non-empty string.", key)
        values[attr] = value

    versions = tuple(supported_versions)
    if values["version"] not in versions:
        raise _invalid(
            f"Unsupported import payload version {values['version']}; "
            f"supported: {', '.join(str(v) for v in versions)}.",
            str(values["version"]),
        )

    return ImportRequest(**values)
