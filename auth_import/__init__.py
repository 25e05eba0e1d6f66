"""
Auth import reconciliation engine.
Reconciles an existing user directory and federation pool against live
provider state and produces the descriptor to register locally.
"""
__version__ = "1.0.0"

from .entrypoints import run_import
from .errors import ErrorKind, ProviderCallError, ProviderNotFoundError, ReconciliationError
from .models import ImportRequest, ResourceDescriptor
from .orchestrator import Reconciliation, ReconciliationState, reconcile
from .request import parse_import_request

__all__ = [
    "ErrorKind",
    "ImportRequest",
    "ProviderCallError",
    "ProviderNotFoundError",
    "Reconciliation",
    "ReconciliationError",
    "ReconciliationState",
    "ResourceDescriptor",
    "parse_import_request",
    "reconcile",
    "run_import",
]
