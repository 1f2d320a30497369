"""Access to the hosted authentication and table store."""

from .client import BackendConfigError, BackendError, HostedBackend, build_backend
from .repository import FinanceRepository, TableGateway

__all__ = [
    "BackendConfigError",
    "BackendError",
    "FinanceRepository",
    "HostedBackend",
    "TableGateway",
    "build_backend",
]
