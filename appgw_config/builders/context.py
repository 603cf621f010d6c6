"""
Inputs shared by the builders of one configuration build.
"""
import uuid
from dataclasses import dataclass, field
from typing import Dict, Set

from ..models.backend import BackendIdentifier, ServiceBackendPortPair


@dataclass
class ConfigBuilderContext:
    """
    Per-build inputs produced upstream of the load distribution builder.

    Attributes:
        backend_ids: Backends relevant to this build, policy-bound or not
        service_backend_pairs_by_backend: Resolved service/backend port pair per backend
        build_id: Correlation ID for diagnostics of this build
    """
    backend_ids: Set[BackendIdentifier] = field(default_factory=set)
    service_backend_pairs_by_backend: Dict[BackendIdentifier, ServiceBackendPortPair] = field(
        default_factory=dict
    )
    build_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def backend_port(self, backend_id: BackendIdentifier) -> int:
        """
        Resolve the backend port used when naming the backend's address pool.

        Args:
            backend_id: Backend identifier

        Returns:
            Resolved backend port, or 0 when no pair was resolved for the backend
        """
        pair = self.service_backend_pairs_by_backend.get(backend_id)
        if pair is None:
            return 0
        return pair.backend_port
