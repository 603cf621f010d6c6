"""
Application Gateway load distribution resources emitted by the builder.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from ..exceptions import ValidationError


class LoadDistributionAlgorithm(Enum):
    """Load distribution algorithms supported by Application Gateway."""
    ROUND_ROBIN = 'RoundRobin'


@dataclass(frozen=True)
class SubResource:
    """Reference to another gateway resource by ID only."""
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id}


@dataclass
class GatewayDistributionTarget:
    """
    Weighted target of a gateway load distribution policy.

    Attributes:
        name: Target name, unique within its policy
        id: Gateway resource ID of the target
        weight_per_server: Weight of the target (>= 1)
        backend_address_pool: Reference to the backend address pool
        etag: Resource etag
    """
    name: str
    id: str
    weight_per_server: int
    backend_address_pool: SubResource
    etag: str = '*'

    def __post_init__(self):
        """Validate target weight."""
        if self.weight_per_server < 1:
            raise ValidationError(
                f"weight_per_server must be at least 1, got {self.weight_per_server}",
                field='weightPerServer'
            )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the gateway configuration document shape.

        Returns:
            Dictionary representation of the target
        """
        return {
            'name': self.name,
            'id': self.id,
            'etag': self.etag,
            'properties': {
                'weightPerServer': self.weight_per_server,
                'backendAddressPool': self.backend_address_pool.to_dict(),
            },
        }


@dataclass
class GatewayDistributionPolicy:
    """
    Gateway load distribution policy.

    Attributes:
        name: Generated policy name
        id: Gateway resource ID of the policy
        targets: Targets of the policy (may be empty)
        load_distribution_algorithm: Distribution algorithm
    """
    name: str
    id: str
    targets: List[GatewayDistributionTarget] = field(default_factory=list)
    load_distribution_algorithm: LoadDistributionAlgorithm = LoadDistributionAlgorithm.ROUND_ROBIN

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the gateway configuration document shape.

        Returns:
            Dictionary representation of the policy
        """
        return {
            'name': self.name,
            'id': self.id,
            'properties': {
                'loadDistributionAlgorithm': self.load_distribution_algorithm.value,
                'loadDistributionTargets': [target.to_dict() for target in self.targets],
            },
        }
