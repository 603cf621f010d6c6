"""
LoadDistributionPolicy custom resource model.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .backend import IngressServiceBackend
from ..exceptions import ValidationError


@dataclass(frozen=True)
class PolicyTarget:
    """
    One weighted destination declared by a load distribution policy.

    Weight is kept as declared; filtering of weights the gateway cannot
    accept happens when targets are resolved.

    Attributes:
        backend: Service and port the target routes to
        weight: Relative weight of the target
    """
    backend: IngressServiceBackend
    weight: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolicyTarget':
        """
        Create PolicyTarget from a ``spec.targets[]`` entry.

        Args:
            data: Target entry

        Returns:
            PolicyTarget instance

        Raises:
            ValidationError: If the backend service or weight is malformed
        """
        if not isinstance(data, dict):
            raise ValidationError('target must be an object', field='targets')

        backend = data.get('backend') or {}
        service = backend.get('service') if isinstance(backend, dict) else None
        if service is None:
            raise ValidationError('target backend service is required', field='backend.service')

        weight = data.get('weight', 0)
        if isinstance(weight, bool) or not isinstance(weight, (int, str)):
            raise ValidationError(f"Invalid target weight: {weight!r}", field='weight')
        try:
            weight = int(weight)
        except ValueError:
            raise ValidationError(f"Invalid target weight: {weight!r}", field='weight')

        return cls(
            backend=IngressServiceBackend.from_dict(service),
            weight=weight
        )


@dataclass(frozen=True)
class LoadDistributionPolicy:
    """
    Namespace-scoped policy splitting traffic across weighted targets.

    Attributes:
        name: Resource name
        namespace: Resource namespace
        targets: Declared targets, in declaration order
    """
    name: str
    namespace: str
    targets: List[PolicyTarget] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoadDistributionPolicy':
        """
        Create LoadDistributionPolicy from the resource JSON.

        Args:
            data: Resource with ``metadata`` and ``spec`` sections

        Returns:
            LoadDistributionPolicy instance

        Raises:
            ValidationError: If metadata.name is missing or a section has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValidationError('resource must be an object', field='resource')

        metadata = _section(data, 'metadata')
        name = metadata.get('name')
        if not name:
            raise ValidationError('metadata.name is required', field='metadata.name')
        namespace = metadata.get('namespace') or ''
        if not isinstance(name, str) or not isinstance(namespace, str):
            raise ValidationError('metadata.name and metadata.namespace must be strings', field='metadata')

        spec = _section(data, 'spec')
        raw_targets = spec.get('targets') or []
        if not isinstance(raw_targets, list):
            raise ValidationError('spec.targets must be a list', field='spec.targets')

        return cls(
            name=name,
            namespace=namespace,
            targets=[PolicyTarget.from_dict(target) for target in raw_targets]
        )


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValidationError(f'{key} must be an object', field=key)
    return section
