"""
Backend identification models shared across the configuration build.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..config.constants import LDP_API_GROUP, LDP_KIND
from ..exceptions import ValidationError


@dataclass(frozen=True)
class ServiceBackendPort:
    """
    Port of a referenced service, either by name or by number.

    Attributes:
        name: Named service port (takes precedence when set)
        number: Numeric service port
    """
    name: str = ''
    number: int = 0

    def to_str(self) -> str:
        """
        Render the port the way address pool names embed it.

        Returns:
            Port name if set, otherwise the port number
        """
        if self.name:
            return self.name
        return str(self.number)

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], int, str]) -> 'ServiceBackendPort':
        """
        Create ServiceBackendPort from a resource field.

        Accepts the structured ``{"name": ..}`` / ``{"number": ..}`` form as
        well as a bare number or port name.

        Args:
            data: Port field value

        Returns:
            ServiceBackendPort instance

        Raises:
            ValidationError: If the value is not a recognisable port
        """
        if isinstance(data, bool):
            raise ValidationError(f"Invalid service port: {data!r}", field='port')
        if isinstance(data, int):
            return cls(number=data)
        if isinstance(data, str):
            if data.isdigit():
                return cls(number=int(data))
            return cls(name=data)
        if isinstance(data, dict):
            name = data.get('name') or ''
            if not isinstance(name, str):
                raise ValidationError(f"Invalid service port name: {name!r}", field='port.name')
            return cls(name=name, number=_parse_port_number(data.get('number') or 0))
        raise ValidationError(f"Invalid service port: {data!r}", field='port')


def _parse_port_number(value: Any) -> int:
    """Accept an int or a digit string; anything else is a malformed port."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise ValidationError(f"Invalid service port number: {value!r}", field='port.number')


@dataclass(frozen=True)
class IngressServiceBackend:
    """Reference to a service and one of its ports."""
    name: str
    port: ServiceBackendPort

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IngressServiceBackend':
        """
        Create IngressServiceBackend from a resource field.

        Args:
            data: Dictionary with ``name`` and ``port``

        Returns:
            IngressServiceBackend instance

        Raises:
            ValidationError: If the service name or port is missing
        """
        if not isinstance(data, dict) or not data.get('name'):
            raise ValidationError('service name is required', field='service.name')
        if not isinstance(data['name'], str):
            raise ValidationError(f"Invalid service name: {data['name']!r}", field='service.name')
        if data.get('port') is None:
            raise ValidationError('service port is required', field='service.port')

        return cls(
            name=data['name'],
            port=ServiceBackendPort.from_dict(data['port'])
        )


@dataclass(frozen=True)
class TypedLocalObjectReference:
    """Reference to a resource in the same namespace."""
    kind: str
    name: str
    api_group: Optional[str] = None


@dataclass(frozen=True)
class IngressBackend:
    """
    Ingress backend pointing either at a service or at another resource.

    Attributes:
        service: Service backend, if routed to a service
        resource: Resource reference, if routed to a resource (e.g. a policy)
    """
    service: Optional[IngressServiceBackend] = None
    resource: Optional[TypedLocalObjectReference] = None


@dataclass(frozen=True)
class BackendIdentifier:
    """
    Identifies one backend of the ingress configuration within a namespace.

    Hashable so that a build can hold its backends in a set and key
    per-backend data (such as resolved ports) by identifier.

    Attributes:
        namespace: Namespace of the ingress that declares the backend
        backend: Backend reference
        ingress_name: Ingress that declares the backend
        host: Rule host the backend is routed under
        path: Rule path the backend is routed under
    """
    namespace: str
    backend: IngressBackend
    ingress_name: str = ''
    host: str = ''
    path: str = ''

    def is_ldp_backend(self) -> bool:
        """
        Check whether the backend is bound to a load distribution policy.

        Returns:
            True if the backend references a LoadDistributionPolicy resource
        """
        resource = self.backend.resource
        if resource is None or resource.kind != LDP_KIND:
            return False
        return resource.api_group in (None, '', LDP_API_GROUP)

    @property
    def ldp_name(self) -> Optional[str]:
        """Name of the referenced policy, or None for other backends."""
        if not self.is_ldp_backend():
            return None
        return self.backend.resource.name

    def sort_key(self):
        """Stable ordering key used to iterate backend sets deterministically."""
        service = self.backend.service
        resource = self.backend.resource
        return (
            self.namespace,
            resource.kind if resource else '',
            (resource.api_group or '') if resource else '',
            resource.name if resource else '',
            service.name if service else '',
            service.port.name if service else '',
            service.port.number if service else 0,
            self.ingress_name,
            self.host,
            self.path,
        )


@dataclass(frozen=True)
class ServiceBackendPortPair:
    """Service port paired with the backend (endpoint) port it resolved to."""
    service_port: int
    backend_port: int
