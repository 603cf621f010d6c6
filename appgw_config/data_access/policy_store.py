"""
Stores that resolve LoadDistributionPolicy resources by namespace and name.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Tuple

from .exceptions import InvalidPolicyError, ResourceNotFoundError
from .kubernetes_client import KubernetesClient
from ..config.constants import LDP_API_GROUP, LDP_API_VERSION, LDP_PLURAL
from ..config.settings import Settings
from ..exceptions import ValidationError
from ..models.load_distribution_policy import LoadDistributionPolicy
from ..utils.retry import retry_operation

logger = logging.getLogger(__name__)


class PolicyStore(ABC):
    """Read access to LoadDistributionPolicy resources."""

    @abstractmethod
    def get_load_distribution_policy(self, namespace: str, name: str) -> LoadDistributionPolicy:
        """
        Get a policy by namespace and name.

        Args:
            namespace: Policy namespace
            name: Policy name

        Returns:
            Parsed policy

        Raises:
            PolicyStoreError: If the policy cannot be obtained
        """


def _parse_policy(data: Dict[str, Any], namespace: str, name: str) -> LoadDistributionPolicy:
    try:
        policy = LoadDistributionPolicy.from_dict(data)
    except ValidationError as e:
        raise InvalidPolicyError(f"Invalid LoadDistributionPolicy {namespace}/{name}: {e}")

    if not policy.namespace:
        policy = LoadDistributionPolicy(
            name=policy.name,
            namespace=namespace,
            targets=policy.targets
        )
    return policy


class InMemoryPolicyStore(PolicyStore):
    """
    Policy store backed by a dictionary, keyed by (namespace, name).

    Suited to feeding a build from an informer-style cache or from
    manifests loaded ahead of time.
    """

    def __init__(self, policies: Optional[Iterable[LoadDistributionPolicy]] = None):
        self._policies: Dict[Tuple[str, str], LoadDistributionPolicy] = {}
        for policy in policies or []:
            self.add(policy)

    @classmethod
    def from_resources(cls, resources: Iterable[Dict[str, Any]]) -> 'InMemoryPolicyStore':
        """
        Create a store from raw resource dictionaries.

        Args:
            resources: LoadDistributionPolicy resources as decoded JSON

        Returns:
            InMemoryPolicyStore instance

        Raises:
            InvalidPolicyError: If a resource cannot be parsed
        """
        store = cls()
        for resource in resources:
            metadata = resource.get('metadata') if isinstance(resource, dict) else None
            if not isinstance(metadata, dict):
                metadata = {}
            store.add(_parse_policy(
                resource,
                metadata.get('namespace') or '',
                metadata.get('name') or ''
            ))
        return store

    def add(self, policy: LoadDistributionPolicy) -> None:
        self._policies[(policy.namespace, policy.name)] = policy

    def remove(self, namespace: str, name: str) -> None:
        self._policies.pop((namespace, name), None)

    def get_load_distribution_policy(self, namespace: str, name: str) -> LoadDistributionPolicy:
        policy = self._policies.get((namespace, name))
        if policy is None:
            raise ResourceNotFoundError(f"LoadDistributionPolicy {namespace}/{name} not found")
        return policy


class KubernetesPolicyStore(PolicyStore):
    """
    Policy store reading LoadDistributionPolicy resources from the API server.

    Transient failures are retried with exponential backoff; everything
    else surfaces as a PolicyStoreError on the first attempt.
    """

    def __init__(
        self,
        client: KubernetesClient,
        max_retries: int = 3,
        base_delay: float = 0.1,
        max_delay: float = 2.0
    ):
        """
        Initialize Kubernetes policy store.

        Args:
            client: Kubernetes API client
            max_retries: Maximum retries for transient failures
            base_delay: Initial backoff delay in seconds
            max_delay: Maximum backoff delay in seconds
        """
        self.client = client
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> 'KubernetesPolicyStore':
        return cls(
            client=KubernetesClient.from_settings(settings),
            max_retries=settings.max_retries,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay
        )

    def get_load_distribution_policy(self, namespace: str, name: str) -> LoadDistributionPolicy:
        """
        Get a policy from the API server.

        Args:
            namespace: Policy namespace
            name: Policy name

        Returns:
            Parsed policy

        Raises:
            ResourceNotFoundError: If the policy does not exist
            RetryableError: If transient failures outlast the retries
            KubernetesAPIError: On other API failures
            InvalidPolicyError: If the resource cannot be parsed
        """
        data = retry_operation(
            lambda: self.client.get_namespaced_custom_object(
                group=LDP_API_GROUP,
                version=LDP_API_VERSION,
                namespace=namespace,
                plural=LDP_PLURAL,
                name=name
            ),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay
        )
        logger.debug(f"Fetched LoadDistributionPolicy {namespace}/{name}")
        return _parse_policy(data, namespace, name)
