"""
Data access layer for LoadDistributionPolicy resources.
"""
from .exceptions import (
    PolicyStoreError,
    ResourceNotFoundError,
    RetryableError,
    InvalidPolicyError,
    KubernetesAPIError,
)
from .kubernetes_client import KubernetesClient
from .policy_store import (
    PolicyStore,
    InMemoryPolicyStore,
    KubernetesPolicyStore,
)

__all__ = [
    'PolicyStoreError',
    'ResourceNotFoundError',
    'RetryableError',
    'InvalidPolicyError',
    'KubernetesAPIError',
    'KubernetesClient',
    'PolicyStore',
    'InMemoryPolicyStore',
    'KubernetesPolicyStore',
]
