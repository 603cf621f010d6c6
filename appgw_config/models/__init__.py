"""
Data models for backends, policy resources and gateway resources.
"""
from .backend import (
    BackendIdentifier,
    IngressBackend,
    IngressServiceBackend,
    ServiceBackendPort,
    ServiceBackendPortPair,
    TypedLocalObjectReference,
)
from .load_distribution_policy import LoadDistributionPolicy, PolicyTarget
from .gateway_resources import (
    GatewayDistributionPolicy,
    GatewayDistributionTarget,
    LoadDistributionAlgorithm,
    SubResource,
)

__all__ = [
    'BackendIdentifier',
    'IngressBackend',
    'IngressServiceBackend',
    'ServiceBackendPort',
    'ServiceBackendPortPair',
    'TypedLocalObjectReference',
    'LoadDistributionPolicy',
    'PolicyTarget',
    'GatewayDistributionPolicy',
    'GatewayDistributionTarget',
    'LoadDistributionAlgorithm',
    'SubResource',
]
