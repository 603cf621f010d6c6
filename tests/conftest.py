"""
Pytest configuration and fixtures.
"""
import os

import pytest

from appgw_config.builders import ConfigBuilderContext, LoadDistributionPolicyBuilder
from appgw_config.config import reset_settings
from appgw_config.data_access import InMemoryPolicyStore
from appgw_config.models import (
    BackendIdentifier,
    IngressBackend,
    IngressServiceBackend,
    LoadDistributionPolicy,
    PolicyTarget,
    ServiceBackendPort,
    ServiceBackendPortPair,
    TypedLocalObjectReference,
)
from appgw_config.utils import Identifier


@pytest.fixture(scope="session", autouse=True)
def env_vars():
    """Set up environment variables for tests."""
    os.environ["APPGW_SUBSCRIPTION_ID"] = "sub-123"
    os.environ["APPGW_RESOURCE_GROUP"] = "rg-test"
    os.environ["APPGW_NAME"] = "appgw-test"
    os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings from the environment in every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def identifier():
    """Gateway identifier matching the test environment."""
    return Identifier(
        subscription_id='sub-123',
        resource_group='rg-test',
        app_gw_name='appgw-test'
    )


@pytest.fixture
def gateway_id():
    return (
        '/subscriptions/sub-123/resourceGroups/rg-test'
        '/providers/Microsoft.Network/applicationGateways/appgw-test'
    )


def make_ldp_backend(namespace: str, ldp_name: str, ingress_name: str = 'ingress') -> BackendIdentifier:
    """Backend bound to a LoadDistributionPolicy."""
    return BackendIdentifier(
        namespace=namespace,
        backend=IngressBackend(
            resource=TypedLocalObjectReference(
                kind='LoadDistributionPolicy',
                name=ldp_name,
                api_group='appgw.ingress.azure.io'
            )
        ),
        ingress_name=ingress_name
    )


def make_service_backend(namespace: str, service_name: str, port: int = 80) -> BackendIdentifier:
    """Backend routed straight to a service."""
    return BackendIdentifier(
        namespace=namespace,
        backend=IngressBackend(
            service=IngressServiceBackend(
                name=service_name,
                port=ServiceBackendPort(number=port)
            )
        ),
        ingress_name='ingress'
    )


def make_policy(namespace: str, name: str, *targets) -> LoadDistributionPolicy:
    """Policy from ``(service, port, weight)`` tuples."""
    return LoadDistributionPolicy(
        name=name,
        namespace=namespace,
        targets=[
            PolicyTarget(
                backend=IngressServiceBackend(
                    name=service,
                    port=ServiceBackendPort.from_dict(port)
                ),
                weight=weight
            )
            for service, port, weight in targets
        ]
    )


@pytest.fixture
def policy_store():
    """Store holding the ns1/ldp1 example policy."""
    return InMemoryPolicyStore([
        make_policy('ns1', 'ldp1', ('svcA', 80, 3), ('svcB', 80, 0)),
    ])


@pytest.fixture
def builder(policy_store, identifier):
    """Builder over the example store."""
    return LoadDistributionPolicyBuilder(policy_store, identifier)


@pytest.fixture
def cb_ctx():
    """Build context with the ns1/ldp1 backend resolved to backend port 8080."""
    backend = make_ldp_backend('ns1', 'ldp1')
    return ConfigBuilderContext(
        backend_ids={backend, make_service_backend('ns1', 'website')},
        service_backend_pairs_by_backend={backend: ServiceBackendPortPair(80, 8080)},
        build_id='build-test'
    )


@pytest.fixture
def ldp_backend():
    return make_ldp_backend


@pytest.fixture
def service_backend():
    return make_service_backend


@pytest.fixture
def policy_factory():
    return make_policy
