"""
Unit tests for LoadDistributionPolicyBuilder.

Covers policy aggregation across backends, target resolution, weight
filtering, memoization and fetch-failure handling.
"""
import pytest
from unittest.mock import Mock

from appgw_config.builders import ConfigBuilderContext, LoadDistributionPolicyBuilder
from appgw_config.data_access import (
    InMemoryPolicyStore,
    InvalidPolicyError,
    KubernetesAPIError,
    KubernetesClient,
    KubernetesPolicyStore,
    PolicyStore,
)
from appgw_config.models import (
    GatewayDistributionTarget,
    LoadDistributionAlgorithm,
    ServiceBackendPortPair,
)
from appgw_config.utils import StructuredLogger


@pytest.fixture
def mock_logger():
    """Structured logger mock whose bound loggers are itself."""
    logger = Mock(spec=StructuredLogger)
    logger.bind.return_value = logger
    return logger


class TestGetLoadDistributionPolicies:
    """Test suite for policy aggregation."""

    def test_example_policy_drops_zero_weight_target(self, builder, cb_ctx, gateway_id):
        """Test the ns1/ldp1 example: one policy, weight-0 target absent."""
        # Act
        policies = builder.get_load_distribution_policies(cb_ctx)

        # Assert
        assert len(policies) == 1
        policy = policies[0]
        assert policy.name == 'ldp-ns1-ldp1'
        assert policy.id == f'{gateway_id}/loadDistributionPolicies/ldp-ns1-ldp1'
        assert policy.load_distribution_algorithm is LoadDistributionAlgorithm.ROUND_ROBIN

        assert len(policy.targets) == 1
        target = policy.targets[0]
        assert target.name == 'ldp1-target-0'
        assert target.weight_per_server == 3
        assert target.id == (
            f'{gateway_id}/loadDistributionPolicies/ldp1/loadDistributionTargets/ldp1-target-0'
        )
        assert target.backend_address_pool.id == (
            f'{gateway_id}/backendAddressPools/pool-ns1-svcA-80-bp-8080'
        )

    def test_no_policy_bound_backends_caches_empty_list(self, builder, service_backend):
        """Test that a build without policy-bound backends yields and caches []."""
        # Arrange
        ctx = ConfigBuilderContext(backend_ids={service_backend('ns1', 'website')})

        # Act
        policies = builder.get_load_distribution_policies(ctx)

        # Assert
        assert policies == []
        assert builder.mem.load_distribution_policies == []
        assert builder.mem.load_distribution_policies is policies

    def test_second_call_returns_cached_list(self, policy_store, identifier, cb_ctx, ldp_backend):
        """Test that the first result is returned verbatim on later calls."""
        # Arrange
        store = Mock(spec=PolicyStore, wraps=policy_store)
        builder = LoadDistributionPolicyBuilder(store, identifier)

        # Act
        first = builder.get_load_distribution_policies(cb_ctx)
        cb_ctx.backend_ids.add(ldp_backend('ns2', 'other'))
        second = builder.get_load_distribution_policies(cb_ctx)

        # Assert
        assert second is first
        assert [policy.to_dict() for policy in second] == [policy.to_dict() for policy in first]
        store.get_load_distribution_policy.assert_called_once_with('ns1', 'ldp1')

    def test_independent_builders_produce_equal_results(self, policy_store, identifier, cb_ctx):
        """Test determinism across build instances."""
        # Act
        first = LoadDistributionPolicyBuilder(policy_store, identifier).get_load_distribution_policies(cb_ctx)
        second = LoadDistributionPolicyBuilder(policy_store, identifier).get_load_distribution_policies(cb_ctx)

        # Assert
        assert first == second
        assert first is not second

    def test_backends_sharing_policy_produce_one_policy(self, policy_store, identifier, ldp_backend):
        """Test dedup of a policy referenced by several backends."""
        # Arrange
        store = Mock(spec=PolicyStore, wraps=policy_store)
        builder = LoadDistributionPolicyBuilder(store, identifier)
        ctx = ConfigBuilderContext(backend_ids={
            ldp_backend('ns1', 'ldp1', ingress_name='ingress-a'),
            ldp_backend('ns1', 'ldp1', ingress_name='ingress-b'),
        })

        # Act
        policies = builder.get_load_distribution_policies(ctx)

        # Assert
        assert [policy.name for policy in policies] == ['ldp-ns1-ldp1']
        store.get_load_distribution_policy.assert_called_once_with('ns1', 'ldp1')

    def test_same_policy_name_in_two_namespaces_kept_apart(self, identifier, ldp_backend, policy_factory):
        """Test that equal policy names in different namespaces are not collapsed."""
        # Arrange
        store = InMemoryPolicyStore([
            policy_factory('ns1', 'shared', ('svcA', 80, 1)),
            policy_factory('ns2', 'shared', ('svcB', 80, 2)),
        ])
        builder = LoadDistributionPolicyBuilder(store, identifier)
        ctx = ConfigBuilderContext(backend_ids={
            ldp_backend('ns1', 'shared'),
            ldp_backend('ns2', 'shared'),
        })

        # Act
        policies = builder.get_load_distribution_policies(ctx)

        # Assert
        assert [policy.name for policy in policies] == ['ldp-ns1-shared', 'ldp-ns2-shared']
        assert policies[0].targets[0].weight_per_server == 1
        assert policies[1].targets[0].weight_per_server == 2

    def test_policies_sorted_by_name(self, identifier, ldp_backend, policy_factory):
        """Test deterministic ordering by generated policy name."""
        # Arrange
        store = InMemoryPolicyStore([
            policy_factory('ns1', 'zeta', ('svcA', 80, 1)),
            policy_factory('ns1', 'alpha', ('svcA', 80, 1)),
            policy_factory('ns0', 'mid', ('svcA', 80, 1)),
        ])
        builder = LoadDistributionPolicyBuilder(store, identifier)
        ctx = ConfigBuilderContext(backend_ids={
            ldp_backend('ns1', 'zeta'),
            ldp_backend('ns1', 'alpha'),
            ldp_backend('ns0', 'mid'),
        })

        # Act
        policies = builder.get_load_distribution_policies(ctx)

        # Assert
        assert [policy.name for policy in policies] == [
            'ldp-ns0-mid',
            'ldp-ns1-alpha',
            'ldp-ns1-zeta',
        ]

    def test_fetch_failure_skips_only_failing_backend(
        self, policy_store, identifier, cb_ctx, ldp_backend, mock_logger
    ):
        """Test that a missing policy is logged and the others still build."""
        # Arrange
        builder = LoadDistributionPolicyBuilder(policy_store, identifier, logger=mock_logger)
        cb_ctx.backend_ids.add(ldp_backend('ns1', 'missing'))

        # Act
        policies = builder.get_load_distribution_policies(cb_ctx)

        # Assert
        assert [policy.name for policy in policies] == ['ldp-ns1-ldp1']
        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args[0] == 'Unable to fetch Load Distribution Policy'
        assert kwargs['policy'] == 'missing'
        assert kwargs['namespace'] == 'ns1'

    def test_api_error_is_absorbed(self, identifier, cb_ctx, mock_logger):
        """Test that store errors never escape the builder."""
        # Arrange
        store = Mock(spec=PolicyStore)
        store.get_load_distribution_policy.side_effect = KubernetesAPIError(
            'forbidden', status_code=403
        )
        builder = LoadDistributionPolicyBuilder(store, identifier, logger=mock_logger)

        # Act
        policies = builder.get_load_distribution_policies(cb_ctx)

        # Assert
        assert policies == []
        assert isinstance(mock_logger.error.call_args.kwargs['error'], KubernetesAPIError)

    @pytest.mark.parametrize('broken_body', [
        {'metadata': {'name': 'broken'}, 'spec': 'oops'},
        {'metadata': 'broken', 'spec': {}},
        {'metadata': {'name': 'broken'}, 'spec': {'targets': [{
            'weight': 1, 'backend': {'service': {'name': 'svcA', 'port': {'number': 'http'}}}
        }]}},
        {'metadata': {'name': 'broken'}, 'spec': {'targets': [{
            'weight': 1, 'backend': {'service': {'name': 'svcA', 'port': {'number': [80]}}}
        }]}},
        {'metadata': {'name': 'broken'}, 'spec': {'targets': [{
            'weight': 1, 'backend': {'service': {'name': {'svc': 'A'}, 'port': 80}}
        }]}},
        ['not', 'an', 'object'],
    ])
    def test_malformed_resource_body_is_absorbed(
        self, identifier, cb_ctx, ldp_backend, mock_logger, broken_body
    ):
        """Test that a malformed body from the API server skips only that policy."""
        # Arrange
        good_body = {
            'metadata': {'name': 'ldp1', 'namespace': 'ns1'},
            'spec': {'targets': [
                {'weight': 3, 'backend': {'service': {'name': 'svcA', 'port': {'number': 80}}}},
            ]}
        }
        client = Mock(spec=KubernetesClient)
        client.get_namespaced_custom_object.side_effect = (
            lambda group, version, namespace, plural, name: good_body if name == 'ldp1' else broken_body
        )
        store = KubernetesPolicyStore(client, max_retries=0)
        builder = LoadDistributionPolicyBuilder(store, identifier, logger=mock_logger)
        cb_ctx.backend_ids.add(ldp_backend('ns1', 'broken'))

        # Act
        policies = builder.get_load_distribution_policies(cb_ctx)

        # Assert
        assert [policy.name for policy in policies] == ['ldp-ns1-ldp1']
        mock_logger.error.assert_called_once()
        kwargs = mock_logger.error.call_args.kwargs
        assert isinstance(kwargs['error'], InvalidPolicyError)
        assert kwargs['policy'] == 'broken'

    def test_policy_without_valid_targets_is_still_emitted(self, identifier, ldp_backend, policy_factory):
        """Test that an all-invalid policy produces a policy with no targets."""
        # Arrange
        store = InMemoryPolicyStore([
            policy_factory('ns1', 'empty'),
            policy_factory('ns1', 'invalid', ('svcA', 80, 0), ('svcB', 80, -2)),
        ])
        builder = LoadDistributionPolicyBuilder(store, identifier)
        ctx = ConfigBuilderContext(backend_ids={
            ldp_backend('ns1', 'empty'),
            ldp_backend('ns1', 'invalid'),
        })

        # Act
        policies = builder.get_load_distribution_policies(ctx)

        # Assert
        assert [(policy.name, policy.targets) for policy in policies] == [
            ('ldp-ns1-empty', []),
            ('ldp-ns1-invalid', []),
        ]

    def test_name_prefix_applied(self, policy_store, identifier, cb_ctx, gateway_id):
        """Test that the configured prefix reaches policy and pool names."""
        # Arrange
        builder = LoadDistributionPolicyBuilder(policy_store, identifier, name_prefix='agic-')

        # Act
        policy = builder.get_load_distribution_policies(cb_ctx)[0]

        # Assert
        assert policy.name == 'agic-ldp-ns1-ldp1'
        assert policy.targets[0].backend_address_pool.id == (
            f'{gateway_id}/backendAddressPools/agic-pool-ns1-svcA-80-bp-8080'
        )


class TestGetTargets:
    """Test suite for target resolution."""

    def test_declaration_index_survives_filtering(self, builder, ldp_backend, policy_factory):
        """Test that target names keep their declaration index."""
        # Arrange
        backend = ldp_backend('ns1', 'canary')
        ldp = policy_factory(
            'ns1', 'canary',
            ('svcA', 80, 2), ('svcB', 80, -1), ('svcC', 80, 0), ('svcD', 80, 5)
        )
        ctx = ConfigBuilderContext(backend_ids={backend})

        # Act
        targets = builder.get_targets(backend, ldp, ctx)

        # Assert
        assert [(t.name, t.weight_per_server) for t in targets] == [
            ('canary-target-0', 2),
            ('canary-target-3', 5),
        ]
        assert all(isinstance(t, GatewayDistributionTarget) for t in targets)

    def test_unresolved_backend_port_defaults_to_zero(self, builder, ldp_backend, policy_factory, gateway_id):
        """Test pool naming for a backend without a resolved port pair."""
        # Arrange
        backend = ldp_backend('ns1', 'ldp1')
        ldp = policy_factory('ns1', 'ldp1', ('svcA', 80, 1))
        ctx = ConfigBuilderContext(backend_ids={backend})

        # Act
        targets = builder.get_targets(backend, ldp, ctx)

        # Assert
        assert targets[0].backend_address_pool.id == (
            f'{gateway_id}/backendAddressPools/pool-ns1-svcA-80-bp-0'
        )

    def test_named_service_port(self, builder, ldp_backend, policy_factory, gateway_id):
        """Test that named service ports are embedded by name."""
        # Arrange
        backend = ldp_backend('ns1', 'ldp1')
        ldp = policy_factory('ns1', 'ldp1', ('svcA', 'http', 4))
        ctx = ConfigBuilderContext(
            backend_ids={backend},
            service_backend_pairs_by_backend={backend: ServiceBackendPortPair(80, 9000)}
        )

        # Act
        targets = builder.get_targets(backend, ldp, ctx)

        # Assert
        assert targets[0].backend_address_pool.id == (
            f'{gateway_id}/backendAddressPools/pool-ns1-svcA-http-bp-9000'
        )

    def test_targets_use_backend_namespace(self, builder, ldp_backend, policy_factory, gateway_id):
        """Test that pool names are qualified with the backend's namespace."""
        # Arrange
        backend = ldp_backend('team-a', 'ldp1')
        ldp = policy_factory('team-a', 'ldp1', ('api', 443, 1))
        ctx = ConfigBuilderContext(backend_ids={backend})

        # Act
        targets = builder.get_targets(backend, ldp, ctx)

        # Assert
        assert targets[0].backend_address_pool.id.endswith('/pool-team-a-api-443-bp-0')


class TestLoadDistributionPolicy:
    """Test suite for merging into the gateway configuration document."""

    def test_sets_policies_on_document(self, builder, cb_ctx):
        """Test that policies are written under properties."""
        # Arrange
        app_gw = {'name': 'appgw-test', 'properties': {'sku': {'name': 'Standard_v2'}}}

        # Act
        result = builder.load_distribution_policy(cb_ctx, app_gw)

        # Assert
        assert result is app_gw
        assert app_gw['properties']['sku'] == {'name': 'Standard_v2'}
        ldps = app_gw['properties']['loadDistributionPolicies']
        assert len(ldps) == 1
        assert ldps[0]['name'] == 'ldp-ns1-ldp1'
        assert ldps[0]['properties']['loadDistributionAlgorithm'] == 'RoundRobin'
        target = ldps[0]['properties']['loadDistributionTargets'][0]
        assert target['etag'] == '*'
        assert target['properties']['weightPerServer'] == 3

    def test_empty_policy_list_written(self, builder):
        """Test that a build without policies writes an empty list."""
        # Arrange
        app_gw = {}

        # Act
        builder.load_distribution_policy(ConfigBuilderContext(), app_gw)

        # Assert
        assert app_gw == {'properties': {'loadDistributionPolicies': []}}

    def test_from_settings_uses_environment(self, policy_store, monkeypatch, gateway_id):
        """Test builder construction from settings."""
        # Arrange
        monkeypatch.setenv('APPGW_CONFIG_NAME_PREFIX', 'pre-')

        # Act
        builder = LoadDistributionPolicyBuilder.from_settings(policy_store)

        # Assert
        assert builder.name_prefix == 'pre-'
        assert builder.identifier.gateway_id() == gateway_id
