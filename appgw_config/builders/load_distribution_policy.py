"""
Builds Application Gateway load distribution policies from
LoadDistributionPolicy resources referenced by ingress backends.
"""
from typing import Any, Dict, List, Optional, Tuple

from .context import ConfigBuilderContext
from .memoization import Memoization
from ..config.settings import Settings, get_settings
from ..data_access.exceptions import PolicyStoreError
from ..data_access.policy_store import PolicyStore
from ..models.backend import BackendIdentifier
from ..models.gateway_resources import (
    GatewayDistributionPolicy,
    GatewayDistributionTarget,
    LoadDistributionAlgorithm,
    SubResource,
)
from ..models.load_distribution_policy import LoadDistributionPolicy
from ..utils.identifier import Identifier
from ..utils.naming import (
    generate_address_pool_name,
    generate_ldp_target_name,
    generate_load_distribution_name,
)
from ..utils.structured_logger import (
    LoggingContext,
    StructuredLogger,
    get_structured_logger,
)


class LoadDistributionPolicyBuilder:
    """
    Aggregates the load distribution policies of one configuration build.

    One instance serves exactly one build: the computed policy list is
    memoized on the instance and returned unchanged by every later call.
    Concurrent builds must each use their own instance.
    """

    def __init__(
        self,
        policy_store: PolicyStore,
        identifier: Identifier,
        name_prefix: str = '',
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the builder.

        Args:
            policy_store: Source of LoadDistributionPolicy resources
            identifier: Gateway identifier used for resource IDs
            name_prefix: Property name prefix shared with the other builders
            logger: Optional structured logger
        """
        self.policy_store = policy_store
        self.identifier = identifier
        self.name_prefix = name_prefix
        self.logger = logger or get_structured_logger('LoadDistributionPolicyBuilder')
        self.mem = Memoization()

    @classmethod
    def from_settings(
        cls,
        policy_store: PolicyStore,
        settings: Optional[Settings] = None
    ) -> 'LoadDistributionPolicyBuilder':
        settings = settings or get_settings()
        return cls(
            policy_store=policy_store,
            identifier=Identifier.from_settings(settings),
            name_prefix=settings.config_name_prefix
        )

    def load_distribution_policy(
        self,
        cb_ctx: ConfigBuilderContext,
        app_gw: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Set the load distribution policies of a gateway configuration document.

        Args:
            cb_ctx: Inputs of the current build
            app_gw: Gateway configuration document, updated in place

        Returns:
            The updated gateway configuration document
        """
        policies = self.get_load_distribution_policies(cb_ctx)
        properties = app_gw.setdefault('properties', {})
        properties['loadDistributionPolicies'] = [policy.to_dict() for policy in policies]
        return app_gw

    def get_load_distribution_policies(
        self,
        cb_ctx: ConfigBuilderContext
    ) -> List[GatewayDistributionPolicy]:
        """
        Build the gateway policies for every policy-bound backend.

        Each distinct policy is fetched once; backends sharing a policy
        produce a single gateway policy. A policy that cannot be fetched is
        logged and left out. The result is sorted by name and memoized for
        the lifetime of this builder.

        Args:
            cb_ctx: Inputs of the current build

        Returns:
            Gateway policies sorted by name
        """
        if self.mem.load_distribution_policies is not None:
            return self.mem.load_distribution_policies

        logger = self.logger.bind(build_id=cb_ctx.build_id)
        policies_by_key: Dict[Tuple[str, str], GatewayDistributionPolicy] = {}

        with LoggingContext(logger, 'build_load_distribution_policies'):
            for backend_id in sorted(cb_ctx.backend_ids, key=BackendIdentifier.sort_key):
                if not backend_id.is_ldp_backend():
                    continue

                ldp_name = backend_id.ldp_name
                # Equal policy names in different namespaces are distinct policies
                key = (backend_id.namespace, ldp_name)
                if key in policies_by_key:
                    continue

                try:
                    ldp = self.policy_store.get_load_distribution_policy(
                        backend_id.namespace, ldp_name
                    )
                except PolicyStoreError as e:
                    logger.error(
                        'Unable to fetch Load Distribution Policy',
                        operation='get_load_distribution_policy',
                        error=e,
                        namespace=backend_id.namespace,
                        policy=ldp_name
                    )
                    continue

                ldp_resource_name = generate_load_distribution_name(
                    backend_id.namespace, ldp_name, self.name_prefix
                )
                policies_by_key[key] = GatewayDistributionPolicy(
                    name=ldp_resource_name,
                    id=self.identifier.load_distribution_policy_id(ldp_resource_name),
                    targets=self.get_targets(backend_id, ldp, cb_ctx),
                    load_distribution_algorithm=LoadDistributionAlgorithm.ROUND_ROBIN
                )

        policies = sorted(policies_by_key.values(), key=lambda policy: policy.name)
        logger.info(
            'Built load distribution policies',
            operation='build_load_distribution_policies',
            policy_count=len(policies)
        )

        self.mem.load_distribution_policies = policies
        return policies

    def get_targets(
        self,
        backend_id: BackendIdentifier,
        ldp: LoadDistributionPolicy,
        cb_ctx: ConfigBuilderContext
    ) -> List[GatewayDistributionTarget]:
        """
        Resolve the declared targets of a policy into gateway targets.

        Targets with a weight below 1 are skipped, the gateway does not
        accept them. Target names use the declaration index, so skipping a
        target never renames the ones after it.

        Args:
            backend_id: Backend the policy is attached to
            ldp: Policy resource
            cb_ctx: Inputs of the current build

        Returns:
            Gateway targets in declaration order
        """
        backend_port = cb_ctx.backend_port(backend_id)
        targets: Dict[str, GatewayDistributionTarget] = {}

        for index, target in enumerate(ldp.targets):
            if target.weight < 1:
                self.logger.debug(
                    'Skipping load distribution target with non-positive weight',
                    operation='get_targets',
                    policy=ldp.name,
                    target_index=index,
                    weight=target.weight
                )
                continue

            service = target.backend
            pool_name = generate_address_pool_name(
                f'{backend_id.namespace}-{service.name}',
                service.port.to_str(),
                backend_port,
                self.name_prefix
            )
            target_name = generate_ldp_target_name(ldp.name, index)
            targets[target_name] = GatewayDistributionTarget(
                name=target_name,
                id=self.identifier.ldp_target_id(ldp.name, target_name),
                weight_per_server=target.weight,
                backend_address_pool=SubResource(
                    id=self.identifier.address_pool_id(pool_name)
                )
            )

        return list(targets.values())
