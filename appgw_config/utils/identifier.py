"""
Azure resource IDs for Application Gateway sub-resources.
"""
from dataclasses import dataclass

from ..config.settings import Settings


@dataclass(frozen=True)
class Identifier:
    """
    Identifies one Application Gateway and builds IDs of its sub-resources.

    Attributes:
        subscription_id: Azure subscription ID
        resource_group: Resource group of the gateway
        app_gw_name: Gateway resource name
    """
    subscription_id: str
    resource_group: str
    app_gw_name: str

    @classmethod
    def from_settings(cls, settings: Settings) -> 'Identifier':
        return cls(
            subscription_id=settings.subscription_id,
            resource_group=settings.resource_group,
            app_gw_name=settings.app_gw_name
        )

    def gateway_id(self) -> str:
        return (
            f'/subscriptions/{self.subscription_id}'
            f'/resourceGroups/{self.resource_group}'
            f'/providers/Microsoft.Network/applicationGateways/{self.app_gw_name}'
        )

    def gateway_resource_id(self, sub_resource_kind: str, resource_name: str) -> str:
        """
        Build the ID of a gateway sub-resource.

        Args:
            sub_resource_kind: Collection name (e.g. ``backendAddressPools``)
            resource_name: Name within the collection

        Returns:
            Fully qualified resource ID
        """
        return f'{self.gateway_id()}/{sub_resource_kind}/{resource_name}'

    def address_pool_id(self, pool_name: str) -> str:
        return self.gateway_resource_id('backendAddressPools', pool_name)

    def load_distribution_policy_id(self, ldp_name: str) -> str:
        return self.gateway_resource_id('loadDistributionPolicies', ldp_name)

    def ldp_target_id(self, ldp_name: str, target_name: str) -> str:
        return self.gateway_resource_id(
            'loadDistributionPolicies',
            f'{ldp_name}/loadDistributionTargets/{target_name}'
        )
