"""
Build-scoped memoization of derived configuration.
"""
from dataclasses import dataclass
from typing import List, Optional

from ..models.gateway_resources import GatewayDistributionPolicy


@dataclass
class Memoization:
    """
    Values computed once per configuration build.

    Owned by a single builder instance and discarded with it; never shared
    between builds. ``None`` means not yet computed, so an empty list is a
    valid cached result.
    """
    load_distribution_policies: Optional[List[GatewayDistributionPolicy]] = None
