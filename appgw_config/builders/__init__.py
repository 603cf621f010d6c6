"""
Configuration builders.
"""
from .context import ConfigBuilderContext
from .memoization import Memoization
from .load_distribution_policy import LoadDistributionPolicyBuilder

__all__ = [
    'ConfigBuilderContext',
    'Memoization',
    'LoadDistributionPolicyBuilder',
]
