"""
Application Gateway configuration building for load distribution policies.
"""
from .builders import (
    ConfigBuilderContext,
    LoadDistributionPolicyBuilder,
    Memoization,
)

__version__ = '1.0.0'

__all__ = [
    'ConfigBuilderContext',
    'LoadDistributionPolicyBuilder',
    'Memoization',
]
