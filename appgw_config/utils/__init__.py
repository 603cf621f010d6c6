"""
Naming, identifier and logging utilities.
"""
from .identifier import Identifier
from .naming import (
    format_prop_name,
    generate_address_pool_name,
    generate_ldp_target_name,
    generate_load_distribution_name,
)
from .structured_logger import (
    LoggingContext,
    StructuredLogger,
    configure_logging,
    get_structured_logger,
)

__all__ = [
    'Identifier',
    'format_prop_name',
    'generate_address_pool_name',
    'generate_ldp_target_name',
    'generate_load_distribution_name',
    'LoggingContext',
    'StructuredLogger',
    'configure_logging',
    'get_structured_logger',
]
