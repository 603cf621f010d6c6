"""
Property name generation for Application Gateway sub-resources.

Every component that emits a gateway sub-resource must use these helpers;
cross-references between resources resolve only if both sides generate
byte-identical names.
"""
import hashlib

# Application Gateway property names cannot be longer than 80 characters
MAX_PROP_NAME_LENGTH = 80


def get_hash_code(value: str) -> str:
    """
    Get the hex MD5 digest of a value.

    Args:
        value: Value to hash

    Returns:
        32-character lowercase hex digest
    """
    return hashlib.md5(value.encode('utf-8')).hexdigest()


def format_prop_name(name: str) -> str:
    """
    Ensure a generated property name fits the gateway length limit.

    Names over the limit are truncated and suffixed with a hash of the full
    name so distinct long names stay distinct.

    Args:
        name: Candidate property name

    Returns:
        Name of at most 80 characters
    """
    if len(name) <= MAX_PROP_NAME_LENGTH:
        return name

    name_hash = get_hash_code(name)
    keep = MAX_PROP_NAME_LENGTH - len(name_hash) - 1
    return f'{name[:keep]}-{name_hash}'


def generate_address_pool_name(
    service_name: str,
    service_port: str,
    backend_port: int,
    prefix: str = ''
) -> str:
    """
    Generate the backend address pool name for a service port.

    Args:
        service_name: Namespace-qualified service name (``<ns>-<service>``)
        service_port: Service port as rendered by ServiceBackendPort.to_str()
        backend_port: Resolved backend (endpoint) port
        prefix: Configured property name prefix

    Returns:
        Backend address pool name of at most 80 characters, prefix included
    """
    return format_prop_name(f'{prefix}pool-{service_name}-{service_port}-bp-{backend_port}')


def generate_load_distribution_name(namespace: str, ldp_name: str, prefix: str = '') -> str:
    """
    Generate the gateway load distribution policy name.

    Args:
        namespace: Namespace of the policy resource
        ldp_name: Name of the policy resource
        prefix: Configured property name prefix

    Returns:
        Load distribution policy name of at most 80 characters, prefix included
    """
    return format_prop_name(f'{prefix}ldp-{namespace}-{ldp_name}')


def generate_ldp_target_name(ldp_name: str, index: int) -> str:
    """Name of the target declared at ``index`` of a policy."""
    return f'{ldp_name}-target-{index}'
