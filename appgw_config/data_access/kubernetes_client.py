"""
Kubernetes API client for reading custom resources.
"""
import logging
import os
from typing import Any, Dict, Optional, Union

import requests

from .exceptions import (
    KubernetesAPIError,
    ResourceNotFoundError,
    RetryableError,
)
from ..config.settings import Settings

logger = logging.getLogger(__name__)

# Throttling and server-side failures are worth another attempt
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class KubernetesClient:
    """
    Minimal Kubernetes API client over a requests session.

    Only the read path needed by the policy store is implemented.
    """

    def __init__(
        self,
        api_server: str,
        token: Optional[str] = None,
        verify: Union[bool, str] = True,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Kubernetes client.

        Args:
            api_server: API server base URL
            token: Bearer token for authentication
            verify: TLS verification flag or CA bundle path
            timeout: Per-request timeout in seconds
            session: Optional requests session instance
        """
        self.api_server = api_server.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify
        self.session.headers['Accept'] = 'application/json'
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    @classmethod
    def from_settings(cls, settings: Settings) -> 'KubernetesClient':
        """
        Create a client from settings, reading the service account mount.

        Missing token or CA files are tolerated so the client can run
        against a local, unauthenticated API server.

        Args:
            settings: Settings instance

        Returns:
            KubernetesClient instance
        """
        token = None
        if os.path.exists(settings.kubernetes_token_path):
            with open(settings.kubernetes_token_path, 'r', encoding='utf-8') as fh:
                token = fh.read().strip()
        else:
            logger.warning(
                f"Service account token not found at {settings.kubernetes_token_path}"
            )

        verify: Union[bool, str] = True
        if os.path.exists(settings.kubernetes_ca_cert_path):
            verify = settings.kubernetes_ca_cert_path

        return cls(
            api_server=settings.kubernetes_api_server,
            token=token,
            verify=verify,
            timeout=settings.kubernetes_request_timeout
        )

    def get_namespaced_custom_object(
        self,
        group: str,
        version: str,
        namespace: str,
        plural: str,
        name: str
    ) -> Dict[str, Any]:
        """
        Get a namespaced custom resource.

        Args:
            group: API group
            version: API version
            namespace: Resource namespace
            plural: Plural resource name
            name: Resource name

        Returns:
            Resource as decoded JSON

        Raises:
            ResourceNotFoundError: If the resource does not exist
            RetryableError: On connection errors, timeouts, 429 and 5xx
            KubernetesAPIError: On other non-success responses
        """
        url = f'{self.api_server}/apis/{group}/{version}/namespaces/{namespace}/{plural}/{name}'

        try:
            response = self.session.get(url, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise RetryableError(f"Request to {url} failed: {e}")
        except requests.RequestException as e:
            raise KubernetesAPIError(f"Request to {url} failed: {e}")

        if response.status_code == 404:
            raise ResourceNotFoundError(f"{plural} {namespace}/{name} not found")
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise RetryableError(
                f"API server returned {response.status_code} for {namespace}/{name}"
            )
        if response.status_code >= 400:
            raise KubernetesAPIError(
                f"API server returned {response.status_code} for {namespace}/{name}: "
                f"{response.text[:200]}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise KubernetesAPIError(
                f"Invalid JSON for {namespace}/{name}: {e}",
                status_code=response.status_code
            )
