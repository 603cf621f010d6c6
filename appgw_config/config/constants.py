"""
LoadDistributionPolicy custom resource constants.

Centralized so the backend predicate, the Kubernetes policy store and the
tests all agree on the group/version/kind of the resource.
"""

LDP_API_GROUP = 'appgw.ingress.azure.io'
LDP_API_VERSION = 'v1beta1'
LDP_KIND = 'LoadDistributionPolicy'
LDP_PLURAL = 'loaddistributionpolicies'

# In-cluster service account mount
SERVICE_ACCOUNT_TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
SERVICE_ACCOUNT_CA_CERT_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'
DEFAULT_KUBERNETES_API_SERVER = 'https://kubernetes.default.svc'
