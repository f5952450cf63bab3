"""Mirror-node query API."""

from .client import MirrorNodeClient
from .endpoints import ENDPOINTS, MirrorEndpointSpec, get_endpoint_spec

__all__ = [
    "MirrorNodeClient",
    "MirrorEndpointSpec",
    "ENDPOINTS",
    "get_endpoint_spec",
]
