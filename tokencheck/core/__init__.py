"""Network identifiers and error types shared by every layer."""

from .errors import ErrorKind, TokenValidationError
from .networks import NETWORKS, NetworkFamily, NetworkId, NetworkSpec, get_network_spec, parse_network

__all__ = [
    "ErrorKind",
    "TokenValidationError",
    "NETWORKS",
    "NetworkFamily",
    "NetworkId",
    "NetworkSpec",
    "get_network_spec",
    "parse_network",
]
