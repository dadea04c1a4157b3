from .resilience import RpcResilienceLayer
from .roster import ProviderEndpoint, ProviderRoster
from .transport import JsonRpcTransport

__all__ = [
    "JsonRpcTransport",
    "ProviderEndpoint",
    "ProviderRoster",
    "RpcResilienceLayer",
]
