from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..core.networks import NetworkId


@dataclass(frozen=True)
class ResolvedToken:
    """Token metadata as reported by an off-chain source."""

    name: str
    symbol: str
    decimals: Optional[int] = None
    logo_uri: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """Enough to stand in for an on-chain read."""
        return bool(self.name and self.symbol) and self.decimals is not None


class MetadataResolver(ABC):
    """Off-chain metadata source used by the enrichment chain"""

    name: str
    timeout_s: float = 5.0

    @abstractmethod
    def supports(self, network: NetworkId) -> bool:
        """Whether this source knows anything about ``network``"""
        pass

    @abstractmethod
    async def resolve(self, address: str, network: NetworkId) -> Optional[ResolvedToken]:
        """Look the token up; ``None`` when the source does not know it.

        Transport and parsing failures are raised; the chain logs and
        swallows them.
        """
        pass
