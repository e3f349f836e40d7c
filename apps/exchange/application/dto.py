"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from apps.exchange.domain.models import RateLookup


@dataclass
class RateTableDTO:
    """Rate table as exposed by the API. Rates are decimal strings."""
    base: str
    rates: Dict[str, str]
    stale: bool = False
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def from_lookup(cls, lookup: RateLookup) -> "RateTableDTO":
        return cls(
            base=lookup.base,
            rates={code: format(rate, "f") for code, rate in sorted(lookup.rates.items())},
            stale=lookup.table.stale if lookup.table is not None else False,
            degraded=lookup.is_degraded,
            reason=lookup.reason,
        )


@dataclass
class RateSyncResultDTO:
    """Result DTO for rate synchronization task."""
    success: bool
    bases_refreshed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    message: Optional[str] = None
