"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


@dataclass(frozen=True)
class ExchangeRateTable:
    """Multipliers from one base currency to every supported currency."""

    base: str
    rates: dict[str, Decimal]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stale: bool = False

    def __post_init__(self):
        if len(self.base) != 3:
            raise ValueError(f"Currency code must be exactly 3 characters, got '{self.base}'")
        for code, rate in self.rates.items():
            if rate <= 0:
                raise ValueError(f"rate for {code} must be positive, got {rate}")

    def rate_for(self, target: str) -> Decimal | None:
        return self.rates.get(target.upper())


class LookupStatus(str, enum.Enum):
    OK = "ok"
    DEGRADED = "degraded"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class RateLookup:
    """
    Outcome of a rate table lookup that never raises.

    OK carries a live table. DEGRADED carries either a stale table or no
    table at all, plus the reason. NOT_FOUND means the base is unknown.
    """

    status: LookupStatus
    base: str
    table: ExchangeRateTable | None = None
    reason: str | None = None

    @property
    def rates(self) -> dict[str, Decimal]:
        return dict(self.table.rates) if self.table is not None else {}

    @property
    def is_degraded(self) -> bool:
        return self.status == LookupStatus.DEGRADED
