"""TokenInfo — token address plus decimals, as supplied by the taker."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class TokenInfo(BaseModel):
    """Immutable token descriptor. Address comparisons ignore case."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., pattern=ADDRESS_PATTERN)
    decimals: int = Field(..., ge=0, le=77)

    def same_address(self, other: str) -> bool:
        return self.address.lower() == other.lower()
