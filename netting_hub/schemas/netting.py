from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from netting_hub.core.netting.models import Intent
from netting_hub.utils.validation import U64_MAX

_PARTY_PATTERN = r"^[A-Za-z0-9._:@-]+$"
_TOKEN_PATTERN = r"^[A-Z0-9_]{1,16}$"


class IntentSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sender: str = Field(..., min_length=1, max_length=128, pattern=_PARTY_PATTERN)
    receiver: str = Field(..., min_length=1, max_length=128, pattern=_PARTY_PATTERN)
    token: str = Field(..., pattern=_TOKEN_PATTERN)
    amount: int = Field(..., ge=0, le=U64_MAX)

    def to_intent(self) -> Intent:
        return Intent(sender=self.sender, receiver=self.receiver, token=self.token, amount=self.amount)

    @classmethod
    def from_intent(cls, intent: Intent) -> "IntentSchema":
        return cls(sender=intent.sender, receiver=intent.receiver, token=intent.token, amount=intent.amount)


class NettingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    intents: List[IntentSchema]
    max_cycle_length: Optional[int] = Field(default=None, ge=1, le=10)


class NettedCycleSchema(BaseModel):
    cycle: List[str]
    token: str
    amount: int


class NettingStats(BaseModel):
    sccs: int
    cycles_found: int
    cycles_netted: int


class NettingResponse(BaseModel):
    intents: List[IntentSchema]
    stats: NettingStats
    netted: List[NettedCycleSchema]
    cancelled: Dict[str, int]


class NettingCyclesResponse(BaseModel):
    sccs: List[List[List[str]]]
