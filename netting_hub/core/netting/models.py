from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from netting_hub.utils.validation import U64_MAX, validate_amount

# Ordered party ids (v0, ..., vk-1); the closing edge vk-1 -> v0 is implicit.
Cycle = Tuple[str, ...]

__all__ = ["U64_MAX", "Cycle", "Intent", "Edge", "NettedCycle"]


@dataclass(frozen=True)
class Intent:
    """One directed obligation: sender owes receiver `amount` of `token`."""

    sender: str
    receiver: str
    token: str
    amount: int

    def __post_init__(self) -> None:
        validate_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": self.sender,
            "receiver": self.receiver,
            "token": self.token,
            "amount": self.amount,
        }

    def __str__(self) -> str:
        return f"{self.sender} -> {self.receiver}: {self.amount} {self.token}"


@dataclass
class Edge:
    """Outgoing debt edge, owned by the graph under its source party."""

    to: str
    token: str
    amount: int


@dataclass(frozen=True)
class NettedCycle:
    """Record of one applied (cycle, token) netting step."""

    cycle: Cycle
    token: str
    amount: int

    @property
    def cancelled(self) -> int:
        # Every edge in the cycle drops by `amount`.
        return self.amount * len(self.cycle)

    def to_dict(self) -> Dict[str, Any]:
        return {"cycle": list(self.cycle), "token": self.token, "amount": self.amount}
