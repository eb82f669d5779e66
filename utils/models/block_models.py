from dataclasses import dataclass, field
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Event:
    event: str
    # Raw JSON value of the event's `data` field, None when the event carries no data
    data: Optional[Any] = None
    standard: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class Receipt:
    receipt_id: str
    receiver_id: str
    events: Tuple[Event, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Block:
    height: int
    receipts: Tuple[Receipt, ...] = field(default_factory=tuple)
    hash: Optional[str] = None
