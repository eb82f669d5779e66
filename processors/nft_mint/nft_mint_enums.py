from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from utils.models.block_models import Event


class MarketplaceName(Enum):
    MINTBASE = "Mintbase"
    PARAS = "Paras"
    UNKNOWN = "Unknown"


class ParseStatus(Enum):
    PARSED = "parsed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class NFT:
    owner: str
    links: Tuple[str, ...]


@dataclass(frozen=True)
class NFTReceipt:
    receipt_id: str
    marketplace_name: str
    nfts: Tuple[NFT, ...]


@dataclass(frozen=True)
class ParseResult:
    status: ParseStatus
    nft: Optional[NFT] = None
    error: Optional[str] = None

    @classmethod
    def parsed(cls, nft: NFT) -> "ParseResult":
        return cls(ParseStatus.PARSED, nft=nft)

    @classmethod
    def skipped(cls) -> "ParseResult":
        return cls(ParseStatus.SKIPPED)

    @classmethod
    def failed(cls, error: str) -> "ParseResult":
        return cls(ParseStatus.FAILED, error=error)


@dataclass(frozen=True)
class ReceiptClassification:
    marketplace: MarketplaceName
    mint_events: Tuple[Event, ...] = field(default_factory=tuple)
    # One result per mint event, in event order
    parse_results: Tuple[ParseResult, ...] = field(default_factory=tuple)

    @property
    def nfts(self) -> Tuple[NFT, ...]:
        return tuple(
            result.nft
            for result in self.parse_results
            if result.status == ParseStatus.PARSED and result.nft is not None
        )
