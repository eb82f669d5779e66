from typing import Any, Callable, Dict, Optional
from processors.nft_mint.nft_mint_enums import (
    MarketplaceName,
    ParseResult,
    ReceiptClassification,
)
from processors.nft_mint.nft_mint_parser_utils import get_marketplace, get_mint_events
from processors.nft_mint.parsers import mintbase_parser, paras_parser
from utils.models.block_models import Receipt

# Marketplaces without a parser never produce NFTs
MARKETPLACE_PARSERS: Dict[
    MarketplaceName, Callable[[Optional[Any], str], ParseResult]
] = {
    MarketplaceName.MINTBASE: mintbase_parser.parse_event_data,
    MarketplaceName.PARAS: paras_parser.parse_event_data,
}


def parse_event_data(
    marketplace_name: MarketplaceName, event_data: Optional[Any], receiver_id: str
) -> ParseResult:
    parser = MARKETPLACE_PARSERS.get(marketplace_name)
    if parser is None:
        return ParseResult.skipped()
    return parser(event_data, receiver_id)


def classify_receipt(receipt: Receipt) -> ReceiptClassification:
    mint_events = get_mint_events(receipt)
    marketplace_name = get_marketplace(receipt.receiver_id)
    if not mint_events:
        return ReceiptClassification(marketplace=marketplace_name)

    return ReceiptClassification(
        marketplace=marketplace_name,
        mint_events=tuple(mint_events),
        parse_results=tuple(
            parse_event_data(marketplace_name, event.data, receipt.receiver_id)
            for event in mint_events
        ),
    )
