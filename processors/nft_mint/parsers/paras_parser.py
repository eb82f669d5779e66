from typing import Any, Optional
from pydantic import ValidationError
from processors.nft_mint.models.nft_mint_payload_models import (
    PARAS_EVENT_DATA_ADAPTER,
)
from processors.nft_mint.nft_mint_constants import PARAS_TOKEN_URL
from processors.nft_mint.nft_mint_enums import NFT, ParseResult
from processors.nft_mint.nft_mint_parser_utils import get_series_id
from utils.errors import PayloadParseError


def parse_event_data(event_data: Optional[Any], receiver_id: str) -> ParseResult:
    if event_data is None:
        return ParseResult.skipped()

    try:
        return ParseResult.parsed(to_nft(event_data, receiver_id))
    except PayloadParseError as e:
        return ParseResult.failed(str(e))


def to_nft(event_data: Any, receiver_id: str) -> NFT:
    try:
        paras_event_data = PARAS_EVENT_DATA_ADAPTER.validate_python(event_data)
    except ValidationError as e:
        raise PayloadParseError(f"Invalid Paras nft_mint data: {e}") from e

    # Paras emits a single record per mint
    data = paras_event_data[0]
    return NFT(
        owner=data.owner_id,
        links=tuple(
            PARAS_TOKEN_URL.format(
                receiver_id=receiver_id,
                series_id=get_series_id(token_id),
                token_id=token_id,
            )
            for token_id in data.token_ids
        ),
    )
