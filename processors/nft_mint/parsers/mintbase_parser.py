from typing import Any, Optional
from pydantic import ValidationError
from processors.nft_mint.models.nft_mint_payload_models import (
    MINTBASE_PAYLOAD_V1_ADAPTER,
    MINTBASE_PAYLOAD_V2_ADAPTER,
)
from processors.nft_mint.nft_mint_constants import (
    MINTBASE_THING_URL,
    MINTBASE_TOKEN_URL,
)
from processors.nft_mint.nft_mint_enums import NFT, ParseResult
from utils.errors import PayloadParseError


def parse_event_data(event_data: Optional[Any], receiver_id: str) -> ParseResult:
    if event_data is None:
        return ParseResult.skipped()

    try:
        return ParseResult.parsed(to_nft(event_data, receiver_id))
    except PayloadParseError as e:
        return ParseResult.failed(str(e))


def to_nft(event_data: Any, receiver_id: str) -> NFT:
    # Payloads carrying a memo also carry token ids, so the memo shape is tried first
    try:
        v2_data = MINTBASE_PAYLOAD_V2_ADAPTER.validate_python(event_data)
        return NFT(
            owner=v2_data[0].owner_id,
            links=(
                MINTBASE_THING_URL.format(
                    meta_id=v2_data[0].memo.meta_id, receiver_id=receiver_id
                ),
            ),
        )
    except ValidationError as v2_error:
        memo_error = v2_error

    try:
        v1_data = MINTBASE_PAYLOAD_V1_ADAPTER.validate_python(event_data)
    except ValidationError as v1_error:
        raise PayloadParseError(
            "Invalid Mintbase nft_mint data. "
            f"As memo payload: {memo_error}. As token ids payload: {v1_error}"
        ) from v1_error

    return NFT(
        owner=v1_data[0].owner_id,
        links=(
            MINTBASE_TOKEN_URL.format(
                receiver_id=receiver_id, token_id=v1_data[0].token_ids[0]
            ),
        ),
    )
