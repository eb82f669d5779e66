import re

from typing import List
from processors.nft_mint.nft_mint_constants import (
    MARKETPLACE_RECEIVER_MATCH_REGEX_STRINGS,
    MINT_EVENT_NAME,
)
from processors.nft_mint.nft_mint_enums import MarketplaceName
from utils.models.block_models import Event, Receipt

MARKETPLACE_RECEIVER_MATCH_REGEXES = {
    marketplace_name: re.compile(regex_string)
    for marketplace_name, regex_string in MARKETPLACE_RECEIVER_MATCH_REGEX_STRINGS.items()
}


def get_marketplace(receiver_id: str) -> MarketplaceName:
    for marketplace_name, regex in MARKETPLACE_RECEIVER_MATCH_REGEXES.items():
        if regex.fullmatch(receiver_id):
            return marketplace_name
    return MarketplaceName.UNKNOWN


def get_mint_events(receipt: Receipt) -> List[Event]:
    # Exact, case-sensitive match on the event name
    return [event for event in receipt.events if event.event == MINT_EVENT_NAME]


def get_series_id(token_id: str) -> str:
    # Paras token ids look like `<series>:<edition>`
    return token_id.split(":", 1)[0]
