import re

from processors.nft_mint.nft_mint_enums import MarketplaceName

MINT_EVENT_NAME = "nft_mint"

PARAS_CONTRACT_ID = "x.paras.near"

# Mintbase stores are deployed as sub-accounts of a numbered factory, e.g. `store.mintbase1.near`.
# Matching order matters, the first matching marketplace wins.
MARKETPLACE_RECEIVER_MATCH_REGEX_STRINGS = {
    MarketplaceName.MINTBASE: r"^.+\.mintbase\d+\.near$",
    MarketplaceName.PARAS: f"^{re.escape(PARAS_CONTRACT_ID)}$",
}

PARAS_TOKEN_URL = "https://paras.id/token/{receiver_id}::{series_id}/{token_id}"
MINTBASE_TOKEN_URL = "https://mintbase.io/contract/{receiver_id}/token/{token_id}"
MINTBASE_THING_URL = "https://mintbase.io/thing/{meta_id}:{receiver_id}"
