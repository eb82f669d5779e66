from enum import Enum


class ProcessorName(Enum):
    NFT_MINT_PROCESSOR = "nft_mint_processor"
