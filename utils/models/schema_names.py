NFT_MINT_SCHEMA_NAME = "nft_mint"
