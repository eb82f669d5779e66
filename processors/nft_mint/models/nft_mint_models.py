from utils.models.annotated_types import (
    BigIntegerPrimaryKeyType,
    BigIntegerType,
    InsertedAtType,
    StringPrimaryKeyType,
    StringType,
)
from utils.models.general_models import Base


class NFTMint(Base):
    __tablename__ = "nft_mints"
    __table_args__ = {"schema": "per_schema"}

    receipt_id: StringPrimaryKeyType
    # Position of the NFT within its receipt and of the link within its NFT
    nft_index: BigIntegerPrimaryKeyType
    link_index: BigIntegerPrimaryKeyType
    block_height: BigIntegerType
    marketplace: StringType
    owner_id: StringType
    link: StringType
    inserted_at: InsertedAtType
