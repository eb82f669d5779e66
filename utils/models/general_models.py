from sqlalchemy.orm import DeclarativeBase
from utils.models.annotated_types import (
    StringPrimaryKeyType,
    BigIntegerType,
    UpdatedAtType,
)


class Base(DeclarativeBase):
    pass


class NextBlockToProcess(Base):
    __tablename__ = "next_blocks_to_process"
    __table_args__ = {"schema": "per_schema"}

    indexer_name: StringPrimaryKeyType
    next_block_height: BigIntegerType
    updated_at: UpdatedAtType
