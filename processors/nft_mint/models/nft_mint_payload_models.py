from typing import List
from typing_extensions import Annotated
from pydantic import BaseModel, Field, Json, TypeAdapter

NonEmptyStrList = Annotated[List[str], Field(min_length=1)]


class ParasEventData(BaseModel):
    owner_id: str
    token_ids: NonEmptyStrList


class MintbaseMemo(BaseModel):
    meta_id: str
    minter: str


# Earlier Mintbase stores emit the token ids directly
class MintbasePayloadV1(BaseModel):
    owner_id: str
    token_ids: NonEmptyStrList


# Newer Mintbase stores carry the thing metadata as a JSON encoded memo
class MintbasePayloadV2(BaseModel):
    owner_id: str
    memo: Json[MintbaseMemo]


PARAS_EVENT_DATA_ADAPTER = TypeAdapter(
    Annotated[List[ParasEventData], Field(min_length=1)]
)
MINTBASE_PAYLOAD_V1_ADAPTER = TypeAdapter(
    Annotated[List[MintbasePayloadV1], Field(min_length=1)]
)
MINTBASE_PAYLOAD_V2_ADAPTER = TypeAdapter(
    Annotated[List[MintbasePayloadV2], Field(min_length=1)]
)
