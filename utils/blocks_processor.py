from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List

from utils.models.block_models import Block
from utils.models.general_models import NextBlockToProcess
from utils.session import Session


@dataclass
class ProcessingResult:
    block_height: int
    # Records extracted from the block, in block order
    output: List[Any] = field(default_factory=list)
    processing_duration_in_secs: float = 0.0
    db_insertion_duration_in_secs: float = 0.0
    # Events skipped because their payload could not be parsed
    num_failed_events: int = 0


class BlocksProcessor(ABC):
    # Name of the processor for status logging
    # This will get stored in the database for each (`BlocksProcessor`, block_height) pair
    @abstractmethod
    def name(self) -> str:
        pass

    # Name of the DB schema this processor writes to
    @abstractmethod
    def schema(self) -> str:
        pass

    # Process all receipts within a block. Must not keep state between calls,
    # the same block always yields the same result.
    @abstractmethod
    def process_block(self, block: Block) -> ProcessingResult:
        pass

    @abstractmethod
    def insert_to_db(self, result: ProcessingResult) -> None:
        pass

    def update_last_processed_block(self, last_processed_block_height: int) -> None:
        with Session() as session, session.begin():
            next_block_to_process = session.get(NextBlockToProcess, self.name())
            if (
                next_block_to_process is not None
                and next_block_to_process.next_block_height
                > last_processed_block_height
            ):
                return
            session.merge(
                NextBlockToProcess(
                    indexer_name=self.name(),
                    next_block_height=last_processed_block_height + 1,
                )
            )
