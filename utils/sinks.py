import dataclasses
import logging

from abc import ABC, abstractmethod
from time import perf_counter
from utils.blocks_processor import BlocksProcessor, ProcessingResult


class ResultSink(ABC):
    @abstractmethod
    def write(self, result: ProcessingResult) -> None:
        pass


class LogSink(ResultSink):
    """Logs the records of blocks that produced any."""

    def __init__(self, message: str = "We caught freshly minted NFTs!"):
        self.message = message

    def write(self, result: ProcessingResult) -> None:
        if not result.output:
            return
        logging.info(
            self.message,
            extra={
                "block_height": result.block_height,
                "records": [dataclasses.asdict(record) for record in result.output],
            },
        )


class SqlSink(ResultSink):
    """Stores records through the processor and advances its checkpoint.

    `Session` must already be bound to an engine.
    """

    def __init__(self, processor: BlocksProcessor):
        self.processor = processor

    def write(self, result: ProcessingResult) -> None:
        start_time = perf_counter()
        if result.output:
            self.processor.insert_to_db(result)
        self.processor.update_last_processed_block(result.block_height)
        result.db_insertion_duration_in_secs = perf_counter() - start_time
