import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Optional

from utils import streamer_message_utils
from utils.errors import BlockSourceError
from utils.models.block_models import Block


class BlockSource(ABC):
    """Delivers blocks in increasing height order.

    Receipts of a delivered block already carry their receiver id and the
    events they emitted. Failing to associate an outcome with its receipt is
    reported as a `ReceiptResolutionError` while iterating.
    """

    @abstractmethod
    def __iter__(self) -> Iterator[Block]:
        pass


class IterableBlockSource(BlockSource):
    def __init__(self, blocks: Iterable[Block]):
        self.blocks = blocks

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)


class StreamerMessageFileSource(BlockSource):
    """Replays NEAR Lake StreamerMessages stored one JSON object per line."""

    def __init__(
        self,
        path: str,
        starting_block_height: int = 0,
        ending_block_height: Optional[int] = None,
    ):
        self.path = path
        self.starting_block_height = starting_block_height
        self.ending_block_height = ending_block_height

    def __iter__(self) -> Iterator[Block]:
        with open(self.path, "r") as file:
            for line_no, line in enumerate(file, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    streamer_message = json.loads(line)
                except json.JSONDecodeError as e:
                    raise BlockSourceError(
                        f"Invalid StreamerMessage JSON at {self.path}:{line_no}"
                    ) from e

                # Only blocks in range are converted
                try:
                    block_height = streamer_message_utils.get_block_height(
                        streamer_message
                    )
                except (KeyError, TypeError, ValueError) as e:
                    raise BlockSourceError(
                        f"Missing block height at {self.path}:{line_no}"
                    ) from e

                if block_height < self.starting_block_height:
                    continue
                if (
                    self.ending_block_height is not None
                    and block_height > self.ending_block_height
                ):
                    logging.info(
                        "[Parser] Reached ending block height",
                        extra={
                            "path": self.path,
                            "ending_block_height": self.ending_block_height,
                        },
                    )
                    return

                yield streamer_message_utils.to_block(streamer_message)
