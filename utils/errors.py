from typing import Optional


class IndexerError(Exception):
    pass


class BlockSourceError(IndexerError):
    """Raised when a block source cannot produce a block."""


class ReceiptResolutionError(BlockSourceError):
    """Raised when an execution outcome has no matching action receipt in its block."""

    def __init__(self, receipt_id: str, block_height: Optional[int] = None):
        self.receipt_id = receipt_id
        self.block_height = block_height
        super().__init__(
            f"Expected ActionReceipt {receipt_id} to be included in block {block_height}"
        )


class PayloadParseError(IndexerError):
    pass
