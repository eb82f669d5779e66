import logging

from dataclasses import dataclass
from time import perf_counter
from typing import List
from processors.nft_mint.models.nft_mint_models import NFTMint
from processors.nft_mint.nft_mint_enums import NFTReceipt, ParseStatus
from processors.nft_mint.parsers.nft_mint_parser import classify_receipt
from utils.blocks_processor import BlocksProcessor, ProcessingResult
from utils.models.block_models import Block
from utils.models.schema_names import NFT_MINT_SCHEMA_NAME
from utils.processor_name import ProcessorName
from utils.session import Session


@dataclass
class NFTMintProcessingResult(ProcessingResult):
    num_mint_events: int = 0

    @property
    def nft_receipts(self) -> List[NFTReceipt]:
        return self.output


class NFTMintProcessor(BlocksProcessor):
    def name(self) -> str:
        return ProcessorName.NFT_MINT_PROCESSOR.value

    def schema(self) -> str:
        return NFT_MINT_SCHEMA_NAME

    def process_block(self, block: Block) -> NFTMintProcessingResult:
        start_time = perf_counter()
        nft_receipts: List[NFTReceipt] = []
        num_mint_events = 0
        num_failed_events = 0

        for receipt in block.receipts:
            classification = classify_receipt(receipt)
            num_mint_events += len(classification.mint_events)

            # A malformed event only loses its own NFT
            for mint_event_index, parse_result in enumerate(
                classification.parse_results
            ):
                if parse_result.status != ParseStatus.FAILED:
                    continue
                num_failed_events += 1
                logging.warning(
                    "[Parser] Failed to parse nft_mint event. Skipping...",
                    extra={
                        "processor_name": self.name(),
                        "block_height": block.height,
                        "receipt_id": receipt.receipt_id,
                        "receiver_id": receipt.receiver_id,
                        "marketplace": classification.marketplace.value,
                        "mint_event_index": mint_event_index,
                        "error": parse_result.error,
                    },
                )

            nfts = classification.nfts
            if not nfts:
                continue

            nft_receipts.append(
                NFTReceipt(
                    receipt_id=receipt.receipt_id,
                    marketplace_name=classification.marketplace.value,
                    nfts=nfts,
                )
            )

        return NFTMintProcessingResult(
            block_height=block.height,
            output=nft_receipts,
            processing_duration_in_secs=perf_counter() - start_time,
            num_mint_events=num_mint_events,
            num_failed_events=num_failed_events,
        )

    def insert_to_db(self, result: ProcessingResult) -> None:
        with Session() as session, session.begin():
            for nft_receipt in result.output:
                for nft_index, nft in enumerate(nft_receipt.nfts):
                    for link_index, link in enumerate(nft.links):
                        session.merge(
                            NFTMint(
                                receipt_id=nft_receipt.receipt_id,
                                nft_index=nft_index,
                                link_index=link_index,
                                block_height=result.block_height,
                                marketplace=nft_receipt.marketplace_name,
                                owner_id=nft.owner,
                                link=link,
                            )
                        )
