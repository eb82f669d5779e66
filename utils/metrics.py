from prometheus_client import Counter, Gauge

PROCESSED_BLOCKS_COUNTER = Counter(
    "indexer_processor_processed_blocks",
    "Number of blocks processed",
    ["processor_name"],
)

LATEST_PROCESSED_BLOCK_HEIGHT = Gauge(
    "indexer_processor_latest_block_height",
    "Latest processed block height",
    ["processor_name"],
)

EXTRACTED_RECORDS_COUNTER = Counter(
    "indexer_processor_extracted_records",
    "Number of records extracted from processed blocks",
    ["processor_name"],
)

FAILED_EVENT_PARSES_COUNTER = Counter(
    "indexer_processor_failed_event_parses",
    "Number of events skipped because their payload could not be parsed",
    ["processor_name"],
)
