from utils.block_source import BlockSource, StreamerMessageFileSource
from utils.blocks_processor import BlocksProcessor, ProcessingResult
from utils.config import Config
from utils.models.general_models import Base
from utils.session import Session
from utils.metrics import (
    EXTRACTED_RECORDS_COUNTER,
    FAILED_EVENT_PARSES_COUNTER,
    LATEST_PROCESSED_BLOCK_HEIGHT,
    PROCESSED_BLOCKS_COUNTER,
)
from utils.processor_name import ProcessorName
from utils.sinks import LogSink, ResultSink, SqlSink
from processors.nft_mint.processor import NFTMintProcessor
from sqlalchemy import DDL, create_engine
from sqlalchemy import event
from typing import List, Optional
from prometheus_client.twisted import MetricsResource
from twisted.web.server import Site
from twisted.web.resource import Resource
from twisted.internet import reactor
from time import perf_counter
import threading
import logging
import queue
import os

# How large the fetcher queue should be
FETCHER_QUEUE_SIZE = 50

PROCESSOR_SERVICE_TYPE = "processor"

# Put on the channel by the producer once the source is exhausted
END_OF_STREAM = None


def get_block_source(
    config: Config, starting_block_height: int, ending_block_height: Optional[int]
) -> BlockSource:
    block_source_config = config.server_config.block_source_config
    match block_source_config.type:
        case "streamer_message_file":
            return StreamerMessageFileSource(
                block_source_config.path,
                starting_block_height=starting_block_height,
                ending_block_height=ending_block_height,
            )
        case _:
            raise ValueError(
                f"Invalid block source type: {block_source_config.type}"
            )


# Pulls blocks from the source and sends them to the channel in order.
# A source failure is sent down the channel so the consumer surfaces it for that block.
def producer(
    q: queue.Queue,
    block_source: BlockSource,
    processor_name: str,
):
    try:
        for block in block_source:
            logging.info(
                "[Parser] Received block from source. Sending block to channel.",
                extra={
                    "processor_name": processor_name,
                    "block_height": block.height,
                    "num_of_receipts": len(block.receipts),
                    "channel_size": q.qsize(),
                    "step": "1",
                    "service_type": PROCESSOR_SERVICE_TYPE,
                },
            )
            q.put(block)
    except Exception as e:
        logging.exception(
            "[Parser] Error receiving block from source",
            extra={
                "processor_name": processor_name,
                "error": str(e),
                "service_type": PROCESSOR_SERVICE_TYPE,
            },
        )
        q.put(e)
        return

    logging.info(
        "[Parser] Stream ended",
        extra={
            "processor_name": processor_name,
            "service_type": PROCESSOR_SERVICE_TYPE,
        },
    )
    q.put(END_OF_STREAM)


# This is the consumer side of the channel. Blocks are processed one at a time,
# in the order the source delivered them. Returns the last processed block height.
def consume(
    q: queue.Queue,
    processor: BlocksProcessor,
    sinks: List[ResultSink],
) -> Optional[int]:
    processor_name = processor.name()
    last_processed_block_height = None

    while True:
        item = q.get()
        if item is END_OF_STREAM:
            logging.info(
                "[Parser] Channel closed; stream ended.",
                extra={
                    "processor_name": processor_name,
                    "last_processed_block_height": last_processed_block_height,
                    "service_type": PROCESSOR_SERVICE_TYPE,
                },
            )
            return last_processed_block_height
        if isinstance(item, Exception):
            raise item

        block = item
        start_time = perf_counter()
        if (
            last_processed_block_height is not None
            and block.height <= last_processed_block_height
        ):
            raise ValueError(
                f"Block height {block.height} is not after last processed block height {last_processed_block_height}"
            )
        if (
            last_processed_block_height is not None
            and block.height != last_processed_block_height + 1
        ):
            # NEAR skips heights, so a gap alone is not an error
            logging.warning(
                "[Parser] Received block with gap from source",
                extra={
                    "processor_name": processor_name,
                    "last_processed_block_height": last_processed_block_height,
                    "block_height": block.height,
                    "service_type": PROCESSOR_SERVICE_TYPE,
                },
            )

        result = processor.process_block(block)
        for sink in sinks:
            sink.write(result)

        record_metrics(processor_name, result)
        last_processed_block_height = block.height
        logging.info(
            "[Parser] Processor finished processing one block",
            extra={
                "processor_name": processor_name,
                "block_height": block.height,
                "block_hash": block.hash,
                "num_of_records": len(result.output),
                "num_of_failed_events": result.num_failed_events,
                "processing_duration_in_secs": format(
                    result.processing_duration_in_secs, ".8f"
                ),
                "db_insertion_duration_in_secs": format(
                    result.db_insertion_duration_in_secs, ".8f"
                ),
                "duration_in_secs": format(perf_counter() - start_time, ".8f"),
                "step": "2",
                "service_type": PROCESSOR_SERVICE_TYPE,
            },
        )


def record_metrics(processor_name: str, result: ProcessingResult) -> None:
    PROCESSED_BLOCKS_COUNTER.labels(processor_name=processor_name).inc()
    LATEST_PROCESSED_BLOCK_HEIGHT.labels(processor_name=processor_name).set(
        result.block_height
    )
    EXTRACTED_RECORDS_COUNTER.labels(processor_name=processor_name).inc(
        len(result.output)
    )
    FAILED_EVENT_PARSES_COUNTER.labels(processor_name=processor_name).inc(
        result.num_failed_events
    )


def consumer(
    q: queue.Queue,
    processor: BlocksProcessor,
    sinks: List[ResultSink],
):
    try:
        consume(q, processor, sinks)
    except Exception:
        logging.exception(
            "[Parser] Error processing block",
            extra={
                "processor_name": processor.name(),
                "service_type": PROCESSOR_SERVICE_TYPE,
            },
        )
        os._exit(1)


class IndexerProcessorServer:
    config: Config
    processor: BlocksProcessor

    def __init__(self, config: Config):
        self.config = config
        logging.info(
            "[Parser] Kicking off",
            extra={
                "processor_name": self.config.server_config.processor_config.type,
                "service_type": PROCESSOR_SERVICE_TYPE,
            },
        )

        # Instantiate the correct processor based on config
        processor_config = self.config.server_config.processor_config
        match processor_config.type:
            case ProcessorName.NFT_MINT_PROCESSOR.value:
                self.processor = NFTMintProcessor()
            case _:
                raise Exception(
                    "Invalid processor name"
                    "\n[ERROR]: The specified processor name was invalid or not found.\n"
                    "         - If you are using a custom processor, make sure to add it to the ProcessorName enum in utils/processor_name.py.\n"
                    "         - Ensure the IndexerProcessorServer constructor in utils/worker.py uses the new enum value.\n"
                )

    def get_sinks(self) -> List[ResultSink]:
        sinks: List[ResultSink] = [LogSink()]
        if self.config.server_config.postgres_connection_string is not None:
            sinks.append(SqlSink(self.processor))
        return sinks

    def run(self):
        processor_name = self.processor.name()

        if self.config.server_config.postgres_connection_string is not None:
            # Run DB migrations
            logging.info(
                "[Parser] Initializing DB tables",
                extra={
                    "processor_name": processor_name,
                    "service_type": PROCESSOR_SERVICE_TYPE,
                },
            )
            self.init_db_tables(self.processor.schema())
            logging.info(
                "[Parser] DB tables initialized",
                extra={
                    "processor_name": processor_name,
                    "service_type": PROCESSOR_SERVICE_TYPE,
                },
            )

        self.start_health_and_monitoring_ports()

        # Get starting block height from config or DB
        starting_block_height = self.config.get_starting_block_height(processor_name)
        ending_block_height = self.config.server_config.ending_block_height
        block_source = get_block_source(
            self.config, starting_block_height, ending_block_height
        )

        # Create a block fetcher thread that will continuously fetch blocks from the source
        # and write into a channel
        logging.info(
            "[Parser] Starting fetcher task",
            extra={
                "processor_name": processor_name,
                "starting_block_height": starting_block_height,
                "ending_block_height": ending_block_height,
                "service_type": PROCESSOR_SERVICE_TYPE,
            },
        )

        q = queue.Queue(FETCHER_QUEUE_SIZE)
        producer_thread = threading.Thread(
            target=producer,
            daemon=True,
            args=(q, block_source, processor_name),
        )
        producer_thread.start()

        consumer_thread = threading.Thread(
            target=consumer,
            daemon=True,
            args=(q, self.processor, self.get_sinks()),
        )
        consumer_thread.start()

        producer_thread.join()
        consumer_thread.join()

    def init_db_tables(self, schema_name: str) -> None:
        engine = create_engine(self.config.server_config.postgres_connection_string)
        engine = engine.execution_options(
            schema_translate_map={"per_schema": schema_name}
        )
        Session.configure(bind=engine)
        Base.metadata.create_all(engine, checkfirst=True)

    def start_health_and_monitoring_ports(self) -> None:
        # Start the health + metrics server.
        def start_health_server() -> None:
            root = Resource()
            root.putChild(b"metrics", MetricsResource())  # type: ignore

            class ServerOk(Resource):
                isLeaf = True

                def render_GET(self, request):
                    return b"ok"

            root.putChild(b"", ServerOk())  # type: ignore
            factory = Site(root)
            reactor.listenTCP(self.config.health_check_port, factory)  # type: ignore
            reactor.run(installSignalHandlers=False)  # type: ignore

        t = threading.Thread(target=start_health_server, daemon=True)
        t.start()


@event.listens_for(Base.metadata, "before_create")
def create_schemas(target, connection, **kw):
    # Only Postgres gets real schemas, other dialects map `per_schema` to None
    if connection.dialect.name != "postgresql":
        return
    schema_translate_map = connection.get_execution_options().get(
        "schema_translate_map", {}
    )
    schemas = set()
    for table in target.tables.values():
        if table.schema is not None:
            schemas.add(schema_translate_map.get(table.schema, table.schema))
    for schema in schemas:
        if schema is not None:
            connection.execute(DDL("CREATE SCHEMA IF NOT EXISTS %s" % schema))
