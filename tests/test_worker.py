import json
import queue

import pytest

from processors.nft_mint.processor import NFTMintProcessor
from tests.streamer_messages import event_log, outcome, paras_mint_message, streamer_message
from utils.block_source import IterableBlockSource, StreamerMessageFileSource
from utils.config import Config
from utils.errors import ReceiptResolutionError
from utils.models.block_models import Block, Event, Receipt
from utils.sinks import LogSink, ResultSink
from utils.worker import (
    END_OF_STREAM,
    IndexerProcessorServer,
    consume,
    get_block_source,
    producer,
)

PARAS_MINT = Event(
    event="nft_mint", data=[{"owner_id": "alice.near", "token_ids": ["42:7"]}]
)


class RecordingSink(ResultSink):
    def __init__(self):
        self.results = []

    def write(self, result):
        self.results.append(result)


def make_config(**server_config):
    return Config(
        health_check_port=8085,
        server_config={
            "processor_config": {"type": "nft_mint_processor"},
            "block_source_config": {"path": "blocks.jsonl"},
            **server_config,
        },
    )


def run_pipeline(block_source):
    q = queue.Queue()
    producer(q, block_source, "nft_mint_processor")
    sink = RecordingSink()
    last_processed_block_height = consume(q, NFTMintProcessor(), [sink])
    return last_processed_block_height, sink.results


def test_pipeline_processes_blocks_in_order():
    blocks = [
        Block(height=1, receipts=(Receipt("r1", "x.paras.near", (PARAS_MINT,)),)),
        Block(height=2),
        Block(height=5, receipts=(Receipt("r2", "unknown.near", (PARAS_MINT,)),)),
    ]
    last_processed_block_height, results = run_pipeline(IterableBlockSource(blocks))
    assert last_processed_block_height == 5
    assert [result.block_height for result in results] == [1, 2, 5]
    assert [len(result.nft_receipts) for result in results] == [1, 0, 0]


def test_empty_source():
    assert run_pipeline(IterableBlockSource([])) == (None, [])


def test_producer_ends_stream():
    q = queue.Queue()
    producer(q, IterableBlockSource([Block(height=1)]), "nft_mint_processor")
    assert q.get().height == 1
    assert q.get() is END_OF_STREAM


def test_source_error_reaches_consumer(tmp_path):
    path = tmp_path / "blocks.jsonl"
    path.write_text(
        json.dumps(paras_mint_message(1))
        + "\n"
        + json.dumps(streamer_message(2, [outcome("r9", [event_log("nft_mint")])]))
        + "\n"
    )
    q = queue.Queue()
    producer(q, StreamerMessageFileSource(str(path)), "nft_mint_processor")
    sink = RecordingSink()
    with pytest.raises(ReceiptResolutionError):
        consume(q, NFTMintProcessor(), [sink])
    # The block before the failure was still delivered
    assert [result.block_height for result in sink.results] == [1]


def test_consume_rejects_non_increasing_heights():
    q = queue.Queue()
    for block in [Block(height=3), Block(height=3), END_OF_STREAM]:
        q.put(block)
    with pytest.raises(ValueError):
        consume(q, NFTMintProcessor(), [])


def test_log_sink_logs_only_blocks_with_records(caplog):
    processor = NFTMintProcessor()
    sink = LogSink()
    with caplog.at_level("INFO"):
        sink.write(processor.process_block(Block(height=1)))
        sink.write(
            processor.process_block(
                Block(
                    height=2,
                    receipts=(Receipt("r1", "x.paras.near", (PARAS_MINT,)),),
                )
            )
        )
    [record] = [r for r in caplog.records if r.getMessage() == LogSink().message]
    assert record.block_height == 2
    assert record.records == [
        {
            "receipt_id": "r1",
            "marketplace_name": "Paras",
            "nfts": (
                {
                    "owner": "alice.near",
                    "links": ("https://paras.id/token/x.paras.near::42/42:7",),
                },
            ),
        }
    ]


def test_get_block_source():
    source = get_block_source(make_config(), 10, 20)
    assert isinstance(source, StreamerMessageFileSource)
    assert source.path == "blocks.jsonl"
    assert source.starting_block_height == 10
    assert source.ending_block_height == 20


def test_get_block_source_invalid_type():
    config = make_config(block_source_config={"type": "lake", "path": "x"})
    with pytest.raises(ValueError):
        get_block_source(config, 0, None)


def test_server_sinks():
    server = IndexerProcessorServer(make_config())
    assert isinstance(server.processor, NFTMintProcessor)
    assert [type(sink).__name__ for sink in server.get_sinks()] == ["LogSink"]

    server = IndexerProcessorServer(
        make_config(postgres_connection_string="postgresql://localhost/db")
    )
    assert [type(sink).__name__ for sink in server.get_sinks()] == [
        "LogSink",
        "SqlSink",
    ]


def test_server_rejects_unknown_processor():
    config = make_config(processor_config={"type": "coin_flip"})
    with pytest.raises(Exception, match="Invalid processor name"):
        IndexerProcessorServer(config)


def test_processed_block_log_carries_block_hash(caplog):
    q = queue.Queue()
    q.put(Block(height=1, hash="hash-1"))
    q.put(END_OF_STREAM)
    with caplog.at_level("INFO"):
        consume(q, NFTMintProcessor(), [])
    [record] = [
        r
        for r in caplog.records
        if r.getMessage() == "[Parser] Processor finished processing one block"
    ]
    assert record.block_hash == "hash-1"
    assert record.block_height == 1
