import json

import pytest

from tests.streamer_messages import event_log, outcome, paras_mint_message, streamer_message
from utils.block_source import IterableBlockSource, StreamerMessageFileSource
from utils.errors import BlockSourceError, ReceiptResolutionError
from utils.models.block_models import Block


def write_messages(path, messages):
    path.write_text("\n".join(json.dumps(message) for message in messages) + "\n")
    return str(path)


def test_iterable_block_source():
    blocks = [Block(height=1), Block(height=2)]
    assert list(IterableBlockSource(blocks)) == blocks


def test_file_source_reads_all_blocks(tmp_path):
    path = write_messages(
        tmp_path / "blocks.jsonl", [paras_mint_message(h) for h in (1, 2, 4)]
    )
    assert [block.height for block in StreamerMessageFileSource(path)] == [1, 2, 4]


def test_file_source_respects_height_range(tmp_path):
    path = write_messages(
        tmp_path / "blocks.jsonl", [paras_mint_message(h) for h in range(1, 8)]
    )
    source = StreamerMessageFileSource(
        path, starting_block_height=3, ending_block_height=5
    )
    assert [block.height for block in source] == [3, 4, 5]


def test_file_source_skips_blank_lines(tmp_path):
    path = tmp_path / "blocks.jsonl"
    path.write_text("\n" + json.dumps(paras_mint_message(1)) + "\n\n")
    assert len(list(StreamerMessageFileSource(str(path)))) == 1


def test_file_source_invalid_json(tmp_path):
    path = tmp_path / "blocks.jsonl"
    path.write_text(json.dumps(paras_mint_message(1)) + "\n{oops\n")
    source = iter(StreamerMessageFileSource(str(path)))
    assert next(source).height == 1
    with pytest.raises(BlockSourceError, match="blocks.jsonl:2"):
        next(source)


def test_file_source_surfaces_resolution_errors(tmp_path):
    path = write_messages(
        tmp_path / "blocks.jsonl",
        [streamer_message(1, [outcome("r1", [event_log("nft_mint")])])],
    )
    with pytest.raises(ReceiptResolutionError):
        list(StreamerMessageFileSource(path))


def test_file_source_skips_bad_blocks_below_start_height(tmp_path):
    path = write_messages(
        tmp_path / "blocks.jsonl",
        [
            streamer_message(1, [outcome("r1", [event_log("nft_mint")])]),
            paras_mint_message(2),
        ],
    )
    source = StreamerMessageFileSource(path, starting_block_height=2)
    assert [block.height for block in source] == [2]


def test_file_source_stops_before_bad_blocks_after_end_height(tmp_path):
    path = write_messages(
        tmp_path / "blocks.jsonl",
        [
            paras_mint_message(1),
            streamer_message(2, [outcome("r1", [event_log("nft_mint")])]),
        ],
    )
    source = StreamerMessageFileSource(path, ending_block_height=1)
    assert [block.height for block in source] == [1]


def test_file_source_missing_block_height(tmp_path):
    path = write_messages(tmp_path / "blocks.jsonl", [{"shards": []}])
    with pytest.raises(BlockSourceError, match="blocks.jsonl:1"):
        list(StreamerMessageFileSource(path))
