import json
from typing import Any, Dict, List, Optional

from utils.errors import BlockSourceError, ReceiptResolutionError
from utils.models.block_models import Block, Event, Receipt

# Utility functions for NEAR Lake StreamerMessage JSON

# NEP-297 events are emitted as logs with this prefix
EVENT_JSON_PREFIX = "EVENT_JSON:"


def get_block_height(streamer_message: Dict[str, Any]) -> int:
    return int(streamer_message["block"]["header"]["height"])


def get_block_hash(streamer_message: Dict[str, Any]) -> Optional[str]:
    return streamer_message["block"]["header"].get("hash")


def get_receipt_execution_outcomes(
    streamer_message: Dict[str, Any],
) -> List[Dict[str, Any]]:
    outcomes = []
    for shard in streamer_message.get("shards", []):
        outcomes.extend(shard.get("receipt_execution_outcomes", []))
    return outcomes


def get_action_receipts(streamer_message: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    receipts = []
    for shard in streamer_message.get("shards", []):
        chunk = shard.get("chunk") or {}
        receipts.extend(chunk.get("receipts", []))
        for outcome in shard.get("receipt_execution_outcomes", []):
            if outcome.get("receipt"):
                receipts.append(outcome["receipt"])

    return {
        receipt["receipt_id"]: receipt
        for receipt in receipts
        if "Action" in receipt.get("receipt", {})
    }


def get_outcome_receipt_id(outcome: Dict[str, Any]) -> str:
    return outcome["execution_outcome"]["id"]


def get_outcome_logs(outcome: Dict[str, Any]) -> List[str]:
    return outcome["execution_outcome"]["outcome"].get("logs", [])


def parse_event_log(log: Any) -> Optional[Event]:
    if not isinstance(log, str) or not log.startswith(EVENT_JSON_PREFIX):
        return None

    try:
        envelope = json.loads(log[len(EVENT_JSON_PREFIX) :])
    except json.JSONDecodeError:
        return None

    if not isinstance(envelope, dict) or not isinstance(envelope.get("event"), str):
        return None

    return Event(
        event=envelope["event"],
        data=envelope.get("data"),
        standard=envelope.get("standard"),
        version=envelope.get("version"),
    )


def get_outcome_events(outcome: Dict[str, Any]) -> List[Event]:
    events = []
    for log in get_outcome_logs(outcome):
        event = parse_event_log(log)
        if event is not None:
            events.append(event)
    return events


def to_block(streamer_message: Dict[str, Any]) -> Block:
    try:
        block_height = get_block_height(streamer_message)
        block_hash = get_block_hash(streamer_message)
        outcomes = get_receipt_execution_outcomes(streamer_message)
        action_receipts = get_action_receipts(streamer_message)
    except (KeyError, TypeError, ValueError) as e:
        raise BlockSourceError(f"Malformed StreamerMessage: {e!r}") from e

    receipts = []
    for outcome in outcomes:
        try:
            receipt_id = get_outcome_receipt_id(outcome)
            events = get_outcome_events(outcome)
        except (KeyError, TypeError) as e:
            raise BlockSourceError(
                f"Malformed execution outcome in block {block_height}: {e!r}"
            ) from e

        # Receipts without events have nothing to classify
        if not events:
            continue

        action_receipt = action_receipts.get(receipt_id)
        if action_receipt is None:
            raise ReceiptResolutionError(receipt_id, block_height)

        receipts.append(
            Receipt(
                receipt_id=receipt_id,
                receiver_id=action_receipt["receiver_id"],
                events=tuple(events),
            )
        )

    return Block(height=block_height, receipts=tuple(receipts), hash=block_hash)
