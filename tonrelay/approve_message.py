"""Decoder for the gateway's approve-messages body."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import (
    BocParsingError,
    Cell,
    InvalidOpCodeError,
    cell_to_buffer,
    cell_to_string,
)
from tonrelay.op_code import compare_op_code

OP_APPROVE_MESSAGES = 0x00000028

_DICT_KEY_BITS = 16


@dataclass(frozen=True)
class ApproveMessage:
    """One message approved by the gateway."""

    message_id: str
    source_chain: str
    source_address: str
    destination_chain: str
    destination_address: bytes
    payload_hash: int


@dataclass(frozen=True)
class ApproveMessages:
    """The approved messages of one approve body, with the proof cell kept alongside."""

    approve_messages: list[ApproveMessage]
    proof: Cell

    @classmethod
    def from_boc_hex(cls, boc: str) -> ApproveMessages:
        """Decode a hex-encoded bag of cells holding an approve-messages body."""
        cell = Cell.from_boc_hex(boc)
        parser = cell.parser()
        op_code = parser.load_bits(32)
        if not compare_op_code(OP_APPROVE_MESSAGES, op_code):
            raise InvalidOpCodeError(
                f"Expected {OP_APPROVE_MESSAGES:08X}, got {op_code.hex()}"
            )
        proof = parser.next_reference()
        messages = parser.next_reference()
        entries = messages.parser().load_dict(_DICT_KEY_BITS)
        approve_messages = [
            _parse_approve_message(value.next_reference())
            for _, value in sorted(entries.items())
        ]
        return cls(approve_messages=approve_messages, proof=proof)


def _parse_approve_message(cell: Cell) -> ApproveMessage:
    parser = cell.parser()
    payload_hash = parser.load_uint(256)
    message_id = cell_to_string(parser.next_reference())
    source_chain = cell_to_string(parser.next_reference())
    source_address = cell_to_string(parser.next_reference())
    inner = parser.next_reference().parser()
    destination_address = cell_to_buffer(inner.next_reference())
    destination_chain = cell_to_string(inner.next_reference())
    if payload_hash < 0:
        raise BocParsingError("Invalid payload hash")
    return ApproveMessage(
        message_id=message_id,
        source_chain=source_chain,
        source_address=source_address,
        destination_chain=destination_chain,
        destination_address=destination_address,
        payload_hash=payload_hash,
    )