"""Decoder for the gateway's nullified-successfully message."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import Cell, InvalidOpCodeError, cell_to_buffer, cell_to_string
from tonrelay.op_code import compare_op_code

OP_NULLIFIED_SUCCESSFULLY = 0x00000005


@dataclass(frozen=True)
class NullifiedSuccessfullyMessage:
    """A message the gateway marked as executed."""

    message_id: str
    source_chain: str
    source_address: str
    destination_chain: str
    destination_address: bytes
    payload: str

    @classmethod
    def from_boc_b64(cls, boc: str) -> NullifiedSuccessfullyMessage:
        """Decode a base64 bag of cells holding a nullified-successfully body."""
        parser = Cell.from_boc_b64(boc).parser()
        op_code = parser.load_bits(32)
        if not compare_op_code(OP_NULLIFIED_SUCCESSFULLY, op_code):
            raise InvalidOpCodeError(
                f"Expected {OP_NULLIFIED_SUCCESSFULLY:08X}, got {op_code.hex()}"
            )
        message_id = cell_to_string(parser.next_reference())
        source_chain = cell_to_string(parser.next_reference())
        source_address = cell_to_string(parser.next_reference())
        inner = parser.next_reference().parser()
        payload = cell_to_buffer(inner.next_reference()).hex()
        destination_address = cell_to_buffer(inner.next_reference())
        destination_chain = cell_to_string(inner.next_reference())
        return cls(
            message_id=message_id,
            source_chain=source_chain,
            source_address=source_address,
            destination_chain=destination_chain,
            destination_address=destination_address,
            payload=payload,
        )