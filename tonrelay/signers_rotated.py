"""Decoder for the gateway's signers-rotated log."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import BocParsingError, Cell, InvalidOpCodeError
from tonrelay.op_code import compare_op_code

OP_SIGNERS_ROTATED_LOG = 0x0000002A

_U64_LIMIT = 1 << 64


@dataclass(frozen=True)
class LogSignersRotatedMessage:
    """A rotation of the gateway's signer set."""

    signers_hash: str
    epoch: int

    @classmethod
    def from_boc_b64(cls, boc: str) -> LogSignersRotatedMessage:
        """Decode a base64 bag of cells holding a signers-rotated log."""
        parser = Cell.from_boc_b64(boc).parser()
        op_code = parser.load_bits(32)
        if not compare_op_code(OP_SIGNERS_ROTATED_LOG, op_code):
            raise InvalidOpCodeError(
                f"Expected {OP_SIGNERS_ROTATED_LOG:08X}, got {op_code.hex()}"
            )
        parser.next_reference()
        hash_value = parser.load_uint(256)
        size = max(1, (hash_value.bit_length() + 7) // 8)
        signers_hash = "0x" + hash_value.to_bytes(size, "big").hex()
        epoch = parser.load_uint(256)
        if epoch >= _U64_LIMIT:
            raise BocParsingError(f"Epoch {epoch} does not fit in 64 bits")
        return cls(signers_hash=signers_hash, epoch=epoch)