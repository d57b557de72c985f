"""Decoders for the token service's deployment-started and interchain-transfer logs."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import (
    BocParsingError,
    Cell,
    InvalidOpCodeError,
    TonAddress,
    cell_to_buffer,
    cell_to_string,
)
from tonrelay.op_code import compare_op_code

OP_INTERCHAIN_TOKEN_DEPLOYMENT_STARTED_LOG = 0x00000107
OP_INTERCHAIN_TRANSFER_LOG = 0x00000110


def _check_op_code(expected: int, op_code: bytes) -> None:
    if not compare_op_code(expected, op_code):
        raise InvalidOpCodeError(f"Expected {expected:08X}, got {op_code.hex()}")


@dataclass(frozen=True)
class LogITSInterchainTokenDeploymentStartedMessage:
    """The start of an interchain token deployment to another chain."""

    destination_chain: str
    token_id: int
    token_name: str
    token_symbol: str
    decimals: int

    @classmethod
    def from_boc_b64(cls, boc: str) -> LogITSInterchainTokenDeploymentStartedMessage:
        """Decode a base64 bag of cells holding a deployment-started log."""
        parser = Cell.from_boc_b64(boc).parser()
        _check_op_code(OP_INTERCHAIN_TOKEN_DEPLOYMENT_STARTED_LOG, parser.load_bits(32))
        token_id = parser.load_uint(256)
        token_name = cell_to_string(parser.next_reference())
        token_symbol = cell_to_string(parser.next_reference())
        decimals = parser.load_uint(8)
        minter = parser.next_reference().parser()
        try:
            minter.load_address()
        except BocParsingError:
            pass
        destination_chain = cell_to_string(parser.next_reference())
        return cls(
            destination_chain=destination_chain,
            token_id=token_id,
            token_name=token_name,
            token_symbol=token_symbol,
            decimals=decimals,
        )


@dataclass(frozen=True)
class LogITSInterchainTransferMessage:
    """An interchain transfer of jettons to another chain."""

    token_id: int
    sender_address: TonAddress
    destination_chain: str
    destination_address: str
    jetton_amount: int
    data: bytes

    @classmethod
    def from_boc_b64(cls, boc: str) -> LogITSInterchainTransferMessage:
        """Decode a base64 bag of cells holding an interchain-transfer log."""
        parser = Cell.from_boc_b64(boc).parser()
        _check_op_code(OP_INTERCHAIN_TRANSFER_LOG, parser.load_bits(32))
        token_id = parser.load_uint(256)
        sender_hash = parser.next_reference().parser().load_uint(256)
        sender_address = TonAddress(0, sender_hash.to_bytes(32, "big"))
        destination_chain = cell_to_string(parser.next_reference())
        destination_address = "0x" + cell_to_buffer(parser.next_reference()).hex()
        jetton_amount = parser.load_uint(256)
        data = parser.next_reference().data
        return cls(
            token_id=token_id,
            sender_address=sender_address,
            destination_chain=destination_chain,
            destination_address=destination_address,
            jetton_amount=jetton_amount,
            data=data,
        )