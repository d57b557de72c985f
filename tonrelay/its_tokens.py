"""Decoders for the token service's link-token-started and metadata-registered logs."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from tonrelay.cells import (
    BocParsingError,
    Cell,
    CellParser,
    InvalidOpCodeError,
    TonAddress,
    cell_to_buffer,
    cell_to_string,
)
from tonrelay.op_code import compare_op_code

OP_TOKEN_METADATA_REGISTERED_LOG = 0x00000104
OP_LINK_TOKEN_STARTED_LOG = 0x00000105


class TokenManagerType(enum.IntEnum):
    """Kinds of token manager, by their on-chain code."""

    NATIVE_INTERCHAIN_TOKEN = 0
    MINT_BURN_FROM = 1
    LOCK_UNLOCK = 2
    LOCK_UNLOCK_FEE = 3
    MINT_BURN = 4


def _check_op_code(expected: int, op_code: bytes) -> None:
    if not compare_op_code(expected, op_code):
        raise InvalidOpCodeError(f"Expected {expected:08X}, got {op_code.hex()}")


def _load_address(parser: CellParser) -> TonAddress:
    address = parser.load_address()
    return address if address is not None else TonAddress(0, bytes(32))


@dataclass(frozen=True)
class LogITSLinkTokenStartedMessage:
    """The start of linking a local token to a token on another chain."""

    token_id: int
    destination_chain: str
    source_token_address: TonAddress
    destination_token_address: str
    token_manager_type: TokenManagerType

    @classmethod
    def from_boc_b64(cls, boc: str) -> LogITSLinkTokenStartedMessage:
        """Decode a base64 bag of cells holding a link-token-started log."""
        parser = Cell.from_boc_b64(boc).parser()
        _check_op_code(OP_LINK_TOKEN_STARTED_LOG, parser.load_bits(32))
        token_id = parser.load_uint(256)
        destination_chain = cell_to_string(parser.next_reference())
        source_hash = parser.next_reference().parser().load_uint(256)
        source_token_address = TonAddress(0, source_hash.to_bytes(32, "big"))
        destination_token_address = "0x" + cell_to_buffer(parser.next_reference()).hex()
        raw_type = parser.load_uint(8)
        try:
            token_manager_type = TokenManagerType(raw_type)
        except ValueError as exc:
            raise BocParsingError(f"Invalid token manager type {raw_type}") from exc
        return cls(
            token_id=token_id,
            destination_chain=destination_chain,
            source_token_address=source_token_address,
            destination_token_address=destination_token_address,
            token_manager_type=token_manager_type,
        )


@dataclass(frozen=True)
class LogTokenMetadataRegisteredMessage:
    """Metadata registered for a token contract."""

    address: TonAddress
    decimals: int

    @classmethod
    def from_boc_b64(cls, boc: str) -> LogTokenMetadataRegisteredMessage:
        """Decode a base64 bag of cells holding a token-metadata-registered log."""
        parser = Cell.from_boc_b64(boc).parser()
        _check_op_code(OP_TOKEN_METADATA_REGISTERED_LOG, parser.load_bits(32))
        address = _load_address(parser)
        decimals = parser.load_int(8) & 0xFF
        return cls(address=address, decimals=decimals)