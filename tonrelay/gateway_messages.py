"""Decoders for the gateway's call-contract and cross-chain message logs."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import (
    BocParsingError,
    Cell,
    TonAddress,
    cell_to_buffer,
    cell_to_string,
)

WORKCHAIN = 0


def _address_or_null(address: TonAddress | None) -> TonAddress:
    return address if address is not None else TonAddress(0, bytes(32))


@dataclass(frozen=True)
class CallContractMessage:
    """A contract call emitted by the gateway."""

    destination_chain: str
    destination_address: str
    payload: str
    source_address: TonAddress
    payload_hash: bytes

    @classmethod
    def from_boc_b64(cls, boc: str) -> CallContractMessage:
        """Decode a base64 bag of cells holding a call-contract log."""
        parser = Cell.from_boc_b64(boc).parser()
        destination_chain = cell_to_string(parser.next_reference())
        destination_address = cell_to_string(parser.next_reference())
        payload = cell_to_buffer(parser.next_reference()).hex()
        source_address = _address_or_null(parser.load_address())
        payload_hash = parser.load_bits(256)
        if len(payload_hash) != 32:
            raise BocParsingError("Invalid payload hash length")
        return cls(
            destination_chain=destination_chain,
            destination_address=destination_address,
            payload=payload,
            source_address=source_address,
            payload_hash=payload_hash,
        )


@dataclass(frozen=True)
class TonCCMessage:
    """A cross-chain message addressed to a TON contract."""

    message_id: str
    destination_address: str
    destination_chain: str
    source_address: str
    source_chain: str
    log_event: str
    payload_hash: bytes

    @classmethod
    def from_boc_b64(cls, boc: str) -> TonCCMessage:
        """Decode a base64 bag of cells holding a cross-chain message."""
        parser = Cell.from_boc_b64(boc).parser()
        message_id = cell_to_string(parser.next_reference())
        source_chain = cell_to_string(parser.next_reference())
        source_address = cell_to_string(parser.next_reference())
        inner = parser.next_reference().parser()
        payload_hash = inner.load_bits(256)
        if len(payload_hash) != 32:
            raise BocParsingError("Invalid payload hash length")
        hash_part = cell_to_buffer(inner.next_reference())
        if len(hash_part) != 32:
            raise BocParsingError("Invalid hash length")
        destination = TonAddress(WORKCHAIN, hash_part)
        destination_chain = cell_to_string(inner.next_reference())
        return cls(
            message_id=message_id,
            destination_address=destination.to_hex(),
            destination_chain=destination_chain,
            source_address=source_address,
            source_chain=source_chain,
            log_event="",
            payload_hash=payload_hash,
        )