"""Decoders for the gas service's jetton gas logs: paid and added."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import BocParsingError, Cell, CellParser, TonAddress, cell_to_string

_HASH_BITS = 256


def _load_address(parser: CellParser) -> TonAddress:
    address = parser.load_address()
    return address if address is not None else TonAddress(0, bytes(32))


def _load_hash(parser: CellParser, what: str) -> bytes:
    value = parser.load_bits(_HASH_BITS)
    if len(value) != 32:
        raise BocParsingError(f"Invalid {what} length")
    return value


@dataclass(frozen=True)
class JettonGasAddedMessage:
    """Jetton gas added to an already sent message."""

    minter: TonAddress
    sender: TonAddress
    tx_hash: bytes
    amount: int
    refund_address: TonAddress

    @classmethod
    def from_boc_b64(cls, boc: str) -> JettonGasAddedMessage:
        """Decode a base64 bag of cells holding a jetton-gas-added log."""
        parser = Cell.from_boc_b64(boc).parser()
        minter = _load_address(parser)
        sender = _load_address(parser)
        amount = parser.load_coins()
        tx_hash = _load_hash(parser, "tx_hash hash")
        refund_address = _load_address(parser.next_reference().parser())
        return cls(
            minter=minter,
            sender=sender,
            tx_hash=tx_hash,
            amount=amount,
            refund_address=refund_address,
        )


@dataclass(frozen=True)
class JettonGasPaidMessage:
    """Jetton gas paid for a contract call."""

    minter: TonAddress
    payload_hash: bytes
    amount: int
    refund_address: TonAddress
    destination_chain: str
    destination_address: str

    @classmethod
    def from_boc_b64(cls, boc: str) -> JettonGasPaidMessage:
        """Decode a base64 bag of cells holding a jetton-gas-paid log."""
        parser = Cell.from_boc_b64(boc).parser()
        minter = _load_address(parser)
        amount = parser.load_coins()
        payload_hash = _load_hash(parser, "payload hash")
        refund_address = _load_address(parser.next_reference().parser())
        destination_chain = cell_to_string(parser.next_reference())
        destination_address = cell_to_string(parser.next_reference())
        return cls(
            minter=minter,
            payload_hash=payload_hash,
            amount=amount,
            refund_address=refund_address,
            destination_chain=destination_chain,
            destination_address=destination_address,
        )