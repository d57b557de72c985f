"""Decoders for the gas service's native gas logs: paid, added and refunded."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import Cell, CellParser, TonAddress, cell_to_string

_HASH_BITS = 256


def _load_address(parser: CellParser) -> TonAddress:
    address = parser.load_address()
    return address if address is not None else TonAddress(0, bytes(32))


@dataclass(frozen=True)
class NativeGasAddedMessage:
    """Native gas added to an already sent message."""

    tx_hash: bytes
    refund_address: TonAddress
    msg_value: int

    @classmethod
    def from_boc_b64(cls, boc: str) -> NativeGasAddedMessage:
        """Decode a base64 bag of cells holding a native-gas-added log."""
        parser = Cell.from_boc_b64(boc).parser()
        tx_hash = parser.load_bits(_HASH_BITS)
        refund_address = _load_address(parser)
        msg_value = int.from_bytes(parser.load_bits(_HASH_BITS), "big")
        return cls(tx_hash=tx_hash, refund_address=refund_address, msg_value=msg_value)


@dataclass(frozen=True)
class NativeGasPaidMessage:
    """Native gas paid for a contract call."""

    sender: TonAddress
    payload_hash: bytes
    msg_value: int
    refund_address: TonAddress
    destination_chain: str
    destination_address: str

    @classmethod
    def from_boc_b64(cls, boc: str) -> NativeGasPaidMessage:
        """Decode a base64 bag of cells holding a native-gas-paid log."""
        parser = Cell.from_boc_b64(boc).parser()
        sender = _load_address(parser)
        payload_hash = parser.load_bits(_HASH_BITS)
        msg_value = int.from_bytes(parser.load_bits(_HASH_BITS), "big")
        refund_address = _load_address(parser.next_reference().parser())
        destination_chain = cell_to_string(parser.next_reference())
        destination_address = cell_to_string(parser.next_reference())
        return cls(
            sender=sender,
            payload_hash=payload_hash,
            msg_value=msg_value,
            refund_address=refund_address,
            destination_chain=destination_chain,
            destination_address=destination_address,
        )


@dataclass(frozen=True)
class NativeGasRefundedMessage:
    """Native gas refunded to an address."""

    tx_hash: bytes
    address: TonAddress
    amount: int

    @classmethod
    def from_boc_b64(cls, boc: str) -> NativeGasRefundedMessage:
        """Decode a base64 bag of cells holding a native-gas-refunded log."""
        parser = Cell.from_boc_b64(boc).parser()
        tx_hash = parser.load_tonhash()
        address = _load_address(parser)
        amount = parser.load_coins()
        return cls(tx_hash=tx_hash, address=address, amount=amount)