"""Encoder for the gas service's native refund request."""

from __future__ import annotations

from dataclasses import dataclass

from tonrelay.cells import Cell, CellBuilder, TonAddress

OP_NATIVE_REFUND = 0x00000046


@dataclass(frozen=True)
class NativeRefundMessage:
    """A request to refund native gas paid for a transaction."""

    tx_hash: bytes
    address: TonAddress
    amount: int

    def to_cell(self) -> Cell:
        """Build the refund request body."""
        return (
            CellBuilder()
            .store_uint(32, OP_NATIVE_REFUND)
            .store_tonhash(self.tx_hash)
            .store_address(self.address)
            .store_coins(self.amount)
            .build()
        )