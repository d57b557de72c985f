import pytest

from tonrelay.cells import BocParsingError, CellBuilder, TonAddress
from tonrelay.native_gas import (
    NativeGasAddedMessage,
    NativeGasPaidMessage,
    NativeGasRefundedMessage,
)

REFUND_ADDRESS = "EQDh5jPrcBsRi0QpdxbO5wae6Ee1bbiMSX7-poHtFLLSxyuC"


def test_native_gas_added_from_boc_b64():
    boc = "te6cckEBAQEAZAAAww5vdZ9o7blyzBxaworkSgJlZ8OdCmfXHekJeKEhBqa6gBw8xn1uA2IxaIUu4tnc4NPdCPattxGJL9/U0D2illpY4AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAI68SIQfPwIyg=="
    res = NativeGasAddedMessage.from_boc_b64(boc)
    assert res.tx_hash == bytes.fromhex(
        "0e6f759f68edb972cc1c5ac28ae44a026567c39d0a67d71de90978a12106a6ba"
    )
    assert res.refund_address == TonAddress.parse(
        "0:e1e633eb701b118b44297716cee7069ee847b56db88c497efea681ed14b2d2c7"
    )
    assert res.msg_value == 299338000


def test_native_gas_added_round_trip():
    address = TonAddress.parse(REFUND_ADDRESS)
    tx_hash = bytes(range(32))
    cell = (
        CellBuilder()
        .store_tonhash(tx_hash)
        .store_address(address)
        .store_uint(256, 123456789)
        .build()
    )
    res = NativeGasAddedMessage.from_boc_b64(cell.to_boc_b64(True))
    assert res.tx_hash == tx_hash
    assert res.refund_address == address
    assert res.msg_value == 123456789


def test_native_gas_paid_from_boc_b64():
    res = NativeGasPaidMessage.from_boc_b64(
        "te6cckEBBAEAxwADw4AcPMZ9bgNiMWiFLuLZ3ODT3Qj2rbcRiS/f1NA9opZaWPXUykhs4AH2lBVEFjqex7VaPbPTvuLH5GEs5sIeXm+pYAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA3BVoQAQIDAEOAHDzGfW4DYjFohS7i2dzg090I9q23EYkv39TQPaKWWljwABxhdmFsYW5jaGUtZnVqaQBUMHhkNzA2N0FlM0MzNTllODM3ODkwYjI4QjdCRDBkMjA4NENmRGY0OWI1+B8bUw=="
    )
    assert "0x" + res.payload_hash.hex() == (
        "0xaea6524367000fb4a0aa20b1d4f63daad1ed9e9df7163f2309673610f2f37d4b"
    )
    assert res.refund_address == TonAddress.from_base64_url(REFUND_ADDRESS)
    assert res.sender == TonAddress.from_base64_url(REFUND_ADDRESS)
    assert res.destination_chain == "avalanche-fuji"
    assert res.destination_address == "0xd7067Ae3C359e837890b28B7BD0d2084CfDf49b5"


def test_native_gas_paid_missing_reference():
    address = TonAddress.parse(REFUND_ADDRESS)
    cell = (
        CellBuilder()
        .store_address(address)
        .store_bits(256, bytes(32))
        .store_uint(256, 5)
        .build()
    )
    with pytest.raises(BocParsingError):
        NativeGasPaidMessage.from_boc_b64(cell.to_boc_b64(True))


def test_native_gas_refunded_from_boc_b64():
    res = NativeGasRefundedMessage.from_boc_b64(
        "te6cckEBAQEASAAAi+sGXZ2TA0nQZDuUbZYexgD4DV5fMKsB328TYkPuUDXCgBw8xn1uA2IxaIUu4tnc4NPdCPattxGJL9/U0D2illpY6B/RX5+w1u5M"
    )
    assert res.address == TonAddress.parse(REFUND_ADDRESS)
    assert res.amount == 266907599
    assert res.tx_hash == bytes.fromhex(
        "eb065d9d930349d0643b946d961ec600f80d5e5f30ab01df6f136243ee5035c2"
    )


def test_native_gas_refunded_round_trip():
    address = TonAddress.parse(REFUND_ADDRESS)
    tx_hash = bytes([7]) * 32
    cell = (
        CellBuilder()
        .store_tonhash(tx_hash)
        .store_address(address)
        .store_coins(4900000000)
        .build()
    )
    res = NativeGasRefundedMessage.from_boc_b64(cell.to_boc_b64(True))
    assert (res.tx_hash, res.address, res.amount) == (tx_hash, address, 4900000000)


def test_native_gas_refunded_invalid_boc():
    with pytest.raises(BocParsingError):
        NativeGasRefundedMessage.from_boc_b64("this_is_not_a_valid_boc_string")