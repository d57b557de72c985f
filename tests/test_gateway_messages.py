import pytest

from tonrelay.cells import BocParsingError, CellBuilder, TonAddress, buffer_to_cell
from tonrelay.gateway_messages import CallContractMessage, TonCCMessage

CALL_CONTRACT_B64 = "te6cckEBBAEA5QADg4AcPMZ9bgNiMWiFLuLZ3ODT3Qj2rbcRiS/f1NA9opZaWPXUykhs4AH2lBVEFjqex7VaPbPTvuLH5GEs5sIeXm+pcAECAwAcYXZhbGFuY2hlLWZ1amkAVDB4ZDcwNjdBZTNDMzU5ZTgzNzg5MGIyOEI3QkQwZDIwODRDZkRmNDliNQDAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAACAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAE0hlbGxvIGZyb20gUmVsYXllciEAAAAAAAAAAAAAAAAAne0F4Q=="

CC_MESSAGE_B64 = "te6cckEBBwEA1AAEAAECAwQAiDB4ZjM4ZDJhNjQ2ZTRiNjBlMzdiYzE2ZDU0YmI5MTYzNzM5MzcyNTk0ZGM5NmJhYjk1NGE4NWI0YTE3MGY0OWU1OC0xABxhdmFsYW5jaGUtZnVqaQBUMHhkNzA2N0FlM0MzNTllODM3ODkwYjI4QjdCRDBkMjA4NENmRGY0OWI1AkCeAcQjykQMXsK+7MnQoVK1T8jnpBbJMbcInq8iFgWvFwUGAEC4ekoPZEt6GG7nGhRUY09wwipirKGmumdrUXXCHX/ZMAAIdG9uMs9py6Y="


def _text_cell(text: str):
    return buffer_to_cell(text.encode())


def test_call_contract_from_boc_b64():
    res = CallContractMessage.from_boc_b64(CALL_CONTRACT_B64)
    assert res.destination_chain == "avalanche-fuji"
    assert res.destination_address == "0xd7067Ae3C359e837890b28B7BD0d2084CfDf49b5"
    assert res.source_address == TonAddress.parse(
        "EQDh5jPrcBsRi0QpdxbO5wae6Ee1bbiMSX7-poHtFLLSxyuC"
    )
    assert res.payload == (
        "0000000000000000000000000000000000000000000000000000000000000020"
        "0000000000000000000000000000000000000000000000000000000000000013"
        "48656c6c6f2066726f6d2052656c617965722100000000000000000000000000"
    )
    assert res.payload_hash.hex() == (
        "aea6524367000fb4a0aa20b1d4f63daad1ed9e9df7163f2309673610f2f37d4b"
    )


def test_call_contract_hand_built():
    source = TonAddress(0, bytes(range(32)))
    digest = bytes([0xAB]) * 32
    root = (
        CellBuilder()
        .store_reference(_text_cell("chain-b"))
        .store_reference(_text_cell("0xdead"))
        .store_reference(buffer_to_cell(b"\x00\x01\xff"))
        .store_address(source)
        .store_bits(256, digest)
        .build()
    )
    res = CallContractMessage.from_boc_b64(root.to_boc_b64())
    assert res.destination_chain == "chain-b"
    assert res.destination_address == "0xdead"
    assert res.payload == "0001ff"
    assert res.source_address == source
    assert res.payload_hash == digest


def test_call_contract_missing_references():
    root = CellBuilder().store_reference(_text_cell("only")).build()
    with pytest.raises(BocParsingError):
        CallContractMessage.from_boc_b64(root.to_boc_b64())


def test_ton_log():
    log = TonCCMessage.from_boc_b64(CC_MESSAGE_B64)
    assert log.message_id == "0xf38d2a646e4b60e37bc16d54bb9163739372594dc96bab954a85b4a170f49e58-1"
    assert log.source_chain == "avalanche-fuji"
    assert log.source_address == "0xd7067Ae3C359e837890b28B7BD0d2084CfDf49b5"
    assert log.destination_chain == "ton2"
    assert log.destination_address == (
        "0:b87a4a0f644b7a186ee71a1454634f70c22a62aca1a6ba676b5175c21d7fd930"
    )
    assert log.log_event == ""
    assert log.payload_hash.hex() == (
        "9e01c423ca440c5ec2beecc9d0a152b54fc8e7a416c931b7089eaf221605af17"
    )


def test_ton_log_invalid_boc():
    with pytest.raises(BocParsingError):
        TonCCMessage.from_boc_b64("this_is_not_a_valid_boc_string")


def _cc_cell(destination: bytes):
    inner = (
        CellBuilder()
        .store_bits(256, bytes([0x11]) * 32)
        .store_reference(buffer_to_cell(destination))
        .store_reference(_text_cell("ton2"))
        .build()
    )
    return (
        CellBuilder()
        .store_reference(_text_cell("msg-9"))
        .store_reference(_text_cell("chain-c"))
        .store_reference(_text_cell("0xsender"))
        .store_reference(inner)
        .build()
    )


def test_ton_log_hand_built():
    destination = bytes([0xCD]) * 32
    log = TonCCMessage.from_boc_b64(_cc_cell(destination).to_boc_b64())
    assert log.message_id == "msg-9"
    assert log.source_chain == "chain-c"
    assert log.source_address == "0xsender"
    assert log.destination_chain == "ton2"
    assert log.destination_address == "0:" + "cd" * 32
    assert log.payload_hash == bytes([0x11]) * 32


def test_ton_log_destination_wrong_length():
    with pytest.raises(BocParsingError, match="Invalid hash length"):
        TonCCMessage.from_boc_b64(_cc_cell(bytes(20)).to_boc_b64())