# tonrelay

Pure-Python tools for reading and writing TON bag-of-cells (BoC) payloads
used by a cross-chain relayer: gateway approvals, contract calls, gas
service logs, interchain token service logs and refund requests. It also
has a small account health checker. It has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Cells

`tonrelay.cells` provides `Cell`, `CellBuilder`, `CellParser` and
`TonAddress`, with BoC serialisation to raw bytes, base64 and hex.

```python
from tonrelay.cells import Cell, CellBuilder, buffer_to_cell, cell_to_buffer, cell_to_string

builder = CellBuilder()
for byte in b"Hello":
    builder.store_byte(byte)
cell = builder.build()

assert cell_to_string(cell) == "Hello"

boc = cell.to_boc_b64(True)
assert Cell.from_boc_b64(boc) == cell          # cells compare by their hash

chain = buffer_to_cell(b"x" * 300)             # a chain of cells, 96 bytes each
assert cell_to_buffer(chain) == b"x" * 300
```

- `Cell.from_boc`, `from_boc_b64` and `from_boc_hex` decode a bag of cells
  and return its first root; `to_boc`, `to_boc_b64` and `to_boc_hex`
  encode one, with a CRC32-C trailer when `has_crc` is true.
  `Cell.hash()` is the cell's representation hash.
- `CellBuilder` stores bits, unsigned integers, bytes, 32-byte hashes,
  standard addresses, coin amounts and up to four references; its store
  methods return the builder, so calls can be chained.
- `CellParser` (from `cell.parser()`) loads the same values back, plus
  signed integers, and `load_dict(key_bits)` reads a dictionary into a
  `dict` mapping each integer key to a parser positioned at its value.
- `TonAddress.parse` accepts the raw `workchain:hex` form and the 48-character
  user-friendly base64 form (checksum verified). `to_hex()` gives the raw form;
  `to_base64_url()` and `str()` give the bounceable base64url form.

Failures raise `BocParsingError`, `BocEncodingError` or
`InvalidOpCodeError`, all subclasses of `BocError`.

`tonrelay.op_code.compare_op_code(expected, op_code)` is true when
`op_code` is exactly four big-endian bytes equal to `expected`.

## Decoding relayer messages

Each message type is a frozen dataclass with a `from_boc_b64` class method,
except `ApproveMessages`, which has `from_boc_hex`:

```python
from tonrelay.approve_message import ApproveMessages
from tonrelay.gateway_messages import CallContractMessage

msg = CallContractMessage.from_boc_b64(boc_b64)
print(msg.destination_chain, msg.destination_address, msg.payload)

approvals = ApproveMessages.from_boc_hex(boc_hex)
for approval in approvals.approve_messages:
    print(approval.message_id, approval.source_chain)
```

Available decoders:

- `tonrelay.gateway_messages`: `CallContractMessage`, `TonCCMessage`
- `tonrelay.approve_message`: `ApproveMessages` (with its `proof` cell),
  `ApproveMessage`
- `tonrelay.nullified_message`: `NullifiedSuccessfullyMessage`
- `tonrelay.native_gas`: `NativeGasAddedMessage`, `NativeGasPaidMessage`,
  `NativeGasRefundedMessage`
- `tonrelay.jetton_gas`: `JettonGasAddedMessage`, `JettonGasPaidMessage`
- `tonrelay.its_transfers`: `LogITSInterchainTokenDeploymentStartedMessage`,
  `LogITSInterchainTransferMessage`
- `tonrelay.its_tokens`: `LogITSLinkTokenStartedMessage`,
  `LogTokenMetadataRegisteredMessage`, `TokenManagerType`
- `tonrelay.signers_rotated`: `LogSignersRotatedMessage`

Messages that start with an op code raise `InvalidOpCodeError` when it does
not match. Hashes are returned as `bytes`, amounts and token ids as `int`.

## Encoding a refund

```python
from tonrelay.cells import TonAddress
from tonrelay.native_refund import NativeRefundMessage

message = NativeRefundMessage(tx_hash, TonAddress.parse(address_text), 4_900_000_000)
boc = message.to_cell().to_boc_b64(True)
```

`tx_hash` is the 32-byte hash of the transaction whose gas is refunded.

## Checking accounts

```python
from tonrelay.check_accounts import AccountCheckStatus, AccountState, check_account_status

check = check_account_status(account_state, min_balance=500)
if check.status is AccountCheckStatus.INSUFFICIENT_BALANCE:
    print(check.balance, check.required)
```

`check_account_status` returns an `AccountCheck` whose `status` is one of
`VALID`, `INACTIVE`, `INSUFFICIENT_BALANCE` or `INVALID_BALANCE_FORMAT`
(a balance that is not an unsigned 64-bit decimal number).

`check_accounts(client, addresses, min_balance, forever)` is a coroutine
that awaits `client.get_account_states(addresses)` and logs, through the
standard `logging` module, whether each account is active and funded. A
failed fetch is logged and does not stop it. With `forever=True` it checks
again every 45 seconds.

## What this package does not do

It has no client for a TON node API: `check_accounts` works with any object
you pass that has an async `get_account_states` method returning
`AccountState` values. It does not sign or send transactions, manage
wallets, or run relayer services, and it installs no commands.