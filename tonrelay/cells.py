"""TON cells, bags of cells, addresses and helpers for byte chains stored in cells."""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable

BYTES_PER_CELL = 96
MAX_CELL_BITS = 1023
MAX_CELL_REFS = 4

_BOC_MAGIC = b"\xb5\xee\x9c\x72"
_BOC_MAGIC_IDX = b"\x68\xff\x65\xf3"
_BOC_MAGIC_IDX_CRC = b"\xac\xc3\xa7\x28"


class BocError(Exception):
    """Base error for cell and bag-of-cells handling."""


class BocParsingError(BocError):
    """Raised when data cannot be decoded."""


class BocEncodingError(BocError):
    """Raised when data cannot be encoded."""


class InvalidOpCodeError(BocError):
    """Raised when a message carries an unexpected op code."""


def _crc32c(data: bytes) -> int:
    crc = 0xFFFFFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0x82F63B78 if crc & 1 else crc >> 1
    return crc ^ 0xFFFFFFFF


def _crc16(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) & 0xFFFF if crc & 0x8000 else (crc << 1) & 0xFFFF
    return crc


@dataclass(frozen=True)
class TonAddress:
    """A standard TON address: workchain and 32-byte account hash."""

    workchain: int
    hash_part: bytes

    def __post_init__(self) -> None:
        if len(self.hash_part) != 32:
            raise BocParsingError(f"Invalid address hash length: {len(self.hash_part)}")

    @classmethod
    def parse(cls, text: str) -> TonAddress:
        """Parse a raw ``wc:hex`` or user-friendly base64 address."""
        if ":" in text:
            return cls.from_hex_str(text)
        return cls.from_base64_url(text)

    @classmethod
    def from_hex_str(cls, text: str) -> TonAddress:
        wc_text, sep, hex_text = text.partition(":")
        if not sep:
            raise BocParsingError(f"Invalid raw address: {text!r}")
        try:
            workchain = int(wc_text)
        except ValueError as exc:
            raise BocParsingError(f"Invalid workchain in address: {text!r}") from exc
        if len(hex_text) > 64:
            raise BocParsingError(f"Invalid address hash: {text!r}")
        try:
            hash_part = bytes.fromhex(hex_text.rjust(64, "0"))
        except ValueError as exc:
            raise BocParsingError(f"Invalid address hash: {text!r}") from exc
        return cls(workchain, hash_part)

    @classmethod
    def from_base64_url(cls, text: str) -> TonAddress:
        if len(text) != 48:
            raise BocParsingError(f"Invalid base64 address length: {text!r}")
        normalized = text.replace("-", "+").replace("_", "/")
        try:
            raw = base64.b64decode(normalized, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise BocParsingError(f"Invalid base64 address: {text!r}") from exc
        if len(raw) != 36:
            raise BocParsingError(f"Invalid base64 address: {text!r}")
        if _crc16(raw[:34]).to_bytes(2, "big") != raw[34:]:
            raise BocParsingError(f"Invalid address checksum: {text!r}")
        if raw[0] & 0x7F not in (0x11, 0x51):
            raise BocParsingError(f"Invalid address tag: {text!r}")
        workchain = int.from_bytes(raw[1:2], "big", signed=True)
        return cls(workchain, raw[2:34])

    def to_hex(self) -> str:
        return f"{self.workchain}:{self.hash_part.hex()}"

    def to_base64_url(self) -> str:
        body = bytes([0x11]) + (self.workchain & 0xFF).to_bytes(1, "big") + self.hash_part
        raw = body + _crc16(body).to_bytes(2, "big")
        return base64.urlsafe_b64encode(raw).decode("ascii")

    def __str__(self) -> str:
        return self.to_base64_url()


@dataclass(frozen=True, eq=False)
class Cell:
    """An ordinary (or exotic) cell: up to 1023 data bits and up to four references."""

    data: bytes = b""
    bit_len: int = 0
    refs: tuple[Cell, ...] = field(default_factory=tuple)
    exotic: bool = False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Cell) and self.hash() == other.hash()

    def __hash__(self) -> int:
        return hash(self.hash())

    def _descriptors(self) -> bytes:
        d1 = len(self.refs) + (8 if self.exotic else 0)
        d2 = self.bit_len // 8 + (self.bit_len + 7) // 8
        return bytes([d1, d2])

    def _padded_data(self) -> bytes:
        size = (self.bit_len + 7) // 8
        data = bytearray(self.data[:size])
        rem = self.bit_len % 8
        if rem:
            mask = (0xFF << (8 - rem)) & 0xFF
            data[-1] = (data[-1] & mask) | (1 << (7 - rem))
        return bytes(data)

    @cached_property
    def depth(self) -> int:
        return 1 + max(ref.depth for ref in self.refs) if self.refs else 0

    @cached_property
    def _hash(self) -> bytes:
        parts = [self._descriptors(), self._padded_data()]
        parts.extend(ref.depth.to_bytes(2, "big") for ref in self.refs)
        parts.extend(ref.hash() for ref in self.refs)
        return hashlib.sha256(b"".join(parts)).digest()

    def hash(self) -> bytes:
        """The representation hash of the cell."""
        return self._hash

    def parser(self) -> CellParser:
        return CellParser(self)

    @classmethod
    def from_boc(cls, data: bytes) -> Cell:
        """Decode a bag of cells and return its first root."""
        return _deserialize_boc(bytes(data))

    @classmethod
    def from_boc_b64(cls, text: str) -> Cell:
        try:
            data = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise BocParsingError(f"Invalid base64 BoC: {exc}") from exc
        return cls.from_boc(data)

    @classmethod
    def from_boc_hex(cls, text: str) -> Cell:
        try:
            data = bytes.fromhex(text)
        except ValueError as exc:
            raise BocParsingError(f"Invalid hex BoC: {exc}") from exc
        return cls.from_boc(data)

    def to_boc(self, has_crc: bool = True) -> bytes:
        return _serialize_boc(self, has_crc)

    def to_boc_b64(self, has_crc: bool = True) -> str:
        return base64.b64encode(self.to_boc(has_crc)).decode("ascii")

    def to_boc_hex(self, has_crc: bool = True) -> str:
        return self.to_boc(has_crc).hex()


def _order_cells(root: Cell) -> list[Cell]:
    order: list[Cell] = []
    seen: set[bytes] = set()
    queue = [root]
    while queue:
        cell = queue.pop(0)
        if cell.hash() in seen:
            continue
        seen.add(cell.hash())
        order.append(cell)
        queue.extend(cell.refs)
    changed = True
    while changed:
        changed = False
        index = {cell.hash(): i for i, cell in enumerate(order)}
        for i, cell in enumerate(order):
            late = [ref for ref in cell.refs if index[ref.hash()] < i]
            if late:
                moved = {ref.hash() for ref in late}
                order = [c for c in order if c.hash() not in moved] + late
                changed = True
                break
    return order


def _serialize_boc(root: Cell, has_crc: bool) -> bytes:
    cells = _order_cells(root)
    index = {cell.hash(): i for i, cell in enumerate(cells)}
    size_bytes = max(1, (len(cells).bit_length() + 7) // 8)
    body = bytearray()
    for cell in cells:
        body += cell._descriptors() + cell._padded_data()
        for ref in cell.refs:
            body += index[ref.hash()].to_bytes(size_bytes, "big")
    off_bytes = max(1, (len(body).bit_length() + 7) // 8)
    header = bytearray(_BOC_MAGIC)
    header.append((0x40 if has_crc else 0) | size_bytes)
    header.append(off_bytes)
    header += len(cells).to_bytes(size_bytes, "big")
    header += (1).to_bytes(size_bytes, "big")
    header += (0).to_bytes(size_bytes, "big")
    header += len(body).to_bytes(off_bytes, "big")
    header += (0).to_bytes(size_bytes, "big")
    result = bytes(header + body)
    if has_crc:
        result += _crc32c(result).to_bytes(4, "little")
    return result


def _deserialize_boc(data: bytes) -> Cell:
    try:
        return _read_boc(data)
    except IndexError as exc:
        raise BocParsingError("BoC deserialization error: unexpected end of data") from exc


def _read_boc(data: bytes) -> Cell:
    if len(data) < 6:
        raise BocParsingError("BoC deserialization error: data too short")
    magic = data[:4]
    if magic == _BOC_MAGIC:
        flags = data[4]
        has_idx, has_crc = bool(flags & 0x80), bool(flags & 0x40)
        size_bytes = flags & 0x07
    elif magic in (_BOC_MAGIC_IDX, _BOC_MAGIC_IDX_CRC):
        has_idx, has_crc = True, magic == _BOC_MAGIC_IDX_CRC
        size_bytes = data[4]
    else:
        raise BocParsingError(
            "BoC deserialization error: Unsupported cell magic number: "
            f"{int.from_bytes(magic, 'big')}"
        )
    if has_crc:
        if _crc32c(data[:-4]).to_bytes(4, "little") != data[-4:]:
            raise BocParsingError("BoC deserialization error: CRC mismatch")
        data = data[:-4]
    if not 1 <= size_bytes <= 4:
        raise BocParsingError(f"BoC deserialization error: invalid size bytes {size_bytes}")
    off_bytes = data[5]
    pos = 6

    def read(n: int) -> int:
        nonlocal pos
        chunk = data[pos:pos + n]
        if len(chunk) != n:
            raise BocParsingError("BoC deserialization error: unexpected end of data")
        pos += n
        return int.from_bytes(chunk, "big")

    cell_count = read(size_bytes)
    root_count = read(size_bytes)
    read(size_bytes)
    read(off_bytes)
    roots = [read(size_bytes) for _ in range(root_count)] if magic == _BOC_MAGIC else [0]
    if has_idx:
        pos += cell_count * off_bytes

    raw: list[tuple[bytes, int, list[int], bool]] = []
    for _ in range(cell_count):
        d1, d2 = read(1), read(1)
        ref_count = d1 & 7
        if ref_count > MAX_CELL_REFS:
            raise BocParsingError("BoC deserialization error: too many references")
        if d1 & 16:
            level = d1 >> 5
            pos += (bin(level).count("1") + 1) * 34
        size = (d2 + 1) // 2
        payload = data[pos:pos + size]
        if len(payload) != size:
            raise BocParsingError("BoC deserialization error: unexpected end of data")
        pos += size
        bit_len = size * 8
        if d2 % 2:
            last = payload[-1]
            if last == 0:
                raise BocParsingError("BoC deserialization error: bad padding")
            trailing = (last & -last).bit_length()
            bit_len -= trailing
        refs = [read(size_bytes) for _ in range(ref_count)]
        raw.append((payload, bit_len, refs, bool(d1 & 8)))

    built: list[Cell | None] = [None] * cell_count
    for i in range(cell_count - 1, -1, -1):
        payload, bit_len, refs, exotic = raw[i]
        children = []
        for r in refs:
            if r <= i or r >= cell_count or built[r] is None:
                raise BocParsingError("BoC deserialization error: bad reference index")
            children.append(built[r])
        built[i] = Cell(_trim(payload, bit_len), bit_len, tuple(children), exotic)
    if not roots or roots[0] >= cell_count:
        raise BocParsingError("BoC deserialization error: missing root")
    return built[roots[0]]  # type: ignore[return-value]


def _trim(payload: bytes, bit_len: int) -> bytes:
    size = (bit_len + 7) // 8
    data = bytearray(payload[:size])
    rem = bit_len % 8
    if rem:
        data[-1] &= (0xFF << (8 - rem)) & 0xFF
    return bytes(data)


class CellBuilder:
    """Accumulates bits and references into a new cell."""

    def __init__(self) -> None:
        self._value = 0
        self._bits = 0
        self._refs: list[Cell] = []

    def _push(self, bits: int, value: int) -> CellBuilder:
        if bits < 0 or value < 0 or value >= 1 << bits:
            raise BocEncodingError(f"Value {value} does not fit in {bits} bits")
        if self._bits + bits > MAX_CELL_BITS:
            raise BocEncodingError("Cell data overflow")
        self._value = (self._value << bits) | value
        self._bits += bits
        return self

    def store_bits(self, bits: int, data: bytes) -> CellBuilder:
        """Store the first ``bits`` bits of ``data``."""
        if bits > len(data) * 8:
            raise BocEncodingError("Not enough data for the requested bit count")
        value = int.from_bytes(data, "big") >> (len(data) * 8 - bits) if bits else 0
        return self._push(bits, value)

    def store_uint(self, bits: int, value: int) -> CellBuilder:
        return self._push(bits, value)

    def store_byte(self, value: int) -> CellBuilder:
        return self._push(8, value)

    def store_tonhash(self, value: bytes) -> CellBuilder:
        if len(value) != 32:
            raise BocEncodingError("Hash must be 32 bytes")
        return self.store_bits(256, value)

    def store_address(self, address: TonAddress | None) -> CellBuilder:
        if address is None:
            return self._push(2, 0)
        self._push(2, 0b10)
        self._push(1, 0)
        self._push(8, address.workchain & 0xFF)
        return self.store_bits(256, address.hash_part)

    def store_coins(self, amount: int) -> CellBuilder:
        if amount < 0:
            raise BocEncodingError("Coins cannot be negative")
        size = (amount.bit_length() + 7) // 8
        if size > 15:
            raise BocEncodingError("Coins value too large")
        self._push(4, size)
        return self._push(size * 8, amount)

    def store_reference(self, cell: Cell) -> CellBuilder:
        if len(self._refs) >= MAX_CELL_REFS:
            raise BocEncodingError("Too many references")
        self._refs.append(cell)
        return self

    def build(self) -> Cell:
        size = (self._bits + 7) // 8
        value = self._value << (size * 8 - self._bits)
        return Cell(value.to_bytes(size, "big"), self._bits, tuple(self._refs))


class CellParser:
    """Reads bits and references from a cell, front to back."""

    def __init__(self, cell: Cell) -> None:
        self.cell = cell
        self._value = int.from_bytes(cell.data, "big") >> (len(cell.data) * 8 - cell.bit_len)
        self._pos = 0
        self._ref_pos = 0

    def remaining_bits(self) -> int:
        return self.cell.bit_len - self._pos

    def _take(self, bits: int) -> int:
        if bits < 0 or bits > self.remaining_bits():
            raise BocParsingError(
                f"Not enough bits: requested {bits}, remaining {self.remaining_bits()}"
            )
        shift = self.cell.bit_len - self._pos - bits
        self._pos += bits
        return (self._value >> shift) & ((1 << bits) - 1)

    def load_bits(self, bits: int) -> bytes:
        """Load ``bits`` bits, left-aligned in the returned bytes."""
        value = self._take(bits)
        size = (bits + 7) // 8
        return (value << (size * 8 - bits)).to_bytes(size, "big")

    def load_uint(self, bits: int) -> int:
        return self._take(bits)

    def load_int(self, bits: int) -> int:
        value = self._take(bits)
        if bits and value >> (bits - 1):
            value -= 1 << bits
        return value

    def load_address(self) -> TonAddress | None:
        tag = self._take(2)
        if tag == 0:
            return None
        if tag == 0b01:
            self._take(self._take(9))
            return None
        if tag == 0b11:
            raise BocParsingError("Variable-length internal addresses are not supported")
        if self._take(1):
            self._take(self._take(5))
        workchain = self.load_int(8)
        return TonAddress(workchain, self.load_bits(256))

    def load_coins(self) -> int:
        return self._take(self._take(4) * 8)

    def load_tonhash(self) -> bytes:
        return self.load_bits(256)

    def next_reference(self) -> Cell:
        if self._ref_pos >= len(self.cell.refs):
            raise BocParsingError("No more references in cell")
        ref = self.cell.refs[self._ref_pos]
        self._ref_pos += 1
        return ref

    def load_dict(self, key_bits: int) -> dict[int, CellParser]:
        """Load an optional dictionary; values are parsers positioned at each value."""
        if not self._take(1):
            return {}
        result: dict[int, CellParser] = {}
        _read_hashmap(self.next_reference().parser(), key_bits, 0, result)
        return result


def _read_label(parser: CellParser, max_len: int) -> tuple[int, int]:
    if not parser.load_uint(1):
        length = 0
        while parser.load_uint(1):
            length += 1
        return length, parser.load_uint(length)
    width = max_len.bit_length()
    if not parser.load_uint(1):
        length = parser.load_uint(width)
        return length, parser.load_uint(length)
    bit = parser.load_uint(1)
    length = parser.load_uint(width)
    return length, ((1 << length) - 1) if bit else 0


def _read_hashmap(parser: CellParser, n: int, prefix: int, out: dict[int, CellParser]) -> None:
    length, label = _read_label(parser, n)
    if length > n:
        raise BocParsingError("Dictionary label longer than key")
    prefix = (prefix << length) | label
    rest = n - length
    if rest == 0:
        out[prefix] = parser
        return
    left, right = parser.next_reference(), parser.next_reference()
    _read_hashmap(left.parser(), rest - 1, prefix << 1, out)
    _read_hashmap(right.parser(), rest - 1, (prefix << 1) | 1, out)


def cell_to_buffer(cell: Cell) -> bytes:
    """Collect the bytes of a chain of cells linked through their first reference."""
    out = bytearray()
    current: Cell | None = cell
    while current is not None:
        parser = current.parser()
        for _ in range(BYTES_PER_CELL):
            if parser.remaining_bits() < 8:
                break
            out.append(parser.load_uint(8))
        current = current.refs[0] if current.refs else None
    return bytes(out)


def cell_to_string(cell: Cell) -> str:
    """Decode a cell chain as UTF-8 text."""
    try:
        return cell_to_buffer(cell).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BocParsingError(str(exc)) from exc


def buffer_to_cell(buffer: bytes | Iterable[int]) -> Cell:
    """Store bytes in a chain of cells of at most 96 bytes each."""
    data = bytes(buffer)
    chunks = [data[i:i + BYTES_PER_CELL] for i in range(0, len(data), BYTES_PER_CELL)] or [b""]
    tail: Cell | None = None
    for chunk in reversed(chunks):
        builder = CellBuilder().store_bits(len(chunk) * 8, chunk)
        if tail is not None:
            builder.store_reference(tail)
        tail = builder.build()
    return tail  # type: ignore[return-value]