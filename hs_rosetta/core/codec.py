"""
Raw Handshake transaction codec.

Only what the middleware needs: decoding a signed transaction submitted to
/construction/submit and rendering input witnesses for operation metadata.
The transaction id is the BLAKE2b-256 digest of the serialization without
witnesses.
"""

import struct
from typing import List, Tuple

from .covenants import CovenantType
from .crypto import blake2b256
from .models import Address, Covenant, Input, Outpoint, Output, Transaction


class DecodeError(ValueError):
    pass


class BufferReader:
    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def read(self, size: int) -> bytes:
        if self.offset + size > len(self.data):
            raise DecodeError("Unexpected end of data.")
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_u8(self) -> int:
        return self.read(1)[0]

    def read_u32(self) -> int:
        return struct.unpack("<I", self.read(4))[0]

    def read_u64(self) -> int:
        return struct.unpack("<Q", self.read(8))[0]

    def read_varint(self) -> int:
        prefix = self.read_u8()
        if prefix == 0xFD:
            return struct.unpack("<H", self.read(2))[0]
        if prefix == 0xFE:
            return self.read_u32()
        if prefix == 0xFF:
            return self.read_u64()
        return prefix

    def read_varbytes(self) -> bytes:
        return self.read(self.read_varint())

    def left(self) -> int:
        return len(self.data) - self.offset


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", value)
    if value <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", value)
    return b"\xff" + struct.pack("<Q", value)


def witness_to_hex(items: List[str]) -> str:
    out = bytearray(encode_varint(len(items)))
    for item in items:
        raw = bytes.fromhex(item)
        out += encode_varint(len(raw)) + raw
    return out.hex()


def _push_to_asm(item: str) -> str:
    raw = bytes.fromhex(item)
    if not raw:
        return "0"
    if len(raw) == 1:
        if 1 <= raw[0] <= 16:
            return str(raw[0])
        if raw[0] == 0x81:
            return "-1"
    return item


def witness_to_asm(items: List[str]) -> str:
    """
    Renders witness items the way the node's script ASM does: pushes that
    have a small-integer opcode are shown as numbers, everything else as hex.
    Signatures are not decoded.
    """
    return " ".join(_push_to_asm(item) for item in items)


def _read_input(br: BufferReader) -> Input:
    prev_hash = br.read(32).hex()
    prev_index = br.read_u32()
    sequence = br.read_u32()
    return Input(prevout=Outpoint(hash=prev_hash, index=prev_index), sequence=sequence)


def _read_output(br: BufferReader) -> Output:
    value = br.read_u64()
    version = br.read_u8()
    address_hash = br.read(br.read_u8())
    if version > 31 or not 2 <= len(address_hash) <= 40:
        raise DecodeError("Invalid output address.")

    kind = br.read_u8()
    try:
        covenant_type = CovenantType(kind)
    except ValueError:
        raise DecodeError(f"Unknown covenant type: {kind}")

    items = [br.read_varbytes().hex() for _ in range(br.read_varint())]

    return Output(
        value=value,
        address=Address(version=version, hash=address_hash.hex()),
        covenant=Covenant(type=covenant_type, items=items),
    )


def _read_base(br: BufferReader) -> Tuple[int, List[Input], List[Output], int]:
    version = br.read_u32()
    inputs = [_read_input(br) for _ in range(br.read_varint())]
    outputs = [_read_output(br) for _ in range(br.read_varint())]
    locktime = br.read_u32()
    return version, inputs, outputs, locktime


def decode_transaction(raw: bytes) -> Transaction:
    br = BufferReader(raw)
    version, inputs, outputs, locktime = _read_base(br)
    base_size = br.offset

    for tin in inputs:
        tin.witness = [br.read_varbytes().hex() for _ in range(br.read_varint())]

    if br.left() != 0:
        raise DecodeError("Trailing data after transaction.")

    return Transaction(
        hash=blake2b256(raw[:base_size]).hex(),
        version=version,
        inputs=inputs,
        outputs=outputs,
        locktime=locktime,
        size=len(raw),
    )


def decode_transaction_hex(raw_hex: str) -> Transaction:
    try:
        raw = bytes.fromhex(raw_hex)
    except ValueError:
        raise DecodeError("Transaction is not valid hex.")
    return decode_transaction(raw)
