"""
mode_counter.encoding — deterministic byte layouts for storage and events.

Storage value
-------------
An entry of the `ValueOf` map is stored as the SCALE encoding of `(u32, Mode)`:

    value: u32 little-endian (4 bytes) ‖ mode: u8 discriminant (Idle=0, Increasing=1, Decreasing=2)

Exactly 5 bytes. Absence of the key means "uninitialized"; there is no explicit
None marker. Decoding rejects other lengths and unknown discriminants.

Storage key
-----------
    b"ValueOf:" ‖ twox_64(account) ‖ account

where `account` is the tagged account encoding below and `twox_64` is xxh64
(seed 0) written as 8 little-endian bytes. Keeping the plain account bytes
after the hash (the "twox_64_concat" layout of the `ValueOf` map) lets a store
iterate its keys back into account ids.

Account encoding
----------------
One tag byte followed by the payload, so ids of different Python types never collide:

    0x00 ‖ u64 little-endian            int ids (0 <= id < 2**64)
    0x01 ‖ u32 LE length ‖ raw bytes    bytes ids
    0x02 ‖ u32 LE length ‖ UTF-8        str ids

Event encoding
--------------
    u8 event index ‖ account ‖ [u32 LE value]   (value only for StateExecuted)
"""

from __future__ import annotations

from typing import Tuple

import xxhash

from .types.events import Event, EventKind
from .types.mode import Mode
from .types.state import U32_MAX, AccountId, AccountState, ensure_account_id, ensure_u32

STATE_LEN = 5
VALUE_OF_PREFIX = b"ValueOf:"

_TAG_INT = 0x00
_TAG_BYTES = 0x01
_TAG_STR = 0x02

_EVENT_BY_INDEX = {kind.ordinal: kind for kind in EventKind}


# ---------------------------------------------------------------------------
# Storage value
# ---------------------------------------------------------------------------


def encode_state(state: AccountState) -> bytes:
    """Encode an AccountState into its 5-byte storage form."""
    value = ensure_u32("value", state.value)
    return value.to_bytes(4, "little") + bytes([state.mode.code])


def decode_state(data: bytes) -> AccountState:
    """Decode a 5-byte storage record. Raises ValueError on malformed input."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("state record must be bytes-like")
    b = bytes(data)
    if len(b) != STATE_LEN:
        raise ValueError(f"state record must be {STATE_LEN} bytes, got {len(b)}")
    value = int.from_bytes(b[:4], "little")
    try:
        mode = Mode.from_code(b[4])
    except ValueError as e:
        raise ValueError(f"bad mode discriminant 0x{b[4]:02x}") from e
    return AccountState(value=value, mode=mode)


# ---------------------------------------------------------------------------
# Accounts & keys
# ---------------------------------------------------------------------------


def _u32_le(n: int) -> bytes:
    if not 0 <= n <= U32_MAX:
        raise ValueError("length does not fit u32")
    return n.to_bytes(4, "little")


def encode_account(who: AccountId) -> bytes:
    """Tagged, injective byte encoding of an account id."""
    who = ensure_account_id(who)
    if isinstance(who, int):
        return bytes([_TAG_INT]) + who.to_bytes(8, "little")
    if isinstance(who, bytes):
        return bytes([_TAG_BYTES]) + _u32_le(len(who)) + who
    raw = who.encode("utf-8")
    return bytes([_TAG_STR]) + _u32_le(len(raw)) + raw


def decode_account(data: bytes) -> Tuple[AccountId, int]:
    """
    Decode a tagged account id from the front of `data`.

    Returns (account_id, bytes_consumed).
    """
    if not data:
        raise ValueError("empty account encoding")
    tag = data[0]
    if tag == _TAG_INT:
        if len(data) < 9:
            raise ValueError("truncated integer account id")
        return int.from_bytes(data[1:9], "little"), 9
    if tag in (_TAG_BYTES, _TAG_STR):
        if len(data) < 5:
            raise ValueError("truncated account id length")
        n = int.from_bytes(data[1:5], "little")
        end = 5 + n
        if len(data) < end:
            raise ValueError("truncated account id payload")
        payload = bytes(data[5:end])
        if tag == _TAG_BYTES:
            return payload, end
        return payload.decode("utf-8"), end
    raise ValueError(f"unknown account tag 0x{tag:02x}")


TWOX_64_LEN = 8


def twox_64(data: bytes) -> bytes:
    """xxh64 of `data` with seed 0, as 8 little-endian bytes."""
    return xxhash.xxh64_intdigest(data, seed=0).to_bytes(TWOX_64_LEN, "little")


def twox_64_concat(data: bytes) -> bytes:
    return twox_64(data) + data


def storage_key(who: AccountId) -> bytes:
    """Key of `who`'s entry in the ValueOf map."""
    return VALUE_OF_PREFIX + twox_64_concat(encode_account(who))


def account_from_storage_key(key: bytes) -> AccountId:
    """Inverse of `storage_key`; verifies the embedded hash."""
    if not key.startswith(VALUE_OF_PREFIX):
        raise ValueError("not a ValueOf key")
    rest = key[len(VALUE_OF_PREFIX):]
    digest, raw = rest[:TWOX_64_LEN], rest[TWOX_64_LEN:]
    if twox_64(raw) != digest:
        raise ValueError("ValueOf key hash mismatch")
    who, used = decode_account(raw)
    if used != len(raw):
        raise ValueError("trailing bytes after account id")
    return who


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def encode_event(event: Event) -> bytes:
    out = bytearray([event.kind.ordinal])
    out += encode_account(event.who)
    if event.kind.carries_value:
        out += ensure_u32("value", event.value).to_bytes(4, "little")
    return bytes(out)


def decode_event(data: bytes) -> Event:
    if not data:
        raise ValueError("empty event encoding")
    try:
        kind = _EVENT_BY_INDEX[data[0]]
    except KeyError:
        raise ValueError(f"unknown event index {data[0]}") from None
    who, used = decode_account(data[1:])
    rest = data[1 + used:]
    if kind.carries_value:
        if len(rest) != 4:
            raise ValueError("StateExecuted needs a 4-byte value")
        return Event(kind, who, int.from_bytes(rest, "little"))
    if rest:
        raise ValueError("trailing bytes after event")
    return Event(kind, who)


__all__ = [
    "STATE_LEN",
    "VALUE_OF_PREFIX",
    "encode_state",
    "decode_state",
    "encode_account",
    "decode_account",
    "twox_64",
    "twox_64_concat",
    "storage_key",
    "account_from_storage_key",
    "encode_event",
    "decode_event",
]
