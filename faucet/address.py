"""
faucet.address
==============

Address helpers shared by the runtime and the adapters.

Addresses are 20-byte values presented as lowercase `0x`-prefixed hex
strings. Every public faucet operation normalizes its address arguments on
entry, so the ledger and the event log only ever see the canonical form.

>>> normalize_address("0xABcd" + "00" * 18)
'0xabcd000000000000000000000000000000000000'
>>> is_zero_address("0x" + "00" * 20)
True
"""

from __future__ import annotations

import hashlib
from typing import Union

from .constants import ADDRESS_BYTES, ZERO_ADDRESS
from .errors import InvalidAddress

AddressLike = Union[str, bytes, bytearray]


def _strip0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def normalize_address(addr: AddressLike) -> str:
    """
    Return the canonical lowercase `0x` form of `addr`.

    Accepts hex strings (with or without prefix) and raw 20-byte values.
    Raises InvalidAddress for anything else.
    """
    if isinstance(addr, (bytes, bytearray)):
        raw = bytes(addr)
    elif isinstance(addr, str):
        h = _strip0x(addr.strip())
        try:
            raw = bytes.fromhex(h)
        except ValueError:
            raise InvalidAddress(addr, "address is not valid hex") from None
    else:
        raise InvalidAddress(addr, "address must be str or bytes")
    if len(raw) != ADDRESS_BYTES:
        raise InvalidAddress(addr, f"address must be {ADDRESS_BYTES} bytes")
    return "0x" + raw.hex()


def is_zero_address(addr: AddressLike) -> bool:
    return normalize_address(addr) == ZERO_ADDRESS


def derive_address(tag: str) -> str:
    """
    Produce a stable address from a human tag (sha3-256, first 20 bytes).

    Used by the CLI scenario loader and tests to name accounts and contracts.
    Not a key derivation; do not use for anything that needs ownership proofs.
    """
    h = hashlib.sha3_256(tag.encode("utf-8")).hexdigest()[: ADDRESS_BYTES * 2]
    return "0x" + h


__all__ = ["AddressLike", "normalize_address", "is_zero_address", "derive_address"]
