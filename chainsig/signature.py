#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""MPC signature normalization and verification.

The MPC network returns signatures as

    {
        "big_r": {"affine_point": "<33-byte compressed R, hex>"},
        "s": {"scalar": "<32-byte s, hex>"},
        "recovery_id": 0 | 1
    }

which normalizes to the RSV recoverable signature:
r is the x-coordinate of R (the affine point without its 02/03 prefix),
s the scalar, and v the recovery id.

The recovery id is kept as returned (0/1);
verification also accepts the legacy Ethereum 27/28 values,
reducing both forms to the y-parity of R.
"""

from dataclasses import InitVar, dataclass
from typing import Any, Mapping, Union

from btclib.alias import Octets, Point
from btclib.ec import secp256k1
from btclib.ecc.dsa import Sig, recover_pub_key_
from btclib.exceptions import BTClibRuntimeError, BTClibValueError
from btclib.utils import bytes_from_octets
from dataclasses_json import DataClassJsonMixin

from chainsig.evm import address_from_pub_key, is_evm_address
from chainsig.exceptions import ChainSigValueError, InvalidSignatureEncodingError

_HEX_DIGITS = frozenset("0123456789abcdef")
_VALID_V = (0, 1, 27, 28)


@dataclass(frozen=True)
class AffinePoint(DataClassJsonMixin):
    affine_point: str


@dataclass(frozen=True)
class SerializedScalar(DataClassJsonMixin):
    scalar: str


@dataclass(frozen=True)
class MPCSignature(DataClassJsonMixin):
    big_r: AffinePoint
    s: SerializedScalar
    recovery_id: int


def _scalar_from_hex(name: str, value: str) -> int:
    if not isinstance(value, str) or len(value) != 64 or set(value) - _HEX_DIGITS:
        err_msg = f"{name} is not 32 bytes of lowercase hex: {value!r}"
        raise InvalidSignatureEncodingError(err_msg)
    scalar = int(value, 16)
    if not 0 < scalar < secp256k1.n:
        raise InvalidSignatureEncodingError(f"scalar {name} not in 1..n-1: {value}")
    return scalar


@dataclass(frozen=True)
class RSVSignature(DataClassJsonMixin):
    # 64 lowercase hex digits
    r: str
    # 64 lowercase hex digits
    s: str
    # 0/1 (as returned by the MPC network) or 27/28 (legacy Ethereum)
    v: int
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        _scalar_from_hex("r", self.r)
        _scalar_from_hex("s", self.s)
        if isinstance(self.v, bool) or self.v not in _VALID_V:
            raise InvalidSignatureEncodingError(f"invalid recovery id: {self.v}")

    @property
    def y_parity(self) -> int:
        "Return the recovery id reduced to the y-parity bit of R."
        return self.v - 27 if self.v >= 27 else self.v

    @property
    def eth_v(self) -> int:
        "Return the legacy Ethereum 27/28 recovery value."
        return 27 + self.y_parity

    def to_bytes(self) -> bytes:
        "Return the 65-byte r || s || v serialization."
        self.assert_valid()
        return bytes.fromhex(self.r) + bytes.fromhex(self.s) + bytes([self.v])

    def to_sig(self) -> Sig:
        "Return the (r, s) ECDSA signature."
        r = _scalar_from_hex("r", self.r)
        s = _scalar_from_hex("s", self.s)
        return Sig(r, s, secp256k1)


def rsv_from_mpc_signature(
    sig: Union[MPCSignature, Mapping[str, Any]]
) -> RSVSignature:
    """Return the RSV form of an MPC signature.

    No range check is performed here: see RSVSignature.assert_valid.
    """
    try:
        if not isinstance(sig, MPCSignature):
            sig = MPCSignature.from_dict(sig)
        r = sig.big_r.affine_point[2:].lower()
        s = sig.s.scalar.lower()
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidSignatureEncodingError(f"not an MPC signature: {sig!r}") from e
    return RSVSignature(r, s, sig.recovery_id, check_validity=False)


to_rsv = rsv_from_mpc_signature

AnySignature = Union[RSVSignature, MPCSignature, Mapping[str, Any]]


def _rsv(sig: AnySignature) -> RSVSignature:
    if isinstance(sig, RSVSignature):
        return sig
    if isinstance(sig, Mapping) and "big_r" not in sig:
        try:
            return RSVSignature(sig["r"], sig["s"], sig["v"], check_validity=False)
        except KeyError as e:
            raise InvalidSignatureEncodingError(f"not a signature: {sig!r}") from e
    return rsv_from_mpc_signature(sig)


def msg_hash_from_octets(msg_hash: Octets) -> bytes:
    "Return the 32-byte message hash, tolerating a leading '0x' in hex-strings."

    if isinstance(msg_hash, str):
        msg_hash = msg_hash.strip()
        if msg_hash[:2].lower() == "0x":
            msg_hash = msg_hash[2:]
    try:
        return bytes_from_octets(msg_hash, 32)
    except ValueError as e:
        raise ChainSigValueError(f"invalid message hash: {e}") from e


def recover_pub_key(msg_hash: Octets, rsv: AnySignature) -> Point:
    "Return the public key recovered from a 32-byte message hash and signature."

    rsv = _rsv(rsv)
    rsv.assert_valid()
    msg_hash = msg_hash_from_octets(msg_hash)
    try:
        # MPC signatures are not required to be low-s
        return recover_pub_key_(rsv.y_parity, msg_hash, rsv.to_sig(), lower_s=False)
    except (BTClibValueError, BTClibRuntimeError) as e:
        raise ChainSigValueError(f"public key recovery failed: {e}") from e


def recover_address(msg_hash: Octets, rsv: AnySignature) -> str:
    "Return the EVM address recovered from a message hash and signature."

    return address_from_pub_key(recover_pub_key(msg_hash, rsv))


def verify(msg_hash: Octets, rsv: AnySignature, expected_address: str) -> bool:
    """Return True if the signature recovers to the expected EVM address.

    Malformed signature fields raise InvalidSignatureEncodingError,
    a malformed expected address raises ChainSigValueError;
    a well-formed signature that does not recover,
    or recovers to another address, returns False.
    """
    if not is_evm_address(expected_address):
        raise ChainSigValueError(f"not an EVM address: {expected_address!r}")
    rsv = _rsv(rsv)
    rsv.assert_valid()
    msg_hash = msg_hash_from_octets(msg_hash)
    try:
        address = recover_address(msg_hash, rsv)
    except ChainSigValueError:
        return False
    return address.lower() == expected_address.lower()
