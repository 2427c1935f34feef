#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Root public key format conversions.

The MPC network publishes its root public key in the network-native form
"secp256k1:<base58>", where the base58 payload (no checksum)
is the 64-byte X || Y concatenation of the affine coordinates.

A public key (PubKey) can be:

- a Point tuple
- SEC Octets (bytes or hex-string, with 02, 03, or 04 prefix)
"""

from typing import Union

from btclib.alias import Octets, Point, String
from btclib.base58 import _b58decode, _b58encode
from btclib.ec import bytes_from_point, point_from_octets, secp256k1

from chainsig.exceptions import InvalidPointError, MalformedKeyError

PubKey = Union[Point, Octets]

CURVE_ID = "secp256k1"

# SEC prefixes by encoded size
_SEC_PREFIXES = {33: (0x02, 0x03), 65: (0x04,)}


def _sec_bytes(pub_key: Octets) -> bytes:

    if isinstance(pub_key, str):
        hex_str = pub_key.strip()
        if hex_str[:2].lower() == "0x":
            hex_str = hex_str[2:]
        try:
            pub_key = bytes.fromhex(hex_str)
        except ValueError as e:
            raise MalformedKeyError(f"not a SEC public key: {hex_str!r}") from e
    elif not isinstance(pub_key, bytes):
        raise MalformedKeyError(f"not a SEC public key: {pub_key!r}")

    if len(pub_key) not in _SEC_PREFIXES:
        err_msg = f"invalid SEC public key size: {len(pub_key)} bytes"
        raise MalformedKeyError(err_msg)
    if pub_key[0] not in _SEC_PREFIXES[len(pub_key)]:
        err_msg = f"invalid SEC prefix for {len(pub_key)} bytes: 0x{pub_key[0]:02x}"
        raise MalformedKeyError(err_msg)
    return pub_key


def point_from_pub_key(pub_key: PubKey) -> Point:
    "Return a verified-as-valid public key Point."

    ec = secp256k1
    if isinstance(pub_key, tuple):
        try:
            valid = ec.is_on_curve(pub_key) and pub_key[1] != 0
        except (TypeError, ValueError) as e:
            raise InvalidPointError(f"not a valid public key: {pub_key}") from e
        if not valid:
            raise InvalidPointError(f"not a valid public key: {pub_key}")
        return pub_key

    sec = _sec_bytes(pub_key)
    try:
        return point_from_octets(sec, ec)
    except ValueError as e:
        raise InvalidPointError(f"point not on curve: {sec.hex()}") from e


def decode_root_key(encoded: String) -> bytes:
    "Return the 65-byte uncompressed SEC public key of a network-native root key."

    if isinstance(encoded, bytes):
        try:
            encoded = encoded.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedKeyError(f"non ascii root key: {encoded!r}") from e
    if not isinstance(encoded, str):
        raise MalformedKeyError(f"not a root key: {encoded!r}")
    curve_id, sep, payload = encoded.strip().partition(":")
    if not sep:
        raise MalformedKeyError(f"missing curve id separator: {encoded!r}")
    if curve_id != CURVE_ID:
        raise MalformedKeyError(f"unsupported curve id: {curve_id!r}")

    try:
        xy = _b58decode(payload.encode("ascii"))
    except ValueError as e:
        raise MalformedKeyError(f"invalid root key payload: {e}") from e
    if len(xy) != 64:
        err_msg = f"invalid root key payload size: {len(xy)} bytes instead of 64"
        raise MalformedKeyError(err_msg)

    pub_key = b"\x04" + xy
    # raises InvalidPointError for off-curve coordinates
    point_from_pub_key(pub_key)
    return pub_key


def encode_root_key(pub_key: PubKey) -> str:
    "Return the network-native form of a SEC public key or Point."

    xy = decompress(pub_key)[1:]
    return CURVE_ID + ":" + _b58encode(xy).decode("ascii")


def compressed_from_root_key(encoded: String) -> bytes:
    "Return the 33-byte compressed SEC public key of a network-native root key."

    return compress(decode_root_key(encoded))


def compress(pub_key: PubKey) -> bytes:
    return bytes_from_point(point_from_pub_key(pub_key), secp256k1, compressed=True)


def decompress(pub_key: PubKey) -> bytes:
    return bytes_from_point(point_from_pub_key(pub_key), secp256k1, compressed=False)


def sec_from_pub_key(pub_key: PubKey) -> bytes:
    "Return the validated SEC encoding as given; Points are compressed."

    if isinstance(pub_key, tuple):
        return compress(pub_key)
    sec = _sec_bytes(pub_key)
    point_from_pub_key(sec)
    return sec
