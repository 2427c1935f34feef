#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `chainsig.root_key` module."

import secrets

import pytest
from btclib.alias import INF
from btclib.base58 import _b58encode
from btclib.ec import bytes_from_point, mult, secp256k1

from chainsig.exceptions import InvalidPointError, MalformedKeyError
from chainsig.root_key import (
    compress,
    compressed_from_root_key,
    decode_root_key,
    decompress,
    encode_root_key,
    point_from_pub_key,
    sec_from_pub_key,
)

# network-native form of the generator point
G_ROOT_KEY = (
    "secp256k1:"
    "3SB8tA9Kbn7FBtT6GWR6AJk73QceudisHaGThPoLCDgC9tan7d3cwZFiDZtrmhSAf8aTynEdQ3N7KXhMm3nWhekP"
)


def _root_key(xy: bytes) -> str:
    return "secp256k1:" + _b58encode(xy).decode("ascii")


def test_root_key() -> None:
    ec = secp256k1
    uncompressed = bytes_from_point(ec.G, compressed=False)

    assert decode_root_key(G_ROOT_KEY) == uncompressed
    assert decode_root_key(G_ROOT_KEY.encode("ascii")) == uncompressed
    assert decode_root_key(" " + G_ROOT_KEY + "\n") == uncompressed
    assert compressed_from_root_key(G_ROOT_KEY) == bytes_from_point(ec.G)

    assert encode_root_key(ec.G) == G_ROOT_KEY
    assert encode_root_key(uncompressed) == G_ROOT_KEY
    assert encode_root_key(bytes_from_point(ec.G)) == G_ROOT_KEY
    assert encode_root_key(uncompressed.hex()) == G_ROOT_KEY
    assert encode_root_key("0x" + uncompressed.hex()) == G_ROOT_KEY


def test_round_trips() -> None:
    for _ in range(8):
        Q = mult(1 + secrets.randbelow(secp256k1.n - 1))
        root_key = encode_root_key(Q)
        assert root_key.startswith("secp256k1:")
        uncompressed = decode_root_key(root_key)
        assert point_from_pub_key(uncompressed) == Q

        compressed = compress(uncompressed)
        assert decompress(compressed) == uncompressed
        assert compress(decompress(compressed)) == compressed
        assert compress(compressed) == compressed
        assert decompress(uncompressed) == uncompressed
        assert compress(Q) == compressed
        assert decompress(Q) == uncompressed


def test_root_key_exceptions() -> None:
    xy = bytes_from_point(secp256k1.G, compressed=False)[1:]

    with pytest.raises(MalformedKeyError, match="invalid root key payload size: 63 bytes instead of 64"):
        decode_root_key(_root_key(xy[:-1]))
    with pytest.raises(MalformedKeyError, match="invalid root key payload size: 65 bytes instead of 64"):
        decode_root_key(_root_key(xy + b"\x01"))
    with pytest.raises(MalformedKeyError, match="unsupported curve id: "):
        decode_root_key(_root_key(xy).replace("secp256k1", "ed25519"))
    with pytest.raises(MalformedKeyError, match="missing curve id separator: "):
        decode_root_key(_root_key(xy)[len("secp256k1:") :])
    with pytest.raises(MalformedKeyError, match="invalid root key payload: "):
        decode_root_key("secp256k1:0OIl")

    # non-ascii bytes
    with pytest.raises(MalformedKeyError, match="non ascii root key: "):
        decode_root_key(b"secp256k1:\xff\xfe")
    with pytest.raises(MalformedKeyError, match="not a root key: "):
        decode_root_key(64)  # type: ignore

    y = int.from_bytes(xy[32:], "big")
    off_curve = xy[:32] + (y + 1).to_bytes(32, "big")
    with pytest.raises(InvalidPointError, match="point not on curve: "):
        decode_root_key(_root_key(off_curve))


def test_point_from_pub_key() -> None:
    ec = secp256k1
    compressed = bytes_from_point(ec.G)
    uncompressed = bytes_from_point(ec.G, compressed=False)
    for pub_key in (ec.G, compressed, uncompressed, compressed.hex(), "0x" + compressed.hex()):
        assert point_from_pub_key(pub_key) == ec.G

    assert sec_from_pub_key(ec.G) == compressed
    assert sec_from_pub_key(uncompressed) == uncompressed
    assert sec_from_pub_key(uncompressed.hex()) == uncompressed

    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        point_from_pub_key(INF)
    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        point_from_pub_key((ec.G[0], ec.G[1] + 1))
    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        point_from_pub_key((ec.G[0], ec.p))
    with pytest.raises(InvalidPointError, match="not a valid public key: "):
        point_from_pub_key((1, 2, 3))  # type: ignore

    with pytest.raises(MalformedKeyError, match="invalid SEC public key size: 64 bytes"):
        point_from_pub_key(uncompressed[1:])
    with pytest.raises(MalformedKeyError, match="invalid SEC prefix for 33 bytes: 0x04"):
        point_from_pub_key(b"\x04" + compressed[1:])
    with pytest.raises(MalformedKeyError, match="not a SEC public key: "):
        point_from_pub_key("not hex")
    with pytest.raises(MalformedKeyError, match="not a SEC public key: "):
        point_from_pub_key(1)  # type: ignore


def test_compress_exceptions() -> None:
    uncompressed = bytes_from_point(secp256k1.G, compressed=False)

    with pytest.raises(MalformedKeyError):
        compress(uncompressed[1:])
    with pytest.raises(MalformedKeyError):
        decompress(b"\x05" + uncompressed[1:33])

    y = int.from_bytes(uncompressed[33:], "big")
    off_curve = uncompressed[:33] + (y + 1).to_bytes(32, "big")
    with pytest.raises(InvalidPointError):
        compress(off_curve)
    with pytest.raises(InvalidPointError):
        decompress(b"\x02" + (5).to_bytes(32, "big"))
