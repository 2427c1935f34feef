#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Structured key derivation paths and their canonical serialization.

A derivation path is the tuple (chain, domain, meta):

* chain is the SLIP-44 coin type of the target chain
  (0 bitcoin, 60 ethereum, 118 cosmos)
* domain is an optional free-form string,
  e.g. a BIP44-like "m/44'/60'/0'/0/0"
* meta is an optional JSON object

Two paths with the same content must hash to the same epsilon,
whatever the order in which their keys were written:
the epsilon preimage uses the JSON Canonicalization Scheme (RFC 8785)
serialization of the path, with absent (None) top-level fields omitted.

https://www.rfc-editor.org/rfc/rfc8785
"""

import json
import math
from dataclasses import InitVar, dataclass
from typing import Any, Dict, Mapping, Optional, Union

from dataclasses_json import DataClassJsonMixin
from dataclasses_json.core import Json

from chainsig.exceptions import ChainSigTypeError, ChainSigValueError

SLIP44_BITCOIN = 0
SLIP44_ETHEREUM = 60
SLIP44_COSMOS = 118


def jcs_number(value: Union[int, float]) -> str:
    """Return a number serialized as ECMAScript Number::toString does.

    Integers up to 2^53 are exact; everything else is taken as an
    IEEE 754 double, written with its shortest round-trip digits:
    plain notation for 1e-6 <= |x| < 1e21,
    exponent notation (e.g. 1e-7, 1.5e+300) otherwise.
    """

    if isinstance(value, int) and abs(value) <= 2**53:
        return str(value)
    try:
        value = float(value)
    except OverflowError as e:
        raise ChainSigValueError(f"number out of range: {value}") from e
    if not math.isfinite(value):
        raise ChainSigValueError(f"non finite number: {value}")
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr is the shortest round-trip representation
    mantissa, _, exponent = repr(abs(value)).partition("e")
    int_part, _, frac_part = mantissa.partition(".")
    all_digits = int_part + frac_part
    digits = all_digits.lstrip("0")
    # abs(value) == 0.digits * 10**n
    n = len(int_part) + int(exponent or 0) - (len(all_digits) - len(digits))
    digits = digits.rstrip("0")
    k = len(digits)

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    e = n - 1
    exp = ("e+" if e >= 0 else "e-") + str(abs(e))
    if k == 1:
        return sign + digits + exp
    return sign + digits[0] + "." + digits[1:] + exp


def jcs_dumps(value: Any) -> str:
    "Return the JSON Canonicalization Scheme serialization of a JSON value."

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return jcs_number(value)
    if isinstance(value, Mapping):
        if any(not isinstance(k, str) for k in value):
            raise ChainSigTypeError(f"non string object key in: {value!r}")
        # keys sorted by their UTF-16 code units
        keys = sorted(value, key=lambda k: k.encode("utf-16-be"))
        members = (jcs_dumps(k) + ":" + jcs_dumps(value[k]) for k in keys)
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(jcs_dumps(v) for v in value) + "]"
    raise ChainSigTypeError(f"not a JSON value: {value!r}")


@dataclass(frozen=True)
class DerivationPath(DataClassJsonMixin):
    chain: int
    domain: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:

        if isinstance(self.chain, bool) or not isinstance(self.chain, int):
            raise ChainSigTypeError(f"invalid chain type: {type(self.chain)}")
        if self.chain < 0:
            raise ChainSigValueError(f"negative chain: {self.chain}")
        if self.domain is not None and not isinstance(self.domain, str):
            raise ChainSigTypeError(f"invalid domain type: {type(self.domain)}")
        if self.meta is not None:
            if not isinstance(self.meta, Mapping):
                raise ChainSigTypeError(f"invalid meta type: {type(self.meta)}")
            # fail early on values without a canonical JSON form
            jcs_dumps(self.meta)

    def to_dict(self, encode_json: bool = False) -> Dict[str, Json]:
        # top-level None fields are absent, not null
        dict_ = super().to_dict(encode_json)
        return {k: v for k, v in dict_.items() if v is not None}

    def canonicalize(self) -> str:
        "Return the canonical JSON serialization used in the epsilon preimage."

        return jcs_dumps(self.to_dict())

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DerivationPath":
        "Return a DerivationPath from its chain, domain and meta keys."

        if "chain" not in mapping:
            raise ChainSigValueError(f"missing chain in derivation path: {mapping!r}")
        return cls(mapping["chain"], mapping.get("domain"), mapping.get("meta"))


Path = Union[DerivationPath, Mapping[str, Any], str]


def canonical_path(path: Path) -> str:
    """Return the canonical string form of a derivation path.

    A str is taken as already canonical and returned unchanged,
    so that plain string paths (e.g. "ethereum-1") keep working.
    """
    if isinstance(path, str):
        return path
    if isinstance(path, DerivationPath):
        return path.canonicalize()
    if isinstance(path, Mapping):
        return DerivationPath.from_mapping(path).canonicalize()
    raise ChainSigTypeError(f"invalid derivation path type: {type(path)}")
