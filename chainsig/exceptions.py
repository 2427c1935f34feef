#!/usr/bin/env python3

# Copyright (C) The chainsig developers
#
# This file is part of chainsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of chainsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

The base classes are only meant to discriminate between Exceptions
raised by chainsig and those raised by other codebases;
they derive from the regular ValueError, TypeError, and RuntimeError,
so users are free to keep catching those.

The ValueError subclasses name the pipeline stage that failed.
None of them is transient: the same input always fails the same way.
"""


class ChainSigValueError(ValueError):
    pass


class ChainSigTypeError(TypeError):
    pass


class ChainSigRuntimeError(RuntimeError):
    pass


class MalformedKeyError(ChainSigValueError):
    "Bad encoding, prefix, or length of a key."


class InvalidPointError(ChainSigValueError):
    "Coordinates not satisfying the curve equation."


class InvalidScalarError(ChainSigValueError):
    "Derived scalar outside 1..n-1."


class DegenerateDerivationError(ChainSigValueError):
    "Derived key is the point at infinity (or a zero private key)."


class UnsupportedAddressTypeError(ChainSigValueError):
    pass


class UnsupportedNetworkError(ChainSigValueError):
    pass


class InvalidSignatureEncodingError(ChainSigValueError):
    "Signature fields out of their valid range."
