""" chainsig build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import chainsig

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=chainsig.name,
    version=chainsig.__version__,
    license=chainsig.__license__,
    author=chainsig.__author__,
    author_email=chainsig.__author_email__,
    description="Chain signatures: derived keys, addresses, and MPC signatures",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "btclib>=2023.7,<2026",
        "dataclasses-json",
        "eth-utils",
        "eth-hash[pycryptodome]",
    ],
    extras_require={
        "secp256k1": ["btclib_libsecp256k1"],
        "test": ["pytest", "coincurve"],
    },
    keywords=(
        "chain-signatures mpc threshold-signatures secp256k1 ecdsa "
        "key-derivation evm bitcoin p2pkh p2wpkh"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
