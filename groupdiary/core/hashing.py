"""
Utilities for hashing and comparing group passwords.

Hashes are stored as ``scrypt$<log2 n>$<salt>$<digest>`` with the salt and
digest urlsafe-base64 encoded, so the cost travels with the hash and can be
raised later without invalidating existing passwords.
"""

from __future__ import annotations

import asyncio
import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SALT_LENGTH = 16
DIGEST_LENGTH = 32
BLOCK_SIZE = 8
PARALLELIZATION = 1


class UnsupportedHashAlgorithm(Exception):
    pass


class PasswordHashingError(Exception):
    pass


def _encode(content: bytes) -> str:
    return base64.urlsafe_b64encode(content).decode("ascii")


def _decode(content: str) -> bytes:
    return base64.urlsafe_b64decode(content.encode("ascii"))


def match_name_to_algorithm(name: str, cost: int, salt: bytes) -> Scrypt:
    match name:
        case "scrypt":
            return Scrypt(
                salt=salt,
                length=DIGEST_LENGTH,
                n=2**cost,
                r=BLOCK_SIZE,
                p=PARALLELIZATION,
            )
        case _:
            raise UnsupportedHashAlgorithm(f"Algorithm {name} not supported")


def hash_password(password: str, cost: int) -> str:
    """
    Hash a plaintext password with a fresh random salt. `cost` is the base-2
    logarithm of the scrypt CPU/memory cost (usually grab this from
    settings.password_hash_cost).
    """
    if cost < 1:
        raise PasswordHashingError(f"Invalid hash cost {cost}")

    salt = os.urandom(SALT_LENGTH)

    try:
        digest = match_name_to_algorithm("scrypt", cost=cost, salt=salt).derive(
            password.encode("utf-8")
        )
    except (ValueError, OverflowError, MemoryError) as e:
        raise PasswordHashingError("Unable to hash password") from e

    return f"scrypt${cost}${_encode(salt)}${_encode(digest)}"


def verify_password(password: str, hashed: str) -> bool:
    """
    Compare a plaintext password to a hash produced by `hash_password`.
    """
    try:
        name, cost, salt, digest = hashed.split("$")
        algorithm = match_name_to_algorithm(name, cost=int(cost), salt=_decode(salt))
        expected = _decode(digest)
    except (ValueError, OverflowError, MemoryError, UnsupportedHashAlgorithm) as e:
        raise PasswordHashingError("Stored password hash is malformed") from e

    try:
        algorithm.verify(password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    except (ValueError, OverflowError, MemoryError) as e:
        raise PasswordHashingError("Unable to verify password") from e

    return True


async def ahash_password(password: str, cost: int) -> str:
    return await asyncio.to_thread(hash_password, password, cost)


async def averify_password(password: str, hashed: str) -> bool:
    return await asyncio.to_thread(verify_password, password, hashed)
