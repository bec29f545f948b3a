import hashlib
import os

from cryptography.hazmat.primitives import constant_time, hashes
from embit import base58


def blake2b256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def sha256_digest(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def generate_api_key() -> str:
    return base58.encode(os.urandom(20))


def hash_api_key(api_key: str) -> bytes:
    return sha256_digest(api_key.encode("ascii"))


def verify_api_key(candidate: str, api_hash: bytes) -> bool:
    """
    Compares a password supplied over basic auth with the configured key hash.
    Both sides are hashed first so the comparison runs in constant time.
    """
    try:
        candidate_hash = hash_api_key(candidate)
    except UnicodeEncodeError:
        return False
    return constant_time.bytes_eq(candidate_hash, api_hash)
