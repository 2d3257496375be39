"""PKCE (Proof Key for Code Exchange) generation and management"""

import base64
import hashlib
import secrets
import struct
from typing import MutableMapping, Optional, Tuple

# RFC 7636 unreserved characters
VERIFIER_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
DEFAULT_VERIFIER_LENGTH = 128
VERIFIER_KEY = "irdata_pkce_verifier"

_K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5, 0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3, 0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc, 0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7, 0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13, 0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3, 0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5, 0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208, 0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

_H0 = (0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a, 0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19)

_MASK = 0xFFFFFFFF


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & _MASK


def software_sha256(data: bytes) -> bytes:
    """Pure Python SHA-256, bit-identical to hashlib.sha256

    Only used when the interpreter's hashlib does not expose sha256.
    """
    bit_length = len(data) * 8
    padded = data + b"\x80" + b"\x00" * ((55 - len(data)) % 64) + struct.pack(">Q", bit_length)

    h = list(_H0)
    for offset in range(0, len(padded), 64):
        w = list(struct.unpack(">16I", padded[offset:offset + 64]))
        for i in range(16, 64):
            s0 = _rotr(w[i - 15], 7) ^ _rotr(w[i - 15], 18) ^ (w[i - 15] >> 3)
            s1 = _rotr(w[i - 2], 17) ^ _rotr(w[i - 2], 19) ^ (w[i - 2] >> 10)
            w.append((w[i - 16] + s0 + w[i - 7] + s1) & _MASK)

        a, b, c, d, e, f, g, hh = h
        for i in range(64):
            s1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
            ch = (e & f) ^ (~e & g)
            t1 = (hh + s1 + ch + _K[i] + w[i]) & _MASK
            s0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
            maj = (a & b) ^ (a & c) ^ (b & c)
            t2 = (s0 + maj) & _MASK
            hh, g, f, e, d, c, b, a = g, f, e, (d + t1) & _MASK, c, b, a, (t1 + t2) & _MASK

        h = [(x + y) & _MASK for x, y in zip(h, (a, b, c, d, e, f, g, hh))]

    return struct.pack(">8I", *h)


def sha256_digest(data: bytes) -> bytes:
    """SHA-256 digest using hashlib when available"""
    if "sha256" in hashlib.algorithms_available:
        return hashlib.sha256(data).digest()
    return software_sha256(data)


def generate_verifier(length: int = DEFAULT_VERIFIER_LENGTH) -> str:
    """Generate a random code verifier

    Args:
        length: Number of characters (RFC 7636 allows 43-128)

    Returns:
        Verifier drawn uniformly from the unreserved URL characters
    """
    return "".join(secrets.choice(VERIFIER_CHARSET) for _ in range(length))


def generate_challenge(verifier: str) -> str:
    """Derive the S256 code challenge for a verifier

    Args:
        verifier: Code verifier string

    Returns:
        base64url(SHA-256(verifier)) without padding
    """
    digest = sha256_digest(verifier.encode("utf-8"))
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class PKCEManager:
    """Manages the code verifier for a single authorization attempt

    The verifier is kept in attempt-scoped storage between building the
    authorization URL and handling the callback, and is discarded as soon
    as it is read back.
    """

    def __init__(self, storage: MutableMapping[str, str]):
        self.storage = storage

    def generate_pkce(self) -> Tuple[str, str]:
        """Generate a fresh code verifier and challenge and store the verifier

        Returns:
            Tuple of (code_verifier, code_challenge)
        """
        code_verifier = generate_verifier()
        code_challenge = generate_challenge(code_verifier)
        self.storage[VERIFIER_KEY] = code_verifier
        return code_verifier, code_challenge

    def pop_verifier(self) -> Optional[str]:
        """Return the stored verifier and remove it from storage"""
        return self.storage.pop(VERIFIER_KEY, None) or None

    def clear_pkce(self):
        """Clear the stored verifier"""
        self.storage.pop(VERIFIER_KEY, None)
