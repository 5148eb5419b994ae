"""
Encryption module using AES-256-GCM
"""

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes

from .errors import CryptoError, PassphraseTooLong

# Constants
SALT_SIZE = 16
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32  # 256 bits
ITERATIONS = 100000
MAX_PASSPHRASE_BYTES = 16


def check_passphrase(passphrase: str) -> bytes:
    """
    Encode a passphrase and enforce the length limit.

    Raises:
        PassphraseTooLong: if it is longer than 16 bytes in UTF-8
    """
    encoded = passphrase.encode('utf-8')
    if len(encoded) > MAX_PASSPHRASE_BYTES:
        raise PassphraseTooLong(
            f"Only {MAX_PASSPHRASE_BYTES} bytes are allowed in the passphrase "
            f"(got {len(encoded)})"
        )
    return encoded


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """
    Derive encryption key from passphrase using PBKDF2.

    Args:
        passphrase: user passphrase
        salt: random salt

    Returns:
        32-byte key for AES-256
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive(check_passphrase(passphrase))


def encrypt(data: bytes, passphrase: str) -> bytes:
    """
    Encrypt data using AES-256-GCM.

    Format: [16-byte salt][12-byte nonce][ciphertext+tag]

    Args:
        data: plaintext bytes
        passphrase: encryption passphrase (at most 16 bytes)

    Returns:
        Encrypted bytes with salt and nonce prepended
    """
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)

    key = derive_key(passphrase, salt)

    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, data, None)

    return salt + nonce + ciphertext


def decrypt(encrypted_data: bytes, passphrase: str) -> bytes:
    """
    Decrypt data encrypted with AES-256-GCM.

    Args:
        encrypted_data: encrypted bytes with salt and nonce
        passphrase: decryption passphrase

    Returns:
        Decrypted plaintext bytes

    Raises:
        CryptoError: if decryption fails (wrong passphrase or corrupted data)
    """
    min_size = SALT_SIZE + NONCE_SIZE + TAG_SIZE
    if len(encrypted_data) < min_size:
        raise CryptoError("Encrypted data too short")

    salt = encrypted_data[:SALT_SIZE]
    nonce = encrypted_data[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
    ciphertext = encrypted_data[SALT_SIZE + NONCE_SIZE:]

    key = derive_key(passphrase, salt)

    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise CryptoError("Decryption failed: wrong passphrase or corrupted data") from e
