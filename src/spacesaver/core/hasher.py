"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing with pluggable hash algorithms.

The full fingerprint is a SHA-256 digest of the whole byte stream and is the only
thing duplicate groups are keyed on. The quick hash (xxHash64 of the first chunk)
is a cheap pre-filter that lets the pipeline skip full reads of files that
already differ at the front.
"""

import hashlib
import logging

import xxhash

from spacesaver.core.errors import FingerprintError
from spacesaver.core.interfaces import HashAlgorithm

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
QUICK_HASH_SIZE = 64 * 1024


# Use the same way to implement and use any other hashing algorithm
class Sha256Algorithm(HashAlgorithm):
    name = "sha256"

    @staticmethod
    def new():
        return hashlib.sha256()


class XXHash64Algorithm(HashAlgorithm):
    name = "xxh64"

    @staticmethod
    def new():
        return xxhash.xxh64()


class HasherImpl:
    """
    Streams files through the configured algorithms.
    Read failures raise FingerprintError; they are never swallowed, since a file
    that cannot be read would make the savings total wrong.
    """

    def __init__(
            self,
            algorithm: HashAlgorithm = None,
            quick_algorithm: HashAlgorithm = None,
            chunk_size: int = CHUNK_SIZE,
            quick_size: int = QUICK_HASH_SIZE,
    ):
        self.algorithm = algorithm or Sha256Algorithm()
        self.quick_algorithm = quick_algorithm or XXHash64Algorithm()
        self.chunk_size = chunk_size
        self.quick_size = quick_size

    def fingerprint(self, path: str) -> bytes:
        """Hash of the full content of the file."""
        hash_obj = self.algorithm.new()
        try:
            with open(path, "rb") as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    hash_obj.update(chunk)
        except OSError as e:
            logger.error(f"Error reading full content of {path}: {e}")
            raise FingerprintError(path, e) from e
        return hash_obj.digest()

    def quick_hash(self, path: str) -> bytes:
        """Hash of the first `quick_size` bytes of the file."""
        hash_obj = self.quick_algorithm.new()
        try:
            with open(path, "rb") as f:
                hash_obj.update(f.read(self.quick_size))
        except OSError as e:
            logger.error(f"Error reading front chunk of {path}: {e}")
            raise FingerprintError(path, e) from e
        return hash_obj.digest()
