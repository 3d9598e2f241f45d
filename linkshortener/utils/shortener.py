"""Shortcode generation utility

This module turns a `(url, owner_id)` pair into a short code. Codes are
idempotent per owner (the same owner shortening the same URL gets the same
code back) and diverge across owners because every candidate is seeded with
the owner id.

Classes:
    GenerationStrategy:
        Candidate generation strategy (random, deterministic hash, strong hash).
    CodeLedger:
        Process-wide record of issued codes and of the code issued per (owner, url).
    ShortCodeGenerator:
        Produces collision-free codes for (url, owner) pairs.

Example:
    >>> from linkshortener.utils.shortener import ShortCodeGenerator, GenerationStrategy
    >>> generator = ShortCodeGenerator(GenerationStrategy.DETERMINISTIC, length=7)
    >>> code = generator.generate('https://example.com', 'user-1')
    >>> code == generator.generate('https://example.com', 'user-1')
    True
    >>> code == generator.generate('https://example.com', 'user-2')
    False
"""

import base64
import hashlib
import logging
import secrets
import string
import threading
from enum import StrEnum

import xxhash

from linkshortener.constants import ShortCode
from linkshortener.exceptions import BadConfigurationError, CodeSpaceExhaustedError, InvalidInputError


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # base62: 26 lowercase + 26 uppercase + 10 digits


class GenerationStrategy(StrEnum):
    """Candidate generation strategy, valued by its configuration name."""

    RANDOM = 'RANDOM'  # uniform draw from the base62 alphabet
    DETERMINISTIC = 'BASE62'  # 128-bit content hash, base62 encoded
    STRONG = 'HASH'  # SHA-256, URL-safe base64 encoded


def encode_base62(number: int, length: int) -> str:
    """Encode the lowest `length` base62 digits of `number`, most significant first.

    Numbers with fewer digits are left padded with the first alphabet character.

    Example:
        >>> encode_base62(62, 3)
        'aba'
    """
    return ''.join(reversed([ALPHABET[(number // BASE**i) % BASE] for i in range(length)]))


class CodeLedger:
    """Record of every code issued in this process.

    Holds the set of issued codes plus the code assigned to each
    `(owner_id, url)` pair. Entries are never removed when links are deleted:
    an issued code is never handed out again.

    The ledger's lock is held by `ShortCodeGenerator` for the whole
    lookup, generate and record sequence, so exactly one code is ever
    installed per pair.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._issued: set[str] = set()
        self._assigned: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        with self.lock:
            return len(self._issued)

    def issued(self, code: str) -> bool:
        with self.lock:
            return code in self._issued

    def lookup(self, owner_id: str, url: str) -> str | None:
        with self.lock:
            return self._assigned.get((owner_id, url))

    def record(self, owner_id: str, url: str, code: str) -> None:
        with self.lock:
            self._issued.add(code)
            self._assigned[(owner_id, url)] = code

    def clear(self) -> None:
        with self.lock:
            self._issued.clear()
            self._assigned.clear()


class ShortCodeGenerator:
    """Generate short codes for (url, owner) pairs.

    Attributes:
        strategy (GenerationStrategy):
            Candidate generation strategy.
        length (int):
            Length of every generated code.
        ledger (CodeLedger):
            Issued-code ledger. Pass a shared instance to make several
            generators avoid each other's codes.

    Methods:
        generate(url: str, owner_id: str) -> str:
            Return the code for the pair, issuing a new one if needed.
            Raises InvalidInputError on empty arguments.
            Raises CodeSpaceExhaustedError when every attempt collides.
    """

    def __init__(
        self,
        strategy: GenerationStrategy = GenerationStrategy.DETERMINISTIC,
        length: int = ShortCode.DEFAULT_LENGTH,
        ledger: CodeLedger | None = None,
        max_attempts: int = ShortCode.MAX_ATTEMPTS,
    ):
        if not ShortCode.MIN_LENGTH <= length <= ShortCode.MAX_LENGTH:
            raise BadConfigurationError(
                f'Short code length must be between {ShortCode.MIN_LENGTH} and {ShortCode.MAX_LENGTH} (given value: {length}).'
            )

        self.strategy = GenerationStrategy(strategy)
        self.length = length
        self.ledger = ledger if ledger is not None else CodeLedger()
        self.max_attempts = max_attempts

    def generate(self, url: str, owner_id: str) -> str:
        """Return the short code for `url` owned by `owner_id`.

        Args:
            url (str): target URL as it will be stored
            owner_id (str): identifier of the owning user

        Returns:
            str: short code, identical for repeated calls with the same pair

        Raises:
            InvalidInputError: if `url` or `owner_id` is empty
            CodeSpaceExhaustedError: if all attempts hit already issued codes
        """
        if not url:
            raise InvalidInputError('URL cannot be empty.')
        if not owner_id:
            raise InvalidInputError('Owner id cannot be empty.')

        with self.ledger.lock:
            code = self.ledger.lookup(owner_id, url)
            if code is not None:
                return code

            for attempt in range(1, self.max_attempts + 1):
                candidate = self._candidate(f'{url}:{owner_id}:{attempt}')
                if not self.ledger.issued(candidate):
                    self.ledger.record(owner_id, url, candidate)
                    return candidate
                logger.debug('Short code collision, retrying.', extra={'attempt': attempt, 'strategy': str(self.strategy)})

        raise CodeSpaceExhaustedError(f'Failed to generate a unique short code after {self.max_attempts} attempts.')

    def _candidate(self, seed: str) -> str:
        match self.strategy:
            case GenerationStrategy.RANDOM:
                return ''.join(secrets.choice(ALPHABET) for _ in range(self.length))
            case GenerationStrategy.DETERMINISTIC:
                return encode_base62(xxhash.xxh3_128_intdigest(seed), self.length)
            case GenerationStrategy.STRONG:
                digest = hashlib.sha256(seed.encode('utf-8')).digest()
                return base64.urlsafe_b64encode(digest).decode('ascii').rstrip('=')[: self.length]
