from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from typing import Final, Protocol

from rps_errors import CryptoUnavailable, ProtocolViolation
from rps_protocol import Move, MoveSet

HMAC_ALGORITHM: Final[str] = "sha3_256"
SECRET_KEY_BYTES: Final[int] = 32


class RandomSource(Protocol):
    def token_bytes(self, n: int) -> bytes: ...

    def randbelow(self, n: int) -> int: ...


class SystemRandomSource:
    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)


@dataclass(frozen=True)
class Commitment:
    digest: str
    secret_key: str


def generate_secret_key(source: RandomSource | None = None) -> bytes:
    source = source or SystemRandomSource()
    try:
        key = source.token_bytes(SECRET_KEY_BYTES)
    except (NotImplementedError, OSError) as exc:
        raise CryptoUnavailable(f"secure random source unavailable: {exc}") from exc
    if len(key) != SECRET_KEY_BYTES:
        raise CryptoUnavailable(f"random source returned {len(key)} bytes, expected {SECRET_KEY_BYTES}")
    return key


def choose_move(move_set: MoveSet, source: RandomSource | None = None) -> Move:
    source = source or SystemRandomSource()
    try:
        return move_set.moves[source.randbelow(len(move_set))]
    except (NotImplementedError, OSError) as exc:
        raise CryptoUnavailable(f"secure random source unavailable: {exc}") from exc


def compute_hmac(move: Move, secret_key: bytes, algorithm: str = HMAC_ALGORITHM) -> str:
    try:
        mac = hmac.new(secret_key, move.encode("utf-8"), algorithm)
    except ValueError as exc:
        raise CryptoUnavailable(f"hash algorithm {algorithm!r} unavailable: {exc}") from exc
    return mac.hexdigest()


def reveal_key(secret_key: bytes) -> str:
    return secret_key.hex()


def verify_hmac(*, expected_hmac: str, move: Move, secret_key: str) -> bool:
    """Recompute the digest from a revealed hex key, as the human would."""
    try:
        key = bytes.fromhex(secret_key)
    except ValueError:
        return False
    computed = compute_hmac(move, key)
    return secrets.compare_digest(expected_hmac.strip().lower().encode("utf-8"), computed.encode("ascii"))


class CommitmentService:
    """Holds one session's secret key and computer move.

    The digest is public from construction on. The key is handed out only
    after lock_in() records that the human's move has been accepted.
    """

    def __init__(self, move_set: MoveSet, source: RandomSource | None = None) -> None:
        source = source or SystemRandomSource()
        self._secret_key = generate_secret_key(source)
        self.computer_move: Move = choose_move(move_set, source)
        self.digest: str = compute_hmac(self.computer_move, self._secret_key)
        self._locked = False
        self.revealed = False

    @property
    def locked(self) -> bool:
        return self._locked

    def lock_in(self) -> None:
        self._locked = True

    def reveal(self) -> Commitment:
        if not self._locked:
            raise ProtocolViolation("secret key requested before the player's move was locked in")
        self.revealed = True
        return Commitment(digest=self.digest, secret_key=reveal_key(self._secret_key))
