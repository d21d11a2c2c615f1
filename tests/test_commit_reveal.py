from __future__ import annotations

import hashlib
import hmac
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
APP_DIR = ROOT / "src" / "hmac_rps"
sys.path.insert(0, str(APP_DIR))

from rps_commit_reveal import (  # type: ignore[import-not-found]  # noqa: E402
    SECRET_KEY_BYTES,
    CommitmentService,
    SystemRandomSource,
    choose_move,
    compute_hmac,
    generate_secret_key,
    reveal_key,
    verify_hmac,
)
from rps_errors import CryptoUnavailable, ProtocolViolation  # type: ignore[import-not-found]  # noqa: E402
from rps_protocol import MoveSet  # type: ignore[import-not-found]  # noqa: E402

MOVES = MoveSet.parse(["Rock", "Paper", "Scissors", "Lizard", "Spock"])
KEY = bytes(range(32))


class FixedSource:
    def __init__(self, key: bytes = KEY, index: int = 0) -> None:
        self.key = key
        self.index = index
        self.calls: list[str] = []

    def token_bytes(self, n: int) -> bytes:
        self.calls.append("token_bytes")
        return self.key[:n]

    def randbelow(self, n: int) -> int:
        self.calls.append("randbelow")
        return self.index % n


class BrokenSource:
    def token_bytes(self, n: int) -> bytes:
        raise NotImplementedError("no entropy")

    def randbelow(self, n: int) -> int:
        raise NotImplementedError("no entropy")


def test_compute_hmac_is_sha3_256_over_the_label() -> None:
    expected = hmac.new(KEY, b"Paper", hashlib.sha3_256).hexdigest()
    assert compute_hmac("Paper", KEY) == expected
    assert len(expected) == 64


def test_compute_hmac_is_deterministic_and_sensitive() -> None:
    digest = compute_hmac("Rock", KEY)
    assert compute_hmac("Rock", KEY) == digest
    assert compute_hmac("Paper", KEY) != digest
    assert compute_hmac("Rock", bytes(32)) != digest


def test_unavailable_algorithm() -> None:
    with pytest.raises(CryptoUnavailable):
        compute_hmac("Rock", KEY, algorithm="no-such-hash")


def test_generate_secret_key() -> None:
    key = generate_secret_key()
    assert isinstance(key, bytes)
    assert len(key) == SECRET_KEY_BYTES
    assert generate_secret_key(FixedSource()) == KEY


def test_broken_random_source_is_fatal() -> None:
    with pytest.raises(CryptoUnavailable):
        generate_secret_key(BrokenSource())
    with pytest.raises(CryptoUnavailable):
        choose_move(MOVES, BrokenSource())
    with pytest.raises(CryptoUnavailable):
        generate_secret_key(FixedSource(key=b"short"))


def test_choose_move_uses_source() -> None:
    assert choose_move(MOVES, FixedSource(index=3)) == "Lizard"
    assert choose_move(MOVES, SystemRandomSource()) in MOVES


def test_reveal_key_is_hex() -> None:
    assert reveal_key(b"\x00\xff") == "00ff"
    assert bytes.fromhex(reveal_key(KEY)) == KEY


def test_verify_hmac() -> None:
    digest = compute_hmac("Spock", KEY)
    assert verify_hmac(expected_hmac=digest, move="Spock", secret_key=KEY.hex())
    assert verify_hmac(expected_hmac=digest.upper(), move="Spock", secret_key=KEY.hex())
    assert not verify_hmac(expected_hmac=digest, move="Rock", secret_key=KEY.hex())
    assert not verify_hmac(expected_hmac=digest, move="Spock", secret_key=bytes(32).hex())
    assert not verify_hmac(expected_hmac=digest, move="Spock", secret_key="not-hex")


def test_service_commits_before_anything_is_revealed() -> None:
    source = FixedSource(index=2)
    service = CommitmentService(MOVES, source)

    assert source.calls == ["token_bytes", "randbelow"]
    assert service.computer_move == "Scissors"
    assert service.digest == compute_hmac("Scissors", KEY)
    assert not service.revealed

    with pytest.raises(ProtocolViolation):
        service.reveal()
    assert not service.revealed


def test_service_reveal_after_lock_in_round_trips() -> None:
    service = CommitmentService(MOVES)
    service.lock_in()
    commitment = service.reveal()

    assert service.revealed
    assert commitment.digest == service.digest
    assert verify_hmac(
        expected_hmac=commitment.digest,
        move=service.computer_move,
        secret_key=commitment.secret_key,
    )
