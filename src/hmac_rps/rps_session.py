from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from rps_commit_reveal import Commitment, CommitmentService, RandomSource
from rps_errors import InvalidInput, ProtocolViolation
from rps_help_table import build_table
from rps_protocol import Move, MoveSet, Outcome, determine_outcome

SessionState = Literal[
    "init",
    "commitment_issued",
    "help_requested",
    "exit_requested",
    "resolved",
    "terminated",
]
TurnKind = Literal["help", "exit", "resolved"]

FINAL_STATES: tuple[SessionState, ...] = ("exit_requested", "resolved", "terminated")

EXIT_INPUT = "0"
HELP_INPUT = "?"

_NUMBER_RE = re.compile(r"0|[1-9][0-9]*")


@dataclass(frozen=True)
class TurnResult:
    kind: TurnKind
    table: list[list[str]] | None = None
    human_move: Move | None = None
    computer_move: Move | None = None
    outcome: Outcome | None = None
    commitment: Commitment | None = None


class GameSession:
    """One game: commit, read the player's answer, resolve, reveal.

    Help requests keep the same commitment; any other answer ends the session
    in "exit_requested", "resolved" or, for invalid input, "terminated".
    """

    def __init__(self, move_set: MoveSet, source: RandomSource | None = None) -> None:
        self.move_set = move_set
        self._commitment = CommitmentService(move_set, source)
        self.state: SessionState = "init"

    @property
    def digest(self) -> str:
        return self._commitment.digest

    @property
    def revealed(self) -> bool:
        return self._commitment.revealed

    def start(self) -> str:
        if self.state in ("init", "help_requested"):
            self.state = "commitment_issued"
        elif self.state != "commitment_issued":
            raise ProtocolViolation(f"cannot issue a commitment in state {self.state!r}")
        return self._commitment.digest

    @property
    def finished(self) -> bool:
        return self.state in FINAL_STATES

    def handle_input(self, text: str) -> TurnResult:
        if self.state not in ("commitment_issued", "help_requested"):
            raise ProtocolViolation(f"input not accepted in state {self.state!r}")

        choice = text.strip()
        if choice == HELP_INPUT:
            self.state = "help_requested"
            return TurnResult(kind="help", table=build_table(self.move_set))

        if choice == EXIT_INPUT:
            self.state = "exit_requested"
            return TurnResult(kind="exit")

        number = self._parse_move_number(choice)
        human = self.move_set.by_number(number)
        self._commitment.lock_in()
        computer = self._commitment.computer_move
        outcome = determine_outcome(self.move_set, human, computer)
        commitment = self._commitment.reveal()
        self.state = "resolved"
        return TurnResult(
            kind="resolved",
            human_move=human,
            computer_move=computer,
            outcome=outcome,
            commitment=commitment,
        )

    def _parse_move_number(self, choice: str) -> int:
        # int() never sees more digits than len(move_set) has.
        max_digits = len(str(len(self.move_set)))
        if len(choice) > max_digits or not _NUMBER_RE.fullmatch(choice) or int(choice) > len(self.move_set):
            self.state = "terminated"
            raise InvalidInput("Please choose a valid move by entering an available number.")
        return int(choice)
