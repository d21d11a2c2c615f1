from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Literal

from rps_errors import ConfigurationError, InvalidMove

Move = str
Outcome = Literal["draw", "win", "lose"]

OUTCOME_LABELS: dict[Outcome, str] = {"draw": "Draw", "win": "Win", "lose": "Lose"}


@dataclass(frozen=True)
class MoveSet:
    moves: tuple[Move, ...]

    @classmethod
    def parse(cls, labels: Iterable[str]) -> "MoveSet":
        moves = tuple(labels)
        if len(moves) < 3 or len(moves) % 2 != 1:
            raise ConfigurationError(
                f"expected an odd number (at least 3) of moves, got {len(moves)}"
            )
        duplicates = sorted({m for m in moves if moves.count(m) > 1})
        if duplicates:
            raise ConfigurationError("moves must not repeat: " + ", ".join(duplicates))
        return cls(moves=moves)

    def __len__(self) -> int:
        return len(self.moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(self.moves)

    def __contains__(self, move: object) -> bool:
        return move in self.moves

    def index_of(self, move: Move) -> int:
        try:
            return self.moves.index(move)
        except ValueError:
            raise InvalidMove(f"move not recognized: {move!r}") from None

    def by_number(self, number: int) -> Move:
        """Move for a 1-based menu number."""
        if not 1 <= number <= len(self.moves):
            raise InvalidMove(f"no move numbered {number}")
        return self.moves[number - 1]


def beats(i: int, j: int, n: int) -> bool:
    # The move at position j beats the next-lower n // 2 positions on the cycle.
    return 1 <= (j - i + n) % n <= n // 2


def determine_outcome(move_set: MoveSet, human: Move, computer: Move) -> Outcome:
    n = len(move_set)
    i_human = move_set.index_of(human)
    i_computer = move_set.index_of(computer)

    if i_human == i_computer:
        return "draw"
    return "win" if beats(i_computer, i_human, n) else "lose"
