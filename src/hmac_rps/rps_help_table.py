from __future__ import annotations

from tabulate import tabulate

from rps_protocol import OUTCOME_LABELS, MoveSet, determine_outcome

CORNER_HEADER = "v PC\\User >"


def build_table(move_set: MoveSet) -> list[list[str]]:
    # Rows are the computer's move, columns the user's; cells read for the user.
    rows: list[list[str]] = []
    for computer in move_set:
        row = [computer]
        for user in move_set:
            row.append(OUTCOME_LABELS[determine_outcome(move_set, user, computer)])
        rows.append(row)
    return rows


def format_table(move_set: MoveSet) -> str:
    headers = [CORNER_HEADER, *move_set]
    lines = [
        "Results are from the user's point of view:",
        tabulate(build_table(move_set), headers=headers, tablefmt="grid", disable_numparse=True),
    ]
    return "\n".join(lines)
