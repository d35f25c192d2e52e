"""
Derivation functions for the Ultimate sideline scorekeeper.

Everything shown on the scoreboard is recomputed from the event log plus the
match config by the pure functions in this module. Nothing here mutates its
inputs, so recomputing after any edit or deletion yields the same values as
applying the actions one at a time.
"""
from typing import Dict, Iterable, List, Sequence

from ..models import (
    EventKind, LogRow, MatchConfig, MatchEvent, Scoreboard, TeamSide, TimeoutBalance,
)
from ..utils.time_utils import fmt_timestamp


def compute_scoreboard(events: Iterable[MatchEvent]) -> Scoreboard:
    """Count score events per side."""
    team_a = 0
    team_b = 0
    for event in events:
        if not event.is_score:
            continue
        if event.team_side is TeamSide.A:
            team_a += 1
        elif event.team_side is TeamSide.B:
            team_b += 1
    return Scoreboard(team_a=team_a, team_b=team_b)


def abba_label(start: str, score_index: int) -> str:
    """
    Label for the ``score_index``-th score (0-based) of the match.

    For start "M" the sequence is M, F, F, M, M, F, F, M, M, ...; "NONE"
    disables labelling.
    """
    if start not in ("M", "F") or score_index < 0:
        return ""
    other = "F" if start == "M" else "M"
    if score_index == 0:
        return start
    block = (score_index - 1) // 2
    return other if block % 2 == 0 else start


def compute_gender_label(events: Sequence[MatchEvent], start: str, score_index: int) -> str:
    """
    Gender label of a score event, given its position among score events.

    Args:
        events: Event log in insertion order
        start: Gender sequence start ("M", "F" or "NONE")
        score_index: Index of the score among the score events of ``events``

    Returns:
        "M", "F" or "" (labelling disabled or index out of range)
    """
    score_count = sum(1 for event in events if event.is_score)
    if score_index >= score_count:
        return ""
    return abba_label(start, score_index)


def gender_labels(events: Iterable[MatchEvent], start: str) -> Dict[int, str]:
    """Map event id → gender label; non-score events map to ""."""
    labels: Dict[int, str] = {}
    score_index = 0
    for event in events:
        if event.is_score:
            labels[event.event_id] = abba_label(start, score_index)
            score_index += 1
        else:
            labels[event.event_id] = ""
    return labels


def compute_timeout_balances(
    config: MatchConfig, events: Iterable[MatchEvent]
) -> Dict[TeamSide, TimeoutBalance]:
    """
    Fold timeout and halftime events into per-team balances.

    A timeout debits one from its side's total and half balance. A halftime
    resets both sides' half balance to ``min(per_half, total_remaining)``;
    with per-half limits disabled the half balance mirrors the total.
    Balances are floored at zero.
    """
    balances = {
        side: TimeoutBalance(config.timeouts_total, config.half_allotment())
        for side in (TeamSide.A, TeamSide.B)
    }

    for event in events:
        if event.kind is EventKind.TIMEOUT and event.team_side in balances:
            balance = balances[event.team_side]
            balance.total_remaining = max(0, balance.total_remaining - 1)
            balance.half_remaining = max(0, balance.half_remaining - 1)
        elif event.kind is EventKind.HALFTIME:
            for balance in balances.values():
                if config.uses_per_half_timeouts:
                    balance.half_remaining = min(config.timeouts_per_half, balance.total_remaining)
                else:
                    balance.half_remaining = balance.total_remaining

    if not config.uses_per_half_timeouts:
        for balance in balances.values():
            balance.half_remaining = balance.total_remaining

    return balances


def build_log_rows(events: Sequence[MatchEvent], start: str) -> List[LogRow]:
    """
    Build the scoring table rows, newest first.

    Each row carries the scoreboard as it stood right after that event.
    """
    labels = gender_labels(events, start)
    rows: List[LogRow] = []
    team_a = 0
    team_b = 0
    for event in events:
        if event.is_score:
            if event.team_side is TeamSide.A:
                team_a += 1
            elif event.team_side is TeamSide.B:
                team_b += 1
        rows.append(LogRow(
            event_id=event.event_id,
            kind=event.kind.value,
            label=event.display_label,
            team_side=event.team_side.value,
            team_name=event.team_name,
            scorer=event.scorer,
            assistor=event.assistor,
            gender_label=labels[event.event_id],
            scoreboard=f"{team_a}:{team_b}",
            time=fmt_timestamp(event.timestamp),
            halftime_reason=event.halftime_reason.value if event.halftime_reason else None,
            editable=event.kind in (EventKind.SCORE, EventKind.TIMEOUT, EventKind.HALFTIME),
        ))
    rows.reverse()
    return rows
