"""Turn-order arithmetic over immutable player snapshots.

Nothing here touches the session; callers hand in snapshots and write
the result back themselves. ``turn_order_domain`` falls back to the app
config when no card count is passed in.
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence

from flask import current_app


class Seat(NamedTuple):
    player_id: int
    turn_order: int
    has_passed: bool


def snapshot(players) -> List[Seat]:
    return [Seat(p.id, p.turn_order, bool(p.has_passed)) for p in players]


def turn_order_domain(card_count: Optional[int] = None) -> List[int]:
    """Valid turn orders: one per strategy card in the active ruleset."""
    if card_count is None:
        card_count = int(current_app.config.get('STRATEGY_CARD_COUNT', 8))
    return list(range(1, card_count + 1))


def all_passed(seats: Iterable[Seat]) -> bool:
    seats = list(seats)
    return bool(seats) and all(s.has_passed for s in seats)


def scan_order(after: int, domain: Sequence[int]) -> List[int]:
    """Domain values strictly after ``after``, wrapping once round to ``after`` itself."""
    ordered = sorted(domain)
    return [v for v in ordered if v > after] + [v for v in ordered if v <= after]


def next_seat(seats: Sequence[Seat], after: int, domain: Sequence[int]) -> Optional[Seat]:
    """First unpassed seat following turn order ``after``.

    Returns None when nobody in the domain is left to play.
    """
    by_order = {s.turn_order: s for s in seats}
    for candidate in scan_order(after, domain):
        seat = by_order.get(candidate)
        if seat is not None and not seat.has_passed:
            return seat
    return None


def first_seat(seats: Sequence[Seat], domain: Sequence[int]) -> Optional[Seat]:
    """Lowest unpassed seat in the domain."""
    return next_seat(seats, min(domain) - 1, domain) if domain else None


def lowest_free_order(taken: Iterable[int], domain: Sequence[int]) -> Optional[int]:
    taken = set(taken)
    for value in sorted(domain):
        if value not in taken:
            return value
    return None
