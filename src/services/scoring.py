"""Aggregation of tasting scores for a social session.

Everything here is pure: callers load host entries and guest score entries
from the database, convert them to ``ScoreRecord`` and get a
``SessionResults`` back. Results are recomputed on every request.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoreRecord:
    """One stored score: a host entry or a guest's score of a host entry."""

    entry_id: int
    total_score: int | None
    parent_entry_id: int | None = None
    guest_id: str | None = None
    guest_name: str | None = None


@dataclass(frozen=True)
class WineScore:
    """Average score for one host entry.

    ``count`` is the number of contributing scores. A wine nobody scored
    has ``average == 0`` and ``count == 0``; check ``has_scores`` rather
    than the average to tell it apart from a wine scored 0.
    """

    entry_id: int
    average: int
    count: int

    @property
    def has_scores(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class GuestScore:
    """Average of every score one guest submitted in the session."""

    guest_id: str
    guest_name: str | None
    average: int
    count: int


@dataclass(frozen=True)
class Superlatives:
    top_wine: WineScore | None = None
    most_generous: GuestScore | None = None
    harshest_critic: GuestScore | None = None


@dataclass(frozen=True)
class SessionResults:
    wines: list[WineScore] = field(default_factory=list)
    guests: list[GuestScore] = field(default_factory=list)
    superlatives: Superlatives = field(default_factory=Superlatives)


def round_half_up(total: int, count: int) -> int:
    """Round total / count to the nearest integer, halves going up."""
    if count == 0:
        return 0
    return (2 * total + count) // (2 * count)


def _present(scores: Iterable[int | None]) -> list[int]:
    return [score for score in scores if score is not None]


def per_wine_average(host_entry: ScoreRecord, guest_scores: Iterable[ScoreRecord]) -> WineScore:
    """Average the host's score and every guest score of ``host_entry``."""
    values = _present(
        [host_entry.total_score]
        + [s.total_score for s in guest_scores if s.parent_entry_id == host_entry.entry_id]
    )
    return WineScore(
        entry_id=host_entry.entry_id,
        average=round_half_up(sum(values), len(values)),
        count=len(values),
    )


def per_guest_average(guest_id: str, guest_scores: Iterable[ScoreRecord]) -> GuestScore:
    """Average every score ``guest_id`` submitted across the session."""
    mine = [s for s in guest_scores if s.guest_id == guest_id]
    values = _present(s.total_score for s in mine)
    name = next((s.guest_name for s in mine if s.guest_name), None)
    return GuestScore(
        guest_id=guest_id,
        guest_name=name,
        average=round_half_up(sum(values), len(values)),
        count=len(values),
    )


def guest_averages(guest_scores: Sequence[ScoreRecord]) -> list[GuestScore]:
    """Per-guest averages, in order of each guest's first score."""
    seen: list[str] = []
    for score in guest_scores:
        if score.guest_id is not None and score.guest_id not in seen:
            seen.append(score.guest_id)
    return [per_guest_average(guest_id, guest_scores) for guest_id in seen]


def superlatives(wines: Sequence[WineScore], guests: Sequence[GuestScore]) -> Superlatives:
    """Pick the top wine, most generous guest and harshest critic.

    Ties go to the first item encountered. The harshest critic is only
    reported when more than one guest has scored, and never repeats the
    most generous guest.
    """
    scored_wines = [w for w in wines if w.has_scores]
    top_wine = None
    for wine in scored_wines:
        if top_wine is None or wine.average > top_wine.average:
            top_wine = wine

    scorers = [g for g in guests if g.count > 0]
    most_generous = None
    for guest in scorers:
        if most_generous is None or guest.average > most_generous.average:
            most_generous = guest

    harshest_critic = None
    if len(scorers) > 1:
        for guest in scorers:
            if guest is most_generous:
                continue
            if harshest_critic is None or guest.average < harshest_critic.average:
                harshest_critic = guest

    return Superlatives(
        top_wine=top_wine,
        most_generous=most_generous,
        harshest_critic=harshest_critic,
    )


def aggregate(
    host_entries: Sequence[ScoreRecord], guest_scores: Sequence[ScoreRecord]
) -> SessionResults:
    """Compute per-wine and per-guest averages plus superlatives."""
    wines = [per_wine_average(entry, guest_scores) for entry in host_entries]
    guests = guest_averages(guest_scores)
    return SessionResults(wines=wines, guests=guests, superlatives=superlatives(wines, guests))
