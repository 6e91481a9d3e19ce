from dataclasses import dataclass

from .exceptions import ElectionNotFound


@dataclass(frozen=True)
class TallyEntry:
    candidate_id: object
    name: str
    vote_count: int
    rank: int


def rank_counts(rows):
    """
    Order (candidate, count) pairs by count descending and assign competition
    ranks (1, 1, 3). Equal counts share a rank; the name ordering inside a tie
    is for display only.
    """
    ordered = sorted(rows, key=lambda row: (-row[1], (row[0].name or "").lower(), str(row[0].id)))

    ranked = []
    previous = None
    rank = 0
    for position, (candidate, count) in enumerate(ordered, start=1):
        if count != previous:
            rank = position
            previous = count
        ranked.append((candidate, count, rank))
    return ranked


def get_tally(store, election_id, consistent: bool = False) -> list[TallyEntry]:
    """
    Per-candidate vote counts for the approved candidates of an election.

    By default the cached counters are read. With `consistent=True` the counts
    are aggregated from the vote table instead; both must agree.
    """
    if store.get_election(election_id) is None:
        raise ElectionNotFound()

    candidates = store.list_candidates(election_id, approved_only=True)

    if consistent:
        counts = store.count_votes_by_candidate(election_id)
        rows = [(c, counts.get(c.id, 0)) for c in candidates]
    else:
        rows = [(c, c.vote_count or 0) for c in candidates]

    return [
        TallyEntry(candidate_id=c.id, name=c.name, vote_count=count, rank=rank)
        for c, count, rank in rank_counts(rows)
    ]
