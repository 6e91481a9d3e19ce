from .exceptions import ElectionNotFound
from .tally import get_tally


def _percentage(part: int, whole: int, precision: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100.0, precision)


def get_results(store, election_id, consistent: bool = False, precision: int = 2) -> dict:
    """
    Ranked results for an election, safe to call at any status.

    `winner_id` is only set when a single candidate holds a strictly positive
    maximum; a shared top count leaves it None and sets `is_tie`.
    """
    election = store.get_election(election_id)
    if election is None:
        raise ElectionNotFound()

    tally = get_tally(store, election_id, consistent=consistent)

    if consistent:
        total_votes = store.count_votes(election_id)
    else:
        total_votes = election.total_votes or 0

    top = max((entry.vote_count for entry in tally), default=0)
    leaders = [entry for entry in tally if entry.vote_count == top] if top > 0 else []

    eligible_voters = store.count_active_voters()

    return {
        "election_id": election.id,
        "title": election.title,
        "status": election.status,
        "total_votes": total_votes,
        "candidates": [
            {
                "id": entry.candidate_id,
                "name": entry.name,
                "vote_count": entry.vote_count,
                "percentage": _percentage(entry.vote_count, total_votes, precision),
                "rank": entry.rank,
            }
            for entry in tally
        ],
        "winner_id": leaders[0].candidate_id if len(leaders) == 1 else None,
        "is_tie": len(leaders) > 1,
        "turnout": {
            "votes": total_votes,
            "eligible_voters": eligible_voters,
            "percentage": _percentage(total_votes, eligible_voters, precision),
        },
    }
