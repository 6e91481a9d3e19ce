import logging

from .exceptions import ElectionNotFound

logger = logging.getLogger(__name__)


def _drift(store, election):
    actual_by_candidate = store.count_votes_by_candidate(election.id)
    actual_total = store.count_votes(election.id)

    candidates = []
    for candidate in store.list_candidates(election.id, approved_only=False):
        actual = actual_by_candidate.get(candidate.id, 0)
        if (candidate.vote_count or 0) != actual:
            candidates.append({"candidate_id": candidate.id, "cached": candidate.vote_count or 0, "actual": actual})

    election_drift = None
    if (election.total_votes or 0) != actual_total:
        election_drift = {"cached": election.total_votes or 0, "actual": actual_total}

    return election_drift, candidates


def check_consistency(store, election_id) -> dict:
    """Compare cached counters against the vote table without changing anything."""
    election = store.get_election(election_id)
    if election is None:
        raise ElectionNotFound()

    election_drift, candidate_drift = _drift(store, election)
    return {
        "election_id": election.id,
        "consistent": election_drift is None and not candidate_drift,
        "total_votes": election_drift,
        "candidates": candidate_drift,
    }


def reconcile_counters(store, election_id=None) -> list[dict]:
    """
    Rewrite cached counters from the vote table.

    Reconciles one election, or every election when `election_id` is None.
    Returns one report per election that needed a correction.
    """
    if election_id is not None:
        election = store.get_election(election_id)
        if election is None:
            raise ElectionNotFound()
        elections = [election]
    else:
        elections = store.list_elections()

    corrections = []
    try:
        for election in elections:
            election_drift, candidate_drift = _drift(store, election)
            if election_drift is None and not candidate_drift:
                continue

            if election_drift is not None:
                store.set_election_total(election.id, election_drift["actual"])
            for row in candidate_drift:
                store.set_candidate_count(row["candidate_id"], row["actual"])

            logger.warning(
                "Counter drift repaired election=%s total=%s candidates=%d",
                election.id, election_drift, len(candidate_drift),
            )
            corrections.append({
                "election_id": election.id,
                "total_votes": election_drift,
                "candidates": candidate_drift,
            })
        store.commit()
    except Exception:
        store.rollback()
        raise

    return corrections
