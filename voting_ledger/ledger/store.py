"""
Entity store used by the ledger services.

`SqlAlchemyStore` is the production implementation: the one-vote-per-voter rule
is the `uq_votes_voter_election` unique constraint, so it holds across any
number of worker processes. `InMemoryStore` keeps the same contract inside a
single process and exists so the services can be exercised without a database.
"""
import logging
import threading
import uuid
from datetime import datetime
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Election, Candidate, Voter, Vote
from .exceptions import DuplicateVote

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    def get_election(self, election_id) -> Election | None: ...
    def get_candidate(self, candidate_id) -> Candidate | None: ...
    def get_voter(self, voter_id) -> Voter | None: ...
    def list_elections(self) -> list[Election]: ...
    def list_open_elections(self, now: datetime) -> list[Election]: ...
    def list_candidates(self, election_id, approved_only: bool = True) -> list[Candidate]: ...
    def find_vote(self, voter_id, election_id) -> Vote | None: ...
    def votes_for_voter(self, voter_id) -> list[Vote]: ...
    def insert_vote(self, voter_id, election_id, candidate_id, cast_at: datetime) -> Vote: ...
    def increment_counters(self, election_id, candidate_id) -> None: ...
    def count_votes(self, election_id) -> int: ...
    def count_votes_by_candidate(self, election_id) -> dict: ...
    def count_active_voters(self) -> int: ...
    def set_election_total(self, election_id, total: int) -> None: ...
    def set_candidate_count(self, candidate_id, count: int) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class SqlAlchemyStore:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def get_election(self, election_id):
        return self.session.get(Election, election_id)

    def get_candidate(self, candidate_id):
        return self.session.get(Candidate, candidate_id)

    def get_voter(self, voter_id):
        return self.session.get(Voter, voter_id)

    def list_elections(self):
        return self.session.scalars(select(Election).order_by(Election.created_at.asc())).all()

    def list_open_elections(self, now):
        stmt = (
            select(Election)
            .where(
                Election.status == Election.STATUS_PUBLISHED,
                Election.start_date <= now,
                Election.end_date >= now,
            )
            .order_by(Election.end_date.asc())
        )
        return self.session.scalars(stmt).all()

    def list_candidates(self, election_id, approved_only=True):
        stmt = select(Candidate).where(Candidate.election_id == election_id)
        if approved_only:
            stmt = stmt.where(Candidate.status == Candidate.STATUS_APPROVED)
        return self.session.scalars(stmt.order_by(Candidate.created_at.asc())).all()

    def find_vote(self, voter_id, election_id):
        stmt = select(Vote).where(Vote.voter_id == voter_id, Vote.election_id == election_id)
        return self.session.scalars(stmt).first()

    def votes_for_voter(self, voter_id):
        stmt = select(Vote).where(Vote.voter_id == voter_id).order_by(Vote.cast_at.desc())
        return self.session.scalars(stmt).all()

    def insert_vote(self, voter_id, election_id, candidate_id, cast_at):
        vote = Vote(
            voter_id=voter_id,
            election_id=election_id,
            candidate_id=candidate_id,
            cast_at=cast_at,
        )
        self.session.add(vote)
        try:
            # Flush so the unique constraint is checked now, inside this transaction
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            if self.find_vote(voter_id, election_id) is not None:
                raise DuplicateVote()
            raise
        return vote

    def increment_counters(self, election_id, candidate_id):
        # Server-side increments so concurrent admissions never lose an update
        self.session.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id)
            .values(vote_count=Candidate.vote_count + 1)
        )
        self.session.execute(
            update(Election)
            .where(Election.id == election_id)
            .values(total_votes=Election.total_votes + 1)
        )

    def count_votes(self, election_id):
        stmt = select(func.count(Vote.id)).where(Vote.election_id == election_id)
        return self.session.scalar(stmt) or 0

    def count_votes_by_candidate(self, election_id):
        stmt = (
            select(Vote.candidate_id, func.count(Vote.id))
            .where(Vote.election_id == election_id)
            .group_by(Vote.candidate_id)
        )
        return {candidate_id: int(votes) for candidate_id, votes in self.session.execute(stmt)}

    def count_active_voters(self):
        stmt = select(func.count(Voter.id)).where(Voter.standing == Voter.STANDING_ACTIVE)
        return self.session.scalar(stmt) or 0

    def set_election_total(self, election_id, total):
        self.session.execute(update(Election).where(Election.id == election_id).values(total_votes=total))

    def set_candidate_count(self, candidate_id, count):
        self.session.execute(update(Candidate).where(Candidate.id == candidate_id).values(vote_count=count))

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()


class _UnitOfWork:
    """Writes staged by one thread until it commits or rolls back."""

    def __init__(self):
        self.votes: list = []
        self.election_deltas: dict = {}
        self.candidate_deltas: dict = {}
        self.election_totals: dict = {}
        self.candidate_counts: dict = {}


class InMemoryStore:
    """
    Process-local store holding transient model instances.

    The lock stands in for the database unique constraint: `insert_vote` is an
    atomic insert-if-absent on (voter_id, election_id). Writes are staged per
    thread and only become visible on `commit`; `rollback` discards them and
    releases any (voter_id, election_id) keys they reserved.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._local = threading.local()
        self.elections: dict = {}
        self.candidates: dict = {}
        self.voters: dict = {}
        self.votes: dict = {}
        self._vote_keys: dict = {}

    @property
    def _work(self) -> _UnitOfWork:
        work = getattr(self._local, "work", None)
        if work is None:
            work = self._local.work = _UnitOfWork()
        return work

    # Seeding helpers; stand-ins for the admin and auth services

    def add_election(self, election: Election) -> Election:
        election.id = election.id or uuid.uuid4()
        election.status = election.status or Election.STATUS_DRAFT
        election.total_votes = election.total_votes or 0
        election.created_at = election.created_at or election.start_date
        self.elections[election.id] = election
        return election

    def add_candidate(self, candidate: Candidate) -> Candidate:
        candidate.id = candidate.id or uuid.uuid4()
        candidate.status = candidate.status or Candidate.STATUS_PENDING
        candidate.vote_count = candidate.vote_count or 0
        self.candidates[candidate.id] = candidate
        return candidate

    def add_voter(self, voter: Voter) -> Voter:
        voter.id = voter.id or uuid.uuid4()
        voter.standing = voter.standing or Voter.STANDING_ACTIVE
        self.voters[voter.id] = voter
        return voter

    # EntityStore

    def get_election(self, election_id):
        return self.elections.get(election_id)

    def get_candidate(self, candidate_id):
        return self.candidates.get(candidate_id)

    def get_voter(self, voter_id):
        return self.voters.get(voter_id)

    def list_elections(self):
        return list(self.elections.values())

    def list_open_elections(self, now):
        return sorted(
            (e for e in self.elections.values() if e.is_voting_open(now)),
            key=lambda e: e.end_date,
        )

    def list_candidates(self, election_id, approved_only=True):
        return [
            c for c in self.candidates.values()
            if c.election_id == election_id and (c.is_approved or not approved_only)
        ]

    def find_vote(self, voter_id, election_id):
        vote_id = self._vote_keys.get((voter_id, election_id))
        if not vote_id:
            return None
        vote = self.votes.get(vote_id)
        if vote is None:
            # Reserved by an uncommitted insert; only its own thread sees it
            vote = next((v for v in self._work.votes if v.id == vote_id), None)
        return vote

    def votes_for_voter(self, voter_id):
        votes = [v for v in self.votes.values() if v.voter_id == voter_id]
        return sorted(votes, key=lambda v: v.cast_at, reverse=True)

    def insert_vote(self, voter_id, election_id, candidate_id, cast_at):
        with self._lock:
            key = (voter_id, election_id)
            if key in self._vote_keys:
                raise DuplicateVote()
            vote = Vote(
                id=uuid.uuid4(),
                voter_id=voter_id,
                election_id=election_id,
                candidate_id=candidate_id,
                cast_at=cast_at,
            )
            self._vote_keys[key] = vote.id
        self._work.votes.append(vote)
        return vote

    def increment_counters(self, election_id, candidate_id):
        work = self._work
        work.candidate_deltas[candidate_id] = work.candidate_deltas.get(candidate_id, 0) + 1
        work.election_deltas[election_id] = work.election_deltas.get(election_id, 0) + 1

    def count_votes(self, election_id):
        return sum(1 for v in self.votes.values() if v.election_id == election_id)

    def count_votes_by_candidate(self, election_id):
        counts: dict = {}
        for vote in self.votes.values():
            if vote.election_id == election_id:
                counts[vote.candidate_id] = counts.get(vote.candidate_id, 0) + 1
        return counts

    def count_active_voters(self):
        return sum(1 for v in self.voters.values() if v.is_active)

    def set_election_total(self, election_id, total):
        self._work.election_totals[election_id] = total

    def set_candidate_count(self, candidate_id, count):
        self._work.candidate_counts[candidate_id] = count

    def commit(self):
        work = self._work
        with self._lock:
            for vote in work.votes:
                self.votes[vote.id] = vote
            for election_id, total in work.election_totals.items():
                self.elections[election_id].total_votes = total
            for candidate_id, count in work.candidate_counts.items():
                self.candidates[candidate_id].vote_count = count
            for election_id, delta in work.election_deltas.items():
                self.elections[election_id].total_votes += delta
            for candidate_id, delta in work.candidate_deltas.items():
                self.candidates[candidate_id].vote_count += delta
        self._local.work = _UnitOfWork()

    def rollback(self):
        work = self._work
        with self._lock:
            for vote in work.votes:
                key = (vote.voter_id, vote.election_id)
                if self._vote_keys.get(key) == vote.id:
                    del self._vote_keys[key]
        if work.votes:
            logger.debug("Released %d staged vote(s) on rollback", len(work.votes))
        self._local.work = _UnitOfWork()
