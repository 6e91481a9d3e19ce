from datetime import timedelta
from pathlib import Path
import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from flask_jwt_extended import create_access_token

from voting_ledger import create_app
from voting_ledger.config import TestingConfig
from voting_ledger.extensions import db
from voting_ledger.models import Election, Candidate, Voter
from voting_ledger.utils.clock import utcnow


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"

    class _Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{db_file}"

    app = create_app(_Config)

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def make_election(db_session):
    def _make(status=Election.STATUS_PUBLISHED, start=None, end=None, title="Student Council 2026"):
        now = utcnow()
        election = Election(
            title=title,
            description="Annual student council election",
            start_date=start or now - timedelta(hours=1),
            end_date=end or now + timedelta(days=7),
            status=status,
        )
        db_session.add(election)
        db_session.commit()
        return election

    return _make


@pytest.fixture()
def make_candidate(db_session):
    def _make(election, name, status=Candidate.STATUS_APPROVED):
        candidate = Candidate(election_id=election.id, name=name, status=status)
        db_session.add(candidate)
        db_session.commit()
        return candidate

    return _make


@pytest.fixture()
def make_voter(db_session):
    counter = {"n": 0}

    def _make(standing=Voter.STANDING_ACTIVE, name=None):
        counter["n"] += 1
        voter = Voter(
            email=f"student{counter['n']}@campus.example.edu",
            name=name or f"Student {counter['n']}",
            standing=standing,
        )
        db_session.add(voter)
        db_session.commit()
        return voter

    return _make


@pytest.fixture()
def auth_headers(app):
    def _headers(voter, role="VOTER"):
        token = create_access_token(identity=str(voter.id), additional_claims={"role": role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def council_election(make_election, make_candidate):
    """Published election open for a week with approved A, approved B and pending C."""
    election = make_election()
    alice = make_candidate(election, "Alice Johnson")
    bob = make_candidate(election, "Bob Smith")
    carol = make_candidate(election, "Carol Davis", status=Candidate.STATUS_PENDING)
    return election, alice, bob, carol
