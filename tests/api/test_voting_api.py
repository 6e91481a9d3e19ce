import uuid
from datetime import timedelta

from voting_ledger.models import Election, Candidate, Voter, Vote, AuditLog
from voting_ledger.utils.clock import utcnow


def _cast(client, headers, election, candidate):
    return client.post(
        "/api/votes/cast",
        json={"election_id": str(election.id), "candidate_id": str(candidate.id)},
        headers=headers,
    )


def test_cast_vote_returns_receipt(client, db_session, council_election, make_voter, auth_headers):
    election, alice, _, _ = council_election
    voter = make_voter()

    resp = _cast(client, auth_headers(voter), election, alice)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Vote recorded"
    assert body["election_id"] == str(election.id)
    assert body["candidate_id"] == str(alice.id)
    assert body["vote_id"]
    assert resp.headers["X-Request-Id"]

    db_session.expire_all()
    assert db_session.get(Candidate, alice.id).vote_count == 1
    assert db_session.query(AuditLog).filter_by(action="VOTE_CAST").count() == 1


def test_second_vote_is_a_conflict(client, db_session, council_election, make_voter, auth_headers):
    election, alice, bob, _ = council_election
    headers = auth_headers(make_voter())

    assert _cast(client, headers, election, alice).status_code == 201
    resp = _cast(client, headers, election, bob)

    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "DUPLICATE_VOTE"
    assert body["error"]["message"] == "You have already voted in this election"
    assert db_session.query(Vote).count() == 1
    assert db_session.query(AuditLog).filter_by(action="VOTE_DUPLICATE_ATTEMPT").count() == 1


def test_pending_candidate_is_a_bad_request(client, db_session, council_election, make_voter, auth_headers):
    election, _, _, carol = council_election

    resp = _cast(client, auth_headers(make_voter()), election, carol)

    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "CANDIDATE_NOT_ELIGIBLE"
    assert db_session.query(Vote).count() == 0


def test_closed_window_is_forbidden_and_distinct_from_not_found(client, make_election, make_candidate, make_voter, auth_headers):
    now = utcnow()
    election = make_election(start=now - timedelta(days=3), end=now - timedelta(days=1))
    candidate = make_candidate(election, "Alice Johnson")
    headers = auth_headers(make_voter())

    closed = _cast(client, headers, election, candidate)
    assert closed.status_code == 403
    assert closed.get_json()["error"]["message"] == "Voting is not currently open for this election"

    missing = client.post(
        "/api/votes/cast",
        json={"election_id": str(uuid.uuid4()), "candidate_id": str(candidate.id)},
        headers=headers,
    )
    assert missing.status_code == 404
    assert missing.get_json()["error"]["code"] == "ELECTION_NOT_FOUND"


def test_suspended_voter_is_forbidden(client, council_election, make_voter, auth_headers):
    election, alice, _, _ = council_election

    resp = _cast(client, auth_headers(make_voter(standing=Voter.STANDING_SUSPENDED)), election, alice)

    assert resp.status_code == 403
    assert resp.get_json()["error"]["code"] == "VOTER_NOT_ACTIVE"


def test_malformed_body_is_a_validation_error(client, make_voter, auth_headers):
    resp = client.post("/api/votes/cast", json={"election_id": "not-a-uuid"}, headers=auth_headers(make_voter()))

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert set(body["error"]["details"]) == {"election_id", "candidate_id"}


def test_cast_requires_a_token(client, council_election):
    election, alice, _, _ = council_election
    assert _cast(client, {}, election, alice).status_code == 401


def test_token_for_unknown_voter_is_rejected(client, council_election, auth_headers):
    election, alice, _, _ = council_election
    ghost = Voter(id=uuid.uuid4(), email="ghost@campus.example.edu")

    assert _cast(client, auth_headers(ghost), election, alice).status_code == 401


def test_eligibility_endpoint(client, council_election, make_voter, auth_headers):
    election, alice, _, _ = council_election
    voter = make_voter()
    headers = auth_headers(voter)

    before = client.get(f"/api/votes/elections/{election.id}/eligibility", headers=headers)
    assert before.status_code == 200
    assert before.get_json()["eligible"] is True

    _cast(client, headers, election, alice)
    after = client.get(f"/api/votes/elections/{election.id}/eligibility", headers=headers).get_json()
    assert after["eligible"] is False
    assert after["reason"] == "ALREADY_VOTED"
    assert after["voter_id"] == str(voter.id)


def test_only_admins_check_other_voters(client, council_election, make_voter, auth_headers):
    election, *_ = council_election
    student, other = make_voter(), make_voter(standing=Voter.STANDING_SUSPENDED)
    url = f"/api/votes/elections/{election.id}/eligibility?voter_id={other.id}"

    denied = client.get(url, headers=auth_headers(student))
    assert denied.status_code == 403
    assert denied.get_json()["success"] is False
    assert denied.get_json()["error"]["code"] == "FORBIDDEN"
    assert "X-Request-Id" in denied.headers

    resp = client.get(url, headers=auth_headers(make_voter(), role="ADMIN"))
    assert resp.status_code == 200
    assert resp.get_json()["reason"] == "VOTER_NOT_ACTIVE"


def test_malformed_election_id_is_a_bad_request(client, make_voter, auth_headers):
    resp = client.get("/api/votes/elections/abc/eligibility", headers=auth_headers(make_voter()))
    assert resp.status_code == 400
    assert resp.get_json()["error"]["details"] == {"election_id": ["Not a valid UUID."]}


def test_ballot_lists_only_approved_candidates(client, council_election, make_voter, auth_headers):
    election, alice, bob, _ = council_election

    resp = client.get(f"/api/votes/elections/{election.id}/ballot", headers=auth_headers(make_voter()))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["election"]["id"] == str(election.id)
    assert {c["id"] for c in body["candidates"]} == {str(alice.id), str(bob.id)}
    assert body["has_voted"] is False
    assert body["eligibility"]["eligible"] is True
    assert 0 <= body["progress_percentage"] <= 100


def test_has_voted_and_history(client, council_election, make_voter, auth_headers):
    election, alice, _, _ = council_election
    headers = auth_headers(make_voter())
    url = f"/api/votes/elections/{election.id}/has-voted"

    assert client.get(url, headers=headers).get_json() == {"has_voted": False, "vote_id": None}

    vote_id = _cast(client, headers, election, alice).get_json()["vote_id"]
    assert client.get(url, headers=headers).get_json() == {"has_voted": True, "vote_id": vote_id}

    history = client.get("/api/votes/me", headers=headers).get_json()
    assert history["count"] == 1
    assert history["votes"][0]["election_title"] == election.title
    assert history["votes"][0]["candidate_name"] == "Alice Johnson"


def test_active_elections_only_lists_open_ones(client, make_election, make_voter, auth_headers):
    now = utcnow()
    open_one = make_election(title="Open")
    make_election(title="Draft", status=Election.STATUS_DRAFT)
    make_election(title="Upcoming", start=now + timedelta(days=2), end=now + timedelta(days=5))

    body = client.get("/api/votes/elections/active", headers=auth_headers(make_voter())).get_json()

    assert body["count"] == 1
    assert body["elections"][0]["id"] == str(open_one.id)


def test_election_listing_reports_voting_status(client, make_election, make_voter, auth_headers):
    now = utcnow()
    active = make_election(title="Open")
    upcoming = make_election(title="Upcoming", start=now + timedelta(days=2), end=now + timedelta(days=5))
    finished = make_election(title="Last Year", start=now - timedelta(days=9), end=now - timedelta(days=2))
    closed_early = make_election(title="Closed", status=Election.STATUS_ENDED)
    make_election(title="Draft", status=Election.STATUS_DRAFT)

    resp = client.get("/api/votes/elections", headers=auth_headers(make_voter()))

    assert resp.status_code == 200
    body = resp.get_json()
    statuses = {item["id"]: item["voting_status"] for item in body["elections"]}
    assert statuses == {
        str(active.id): "active",
        str(upcoming.id): "upcoming",
        str(finished.id): "completed",
        str(closed_early.id): "completed",
    }
    assert (body["count"], body["upcoming"], body["active"], body["completed"]) == (4, 1, 1, 2)


def test_election_listing_filters_by_voting_status(client, make_election, make_voter, auth_headers):
    now = utcnow()
    make_election(title="Open")
    upcoming = make_election(title="Upcoming", start=now + timedelta(days=2), end=now + timedelta(days=5))
    headers = auth_headers(make_voter())

    body = client.get("/api/votes/elections?voting_status=upcoming", headers=headers).get_json()
    assert [item["id"] for item in body["elections"]] == [str(upcoming.id)]
    # Per-status counts cover every non-draft election, not just the filtered ones
    assert (body["count"], body["upcoming"], body["active"]) == (1, 1, 1)

    bad = client.get("/api/votes/elections?voting_status=soon", headers=headers)
    assert bad.status_code == 400
    assert bad.get_json()["error"]["code"] == "VALIDATION_ERROR"
