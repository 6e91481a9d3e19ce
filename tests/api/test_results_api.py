import uuid


def _cast(client, headers, election, candidate):
    return client.post(
        "/api/votes/cast",
        json={"election_id": str(election.id), "candidate_id": str(candidate.id)},
        headers=headers,
    )


def test_results_with_no_votes(client, council_election, make_voter, auth_headers):
    election, alice, bob, _ = council_election

    resp = client.get(f"/api/votes/elections/{election.id}/results", headers=auth_headers(make_voter()))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["total_votes"] == 0
    assert body["winner_id"] is None
    assert body["is_tie"] is False
    assert all(c["percentage"] == 0 for c in body["candidates"])
    assert {c["id"] for c in body["candidates"]} == {str(alice.id), str(bob.id)}


def test_results_name_a_single_winner(client, council_election, make_voter, auth_headers):
    election, alice, bob, _ = council_election
    for choice in (alice, bob, alice):
        _cast(client, auth_headers(make_voter()), election, choice)

    body = client.get(
        f"/api/votes/elections/{election.id}/results?consistent=true",
        headers=auth_headers(make_voter()),
    ).get_json()

    assert body["total_votes"] == 3
    assert body["winner_id"] == str(alice.id)
    assert [c["vote_count"] for c in body["candidates"]] == [2, 1]
    assert body["candidates"][0]["percentage"] == 66.67
    assert body["turnout"]["eligible_voters"] == 4


def test_tally_shape_and_ranks(client, council_election, make_voter, auth_headers):
    election, alice, bob, _ = council_election
    for choice in (alice, bob):
        _cast(client, auth_headers(make_voter()), election, choice)

    body = client.get(f"/api/votes/elections/{election.id}/tally", headers=auth_headers(make_voter())).get_json()

    assert body["consistent"] is False
    assert [(t["name"], t["vote_count"], t["rank"]) for t in body["tally"]] == [
        ("Alice Johnson", 1, 1),
        ("Bob Smith", 1, 1),
    ]


def test_unknown_election_is_not_found(client, make_voter, auth_headers):
    headers = auth_headers(make_voter())
    missing = uuid.uuid4()

    for path in ("results", "tally"):
        resp = client.get(f"/api/votes/elections/{missing}/{path}", headers=headers)
        assert resp.status_code == 404
        assert resp.get_json()["error"]["code"] == "ELECTION_NOT_FOUND"
