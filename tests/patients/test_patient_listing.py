"""Integration tests: listing patients, paginated and unpaginated."""

from __future__ import annotations

from starlette.testclient import TestClient

from tests.patients._helpers import PATIENTS_URL, create_patient


def _seed_three(client: TestClient) -> None:
    create_patient(
        client=client, name="Grace Hopper", email="grace@clinic.org", dateOfBirth="1906-12-09"
    )
    create_patient(
        client=client, name="Ada Lovelace", email="ada@clinic.org", dateOfBirth="1815-12-10"
    )
    create_patient(
        client=client, name="Alan Turing", email="alan@clinic.org", dateOfBirth="1912-06-23"
    )


def test_list_defaults_to_first_page_sorted_by_name(client: TestClient) -> None:
    _seed_three(client)

    res = client.get(PATIENTS_URL)

    assert res.status_code == 200
    body = res.json()
    assert [p["name"] for p in body["items"]] == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]
    assert body["page"] == 0
    assert body["size"] == 10
    assert body["totalItems"] == 3
    assert body["totalPages"] == 1
    assert body["sort"] == "name,asc"


def test_list_pages_do_not_overlap(client: TestClient) -> None:
    _seed_three(client)

    page0 = client.get(PATIENTS_URL, params={"page": 0, "size": 2}).json()
    page1 = client.get(PATIENTS_URL, params={"page": 1, "size": 2}).json()

    assert page0["totalPages"] == 2
    assert len(page0["items"]) == 2
    assert len(page1["items"]) == 1
    assert {p["id"] for p in page0["items"]}.isdisjoint({p["id"] for p in page1["items"]})


def test_list_sorts_by_requested_field_and_direction(client: TestClient) -> None:
    _seed_three(client)

    res = client.get(PATIENTS_URL, params={"sort": "dateOfBirth,desc"})

    assert res.status_code == 200
    dobs = [p["dateOfBirth"] for p in res.json()["items"]]
    assert dobs == ["1912-06-23", "1906-12-09", "1815-12-10"]


def test_list_rejects_unknown_sort_field(client: TestClient) -> None:
    res = client.get(PATIENTS_URL, params={"sort": "password"})

    assert res.status_code == 400
    assert "Unsupported sort field" in res.json()["message"]


def test_list_rejects_negative_page(client: TestClient) -> None:
    res = client.get(PATIENTS_URL, params={"page": -1})

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Malformed request"
    assert "page" in body["details"]


def test_list_caps_page_size(client: TestClient) -> None:
    res = client.get(PATIENTS_URL, params={"size": 5000})

    assert res.status_code == 200
    assert res.json()["size"] == 100


def test_list_all_returns_every_patient(client: TestClient) -> None:
    _seed_three(client)

    res = client.get(f"{PATIENTS_URL}/all")

    assert res.status_code == 200
    body = res.json()
    assert isinstance(body, list)
    assert [p["name"] for p in body] == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]


def test_list_on_empty_store(client: TestClient) -> None:
    res = client.get(PATIENTS_URL)

    assert res.status_code == 200
    assert res.json()["items"] == []
    assert res.json()["totalPages"] == 0


def test_list_huge_page_index_is_bad_request(client: TestClient) -> None:
    res = client.get(PATIENTS_URL, params={"page": 10**18, "size": 100})

    assert res.status_code == 400
    assert res.json()["message"] == "Page index is too large for the requested page size."
