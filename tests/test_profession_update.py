from __future__ import annotations

import pytest

from app.database import SessionLocal
from app.models.profession import Profession
from app.services.errors import ProfessionNotFound, Unauthenticated
from app.services.profession_service import (
    create_profession,
    load_own_profession,
    merge_profession_update,
    parse_profession_fields,
    update_own_profession,
    validate_profession_record,
)
from app.services.profession_store import save_profession_snapshot


PROFESSIONS_URL = "/api/professions"
MY_PROFESSION_URL = "/api/professions/me"


def _create(client, headers, payload) -> dict:
    r = client.post(PROFESSIONS_URL, json=payload, headers=headers)
    assert r.status_code == 201
    return r.json()["data"]


def test_update_only_touches_supplied_fields(client, make_user, profession_payload) -> None:
    _, headers = make_user()
    before = _create(client, headers, {**profession_payload, "city": "Mumbai", "servicePrice": "100"})

    r = client.put(MY_PROFESSION_URL, json={"city": "Pune"}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Professional profile updated successfully"
    after = body["data"]

    assert after["city"] == "Pune"
    for key in before:
        if key in ("city", "updatedAt"):
            continue
        assert after[key] == before[key], key
    assert after["servicePrice"] == 100.0
    assert after["name"] == profession_payload["name"]


def test_update_price_clear_and_invalid(client, make_user, profession_payload) -> None:
    _, headers = make_user()
    _create(client, headers, {**profession_payload, "servicePrice": 100})

    r = client.put(MY_PROFESSION_URL, json={"servicePrice": "xx"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["servicePrice"] == 100.0

    r = client.put(MY_PROFESSION_URL, json={"servicePrice": ""}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["servicePrice"] is None

    r = client.put(MY_PROFESSION_URL, json={"servicePrice": "75.5"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["servicePrice"] == 75.5

    r = client.put(MY_PROFESSION_URL, json={"servicePrice": None}, headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["servicePrice"] is None


def test_update_explicit_empty_value_overwrites(client, make_user, profession_payload) -> None:
    _, headers = make_user()
    _create(client, headers, {**profession_payload, "designation": "Senior", "priceUnit": "per-visit"})

    r = client.put(MY_PROFESSION_URL, json={"designation": "", "priceUnit": None, "needSupport": True}, headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["designation"] == ""
    assert data["priceUnit"] is None
    assert data["needSupport"] is True


def test_update_keeps_free_form_email(client, make_user, profession_payload) -> None:
    _, headers = make_user()
    before = _create(client, headers, {**profession_payload, "email": " ravi at home "})
    assert before["email"] == " ravi at home "

    r = client.put(MY_PROFESSION_URL, json={"city": "Nashik"}, headers=headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["city"] == "Nashik"
    assert data["email"] == " ravi at home "


def test_update_cannot_change_owner_or_id(client, make_user, profession_payload) -> None:
    user, headers = make_user()
    other, _ = make_user(email="other@example.com")
    before = _create(client, headers, profession_payload)

    r = client.put(
        MY_PROFESSION_URL,
        json={"id": before["id"] + 100, "user": other.id, "ownerUserId": other.id, "state": "Goa"},
        headers=headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == before["id"]
    assert data["ownerUserId"] == user.id
    assert data["state"] == "Goa"


def test_update_clearing_required_field_is_rejected(client, make_user, profession_payload) -> None:
    _, headers = make_user()
    before = _create(client, headers, profession_payload)

    r = client.put(MY_PROFESSION_URL, json={"name": "", "email": None, "city": "Nagpur"}, headers=headers)
    assert r.status_code == 400
    error = r.json()["error"]
    assert "name is required" in error
    assert "email is required" in error

    with SessionLocal() as db:
        stored = db.query(Profession).filter(Profession.id == before["id"]).one()
        assert stored.name == profession_payload["name"]
        assert stored.city == before["city"]
        assert stored.revision == 0


def test_update_without_profile_is_not_found(client, make_user) -> None:
    _, headers = make_user()

    r = client.put(MY_PROFESSION_URL, json={"city": "Pune"}, headers=headers)
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Professional profile not found. Please add one first."}

    with SessionLocal() as db:
        assert db.query(Profession).count() == 0


def test_update_requires_authentication(client) -> None:
    r = client.put(MY_PROFESSION_URL, json={"city": "Pune"})
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_update_only_reaches_own_profile(client, make_user, profession_payload) -> None:
    _, alice_headers = make_user(email="alice@example.com")
    _, bob_headers = make_user(email="bob@example.com")
    alice = _create(client, alice_headers, {**profession_payload, "city": "Mumbai"})
    bob = _create(client, bob_headers, {**profession_payload, "city": "Delhi"})

    r = client.put(MY_PROFESSION_URL, json={"city": "Pune"}, headers=bob_headers)
    assert r.status_code == 200
    assert r.json()["data"]["id"] == bob["id"]

    with SessionLocal() as db:
        assert db.query(Profession).filter(Profession.id == alice["id"]).one().city == "Mumbai"


def test_update_targets_first_profile_of_owner(db, make_user, profession_payload) -> None:
    user, _ = make_user()

    first = create_profession(db, user.id, profession_payload)
    second = create_profession(db, user.id, {**profession_payload, "serviceName": "Electrician"})

    updated = update_own_profession(db, user.id, {"city": "Thane"})
    assert updated.id == first.id
    db.expire_all()
    assert db.query(Profession).filter(Profession.id == second.id).one().city == profession_payload["city"]


def test_update_bumps_revision(db, make_user, profession_payload) -> None:
    user, _ = make_user()

    create_profession(db, user.id, profession_payload)
    update_own_profession(db, user.id, {"city": "Thane"})
    updated = update_own_profession(db, user.id, {"state": "Kerala"})
    assert updated.revision == 2


def test_update_service_errors(db, make_user) -> None:
    user, _ = make_user()
    with pytest.raises(Unauthenticated):
        update_own_profession(db, None, {"city": "Pune"})
    with pytest.raises(ProfessionNotFound):
        update_own_profession(db, user.id, {"city": "Pune"})


def test_concurrent_updates_last_write_wins(db, make_user, profession_payload) -> None:
    user, _ = make_user()

    original = create_profession(db, user.id, {**profession_payload, "city": "Mumbai", "state": "Maharashtra"})

    with SessionLocal() as first, SessionLocal() as second:
        # Both requests read the same snapshot before either writes.
        p1 = load_own_profession(first, user.id)
        p2 = load_own_profession(second, user.id)
        merged1 = validate_profession_record(merge_profession_update(p1.snapshot(), parse_profession_fields({"city": "A"})))
        merged2 = validate_profession_record(merge_profession_update(p2.snapshot(), parse_profession_fields({"state": "B"})))

        save_profession_snapshot(first, p1, merged1)
        save_profession_snapshot(second, p2, merged2)

    db.expire_all()
    final = db.query(Profession).filter(Profession.id == original.id).one()
    # The later save rewrote the whole snapshot: U2's field landed, U1's reverted.
    assert final.state == "B"
    assert final.city == "Mumbai"
    # Fields neither update touched are intact.
    assert final.name == profession_payload["name"]
    assert final.service_name == profession_payload["serviceName"]
    assert final.service_price == 350.0
    assert final.owner_user_id == user.id
    assert final.revision == 2
