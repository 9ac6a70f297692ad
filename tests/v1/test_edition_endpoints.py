"""Tests for edition reading and the publication triggers."""

from datetime import date

from fastapi import status

from conftest import CRON_SECRET, SUBMIT_NOW, auth_headers
from rogha.db.time import utcnow
from rogha.models import AudienceType, PostStatus
from rogha.services.publication import publish_edition
from rogha.services.weeks import week_label, week_start

CRON_HEADERS = {"Authorization": f"Bearer {CRON_SECRET}"}


def _submit(client, author, **payload) -> str:
    created = client.post(
        "/api/v1/posts/",
        json={"title": "This week", **payload},
        headers=auth_headers(author),
    ).json()
    response = client.patch(
        f"/api/v1/posts/{created['id']}",
        json={"expected_version": 1, "status": "SUBMITTED"},
        headers=auth_headers(author),
    )
    assert response.status_code == status.HTTP_200_OK
    return created["id"]


def _this_week_iso() -> str:
    return week_label(week_start(utcnow()))


def test_cron_requires_secret(client) -> None:
    assert client.get("/api/v1/cron/publish-weekly").status_code == status.HTTP_401_UNAUTHORIZED
    response = client.get(
        "/api/v1/cron/publish-weekly",
        headers={"Authorization": "Bearer wrong"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_cron_without_edition_is_noop(client) -> None:
    response = client.get("/api/v1/cron/publish-weekly", headers=CRON_HEADERS)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["ok"] is True
    assert body["published"] is False
    assert body["reason"] == "NO_EDITION"


def test_manual_publish_requires_operator(client, alice) -> None:
    response = client.post(
        "/api/v1/cron/publish-weekly",
        json={"week_iso": _this_week_iso()},
        headers=auth_headers(alice),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_publish_then_read_edition(client, alice, bob, carol, admin_user, befriend) -> None:
    befriend(alice, bob)
    friends_post = _submit(client, alice)
    public_post = _submit(client, alice, title="For everyone", audience_type="ALL_USERS")

    published = client.post(
        "/api/v1/cron/publish-weekly",
        json={"week_iso": _this_week_iso()},
        headers=auth_headers(admin_user),
    )
    assert published.status_code == status.HTTP_200_OK
    body = published.json()
    assert body["published"] is True
    assert body["posts_published"] == 2

    again = client.post(
        "/api/v1/cron/publish-weekly",
        json={"week_iso": _this_week_iso()},
        headers=CRON_HEADERS,
    )
    assert again.json()["published"] is False
    assert again.json()["reason"] == "ALREADY_PUBLISHED"

    for_bob = client.get(f"/api/v1/editions/{body['edition_id']}", headers=auth_headers(bob)).json()
    assert {post["id"] for post in for_bob["posts"]} == {friends_post, public_post}
    assert all(post["status"] == PostStatus.PUBLISHED.value for post in for_bob["posts"])
    assert for_bob["sections"][AudienceType.FRIENDS.value] == [friends_post]

    for_carol = client.get(f"/api/v1/editions/{body['edition_id']}", headers=auth_headers(carol)).json()
    assert [post["id"] for post in for_carol["posts"]] == [public_post]

    listing = client.get("/api/v1/editions/", headers=auth_headers(bob)).json()
    assert [edition["id"] for edition in listing] == [body["edition_id"]]
    assert listing[0]["published_at"] is not None


def test_admin_publish_endpoint(client, alice, admin_user) -> None:
    _submit(client, alice)
    response = client.post(
        "/api/v1/editions/publish",
        json={"week_iso": _this_week_iso()},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["published"] is True

    forbidden = client.post("/api/v1/editions/publish", json={}, headers=auth_headers(alice))
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN


def test_week_iso_for_empty_week(client, admin_user) -> None:
    response = client.post(
        "/api/v1/editions/publish",
        json={"week_iso": date(2020, 1, 6).isoformat()},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["reason"] == "NO_EDITION"
    assert body["week_start"].startswith("2020-01-06T08:00:00")


def test_unknown_edition_is_not_found(client, alice) -> None:
    response = client.get("/api/v1/editions/missing", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_edition_planned_publish_time(client, alice, make_post, db_session) -> None:
    post = make_post(alice, submit=True)
    result = publish_edition(db_session, SUBMIT_NOW)
    response = client.get(f"/api/v1/editions/{post.edition_id}", headers=auth_headers(alice))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["id"] == result.edition_id
    assert body["title"] == "Week of 2026-03-02"
    assert body["planned_publish_at"].startswith("2026-03-09T07:00:00")
    assert body["week_start"].startswith("2026-03-02T08:00:00")
