# mypy: ignore-errors
"""Tests for the year-in-review endpoint."""

from datetime import UTC, datetime

import pytest
from fastapi import status

from splajompy_api.models import Comment, Like

JOINED = datetime(2024, 6, 1, tzinfo=UTC)


@pytest.fixture()
def busy_year(make_user, make_post, db_session):
    """Mia posts in 2025, gets a like from Pal, and comments on Pal's post."""
    mia = make_user("mia", created_at=JOINED)
    pal = make_user("pal", created_at=JOINED)
    mine = make_post(mia, "my first post here", created_at=datetime(2025, 3, 2, tzinfo=UTC))
    theirs = make_post(pal, "hello", created_at=datetime(2025, 3, 3, tzinfo=UTC))
    db_session.add_all(
        [
            Like(
                post_id=mine.post_id,
                user_id=pal.user_id,
                created_at=datetime(2025, 3, 4, tzinfo=UTC),
            ),
            Comment(
                post_id=theirs.post_id,
                user_id=mia.user_id,
                text="great",
                created_at=datetime(2025, 3, 5, 8, tzinfo=UTC),
            ),
            Like(
                post_id=theirs.post_id,
                user_id=mia.user_id,
                created_at=datetime(2025, 3, 5, 9, tzinfo=UTC),
            ),
        ]
    )
    db_session.commit()
    return mia, pal, mine


def test_wrapped_for_eligible_user(client, headers_for, busy_year) -> None:
    mia, _, mine = busy_year

    response = client.get("/api/v1/wrapped", params={"year": 2025}, headers=headers_for(mia))

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["year"] == 2025
    assert body["activity_data"]["counts"]["2025-03-05"] == 2
    assert body["activity_data"]["most_active_day"] == "2025-03-05"
    assert len(body["weekly_activity"]) == 7
    assert body["most_liked_post"]["post"]["post_id"] == mine.post_id
    assert [f["user"]["username"] for f in body["favorite_users"]] == ["pal"]
    assert body["favorite_users"][0]["proportion"] == pytest.approx(100.0)
    assert body["total_word_count"] == 5
    assert body["controversial_poll"] is None
    assert body["slice_data"]["percent"] > 0


def test_wrapped_defaults_to_configured_year(client, headers_for, busy_year) -> None:
    mia, _, _ = busy_year

    response = client.get("/api/v1/wrapped", headers=headers_for(mia))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["year"] == 2025


def test_wrapped_missing_for_quiet_year(client, headers_for, busy_year) -> None:
    mia, _, _ = busy_year

    response = client.get("/api/v1/wrapped", params={"year": 2024}, headers=headers_for(mia))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_wrapped_missing_without_likes_from_others(
    client, headers_for, make_user, make_post, db_session
) -> None:
    solo = make_user("solo", created_at=JOINED)
    post = make_post(solo, created_at=datetime(2025, 2, 1, tzinfo=UTC))
    db_session.add(
        Like(
            post_id=post.post_id,
            user_id=solo.user_id,
            created_at=datetime(2025, 2, 2, tzinfo=UTC),
        )
    )
    db_session.commit()

    response = client.get("/api/v1/wrapped", params={"year": 2025}, headers=headers_for(solo))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_wrapped_missing_for_new_account(client, headers_for, make_user, make_post) -> None:
    late = make_user("late", created_at=datetime(2025, 12, 26, tzinfo=UTC))
    make_post(late, created_at=datetime(2025, 12, 27, tzinfo=UTC))

    response = client.get("/api/v1/wrapped", params={"year": 2025}, headers=headers_for(late))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_wrapped_rejects_out_of_range_year(client, auth_token) -> None:
    response = client.get("/api/v1/wrapped", params={"year": 1999}, headers=auth_token)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
