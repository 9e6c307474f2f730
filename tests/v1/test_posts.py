# mypy: ignore-errors
"""Tests for the post endpoints."""

from fastapi import status

from splajompy_api.models import Block, Like, Notification, PinnedPost, PollVote, PostReport

POLL = {"title": "Best colour?", "options": ["red", "green", "blue"]}


def test_create_post_with_mention(client, auth_token, headers_for, test_user, other_user) -> None:
    """Mentions become facets and notify the mentioned user."""
    response = client.post("/api/v1/posts", json={"text": "hi @bob"}, headers=auth_token)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["user_id"] == test_user.user_id
    assert body["facets"] == [
        {"type": "mention", "user_id": other_user.user_id, "index_start": 3, "index_end": 7}
    ]

    inbox = client.get("/api/v1/notifications", headers=headers_for(other_user))
    assert [item["message"] for item in inbox.json()] == ["@alice mentioned you in a post."]


def test_create_post_with_poll(client, auth_token) -> None:
    response = client.post(
        "/api/v1/posts",
        json={"text": "", "poll": POLL},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["attributes"] == {"kind": "poll", "poll": POLL}


def test_create_empty_post_rejected(client, auth_token) -> None:
    response = client.post("/api/v1/posts", json={"text": "   "}, headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_post_too_long_rejected(client, auth_token) -> None:
    response = client.post("/api/v1/posts", json={"text": "x" * 2501}, headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_post_with_images(client, auth_token) -> None:
    created = client.post(
        "/api/v1/posts",
        json={"text": "look", "images": [{"key": "posts/1/a.png", "width": 640, "height": 480}]},
        headers=auth_token,
    ).json()

    detail = client.get(f"/api/v1/posts/{created['post_id']}", headers=auth_token).json()

    assert len(detail["images"]) == 1
    assert detail["images"][0]["image_blob_url"].endswith("posts/1/a.png")
    assert detail["images"][0]["width"] == 640


def test_get_post(client, auth_token, other_user, make_post) -> None:
    post = make_post(other_user, "hello world")

    response = client.get(f"/api/v1/posts/{post.post_id}", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["post"]["text"] == "hello world"
    assert body["user"]["username"] == "bob"
    assert body["is_pinned"] is False


def test_get_missing_post(client, auth_token) -> None:
    response = client.get("/api/v1/posts/9999", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Post not found"}


def test_get_post_hidden_by_block(
    client, auth_token, test_user, other_user, make_post, db_session
) -> None:
    post = make_post(other_user)
    db_session.add(Block(user_id=test_user.user_id, target_user_id=other_user.user_id))
    db_session.commit()

    response = client.get(f"/api/v1/posts/{post.post_id}", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_own_post(client, auth_token, test_user, make_post, db_session) -> None:
    post = make_post(test_user)
    db_session.add(Like(post_id=post.post_id, user_id=test_user.user_id))
    db_session.commit()

    response = client.delete(f"/api/v1/posts/{post.post_id}", headers=auth_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post.post_id}", headers=auth_token).status_code == 404


def test_delete_other_users_post_forbidden(client, auth_token, other_user, make_post) -> None:
    post = make_post(other_user)

    response = client.delete(f"/api/v1/posts/{post.post_id}", headers=auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_like_and_unlike(client, auth_token, other_user, make_post, db_session) -> None:
    """Liking twice notifies the author once."""
    post = make_post(other_user)
    path = f"/api/v1/posts/{post.post_id}/like"

    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post.post_id}", headers=auth_token).json()["is_liked"]

    notifications = db_session.query(Notification).filter_by(user_id=other_user.user_id).all()
    assert [n.message for n in notifications] == ["@alice liked your post."]

    assert client.delete(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    detail = client.get(f"/api/v1/posts/{post.post_id}", headers=auth_token).json()
    assert detail["is_liked"] is False


def test_like_missing_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/424242/like", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_on_poll(client, auth_token, test_user, other_user, make_post, db_session) -> None:
    post = make_post(other_user, "vote", attributes={"kind": "poll", "poll": POLL})

    first = client.post(f"/api/v1/posts/{post.post_id}/vote/1", headers=auth_token)
    second = client.post(f"/api/v1/posts/{post.post_id}/vote/2", headers=auth_token)

    assert first.status_code == status.HTTP_204_NO_CONTENT
    assert second.status_code == status.HTTP_204_NO_CONTENT
    votes = db_session.query(PollVote).filter_by(post_id=post.post_id).all()
    assert [(v.user_id, v.option_index) for v in votes] == [(test_user.user_id, 2)]

    detail = client.get(
        f"/api/v1/posts/{post.post_id}",
        headers={**auth_token, "X-App-Version": "2.0.0"},
    ).json()
    assert detail["poll"]["current_user_vote"] == 2
    assert [option["vote_total"] for option in detail["poll"]["options"]] == [0, 0, 1]

    messages = [
        n.message
        for n in db_session.query(Notification).filter_by(user_id=other_user.user_id)
    ]
    assert '@alice voted "green" in your poll.' in messages
    assert '@alice voted "blue" in your poll.' in messages


def test_vote_out_of_range(client, auth_token, other_user, make_post) -> None:
    post = make_post(other_user, "vote", attributes={"kind": "poll", "poll": POLL})

    response = client.post(f"/api/v1/posts/{post.post_id}/vote/3", headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"detail": "Invalid poll option"}


def test_vote_without_poll(client, auth_token, other_user, make_post) -> None:
    post = make_post(other_user, "no poll here")

    response = client.post(f"/api/v1/posts/{post.post_id}/vote/0", headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_vote_missing_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/9999/vote/0", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_pin_and_unpin(client, auth_token, test_user, make_post, db_session) -> None:
    first = make_post(test_user, "first")
    second = make_post(test_user, "second")

    assert client.post(f"/api/v1/posts/{first.post_id}/pin", headers=auth_token).status_code == 204
    assert client.post(f"/api/v1/posts/{second.post_id}/pin", headers=auth_token).status_code == 204
    pinned = db_session.get(PinnedPost, test_user.user_id)
    db_session.refresh(pinned)
    assert pinned.post_id == second.post_id
    detail = client.get(f"/api/v1/posts/{second.post_id}", headers=auth_token).json()
    assert detail["is_pinned"] is True

    assert client.delete("/api/v1/posts/pin", headers=auth_token).status_code == 204
    db_session.expunge_all()
    assert db_session.get(PinnedPost, test_user.user_id) is None


def test_pin_other_users_post_forbidden(client, auth_token, other_user, make_post) -> None:
    post = make_post(other_user)

    response = client.post(f"/api/v1/posts/{post.post_id}/pin", headers=auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_report_post_counts_once(
    client, auth_token, test_user, other_user, make_post, db_session
) -> None:
    post = make_post(other_user)
    path = f"/api/v1/posts/{post.post_id}/report"

    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT

    reports = db_session.query(PostReport).all()
    assert [(r.post_id, r.reporter_id) for r in reports] == [(post.post_id, test_user.user_id)]
    assert db_session.query(Notification).count() == 0


def test_report_missing_post(client, auth_token) -> None:
    response = client.post("/api/v1/posts/9999/report", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_deleting_reported_post_removes_reports(
    client, auth_token, other_auth_token, test_user, make_post, db_session
) -> None:
    post = make_post(test_user)
    client.post(f"/api/v1/posts/{post.post_id}/report", headers=other_auth_token)

    response = client.delete(f"/api/v1/posts/{post.post_id}", headers=auth_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert db_session.query(PostReport).count() == 0
