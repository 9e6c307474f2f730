# mypy: ignore-errors
"""Tests for profile and relationship endpoints."""

from fastapi import status

from splajompy_api.models import Block, Follow, Notification


def test_get_user_profile(client, auth_token, other_auth_token, test_user, other_user) -> None:
    client.post(f"/api/v1/users/{other_user.user_id}/follow", headers=other_auth_token)

    response = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token)
    own = client.get(f"/api/v1/users/{test_user.user_id}", headers=other_auth_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "bob"
    assert response.json()["is_following"] is False
    assert own.json()["bio"] == "hello from alice"
    assert own.json()["is_following"] is True


def test_get_missing_user(client, auth_token) -> None:
    response = client.get("/api/v1/users/999", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_profile_hidden_when_target_blocks_viewer(
    client, auth_token, test_user, other_user, db_session
) -> None:
    db_session.add(Block(user_id=other_user.user_id, target_user_id=test_user.user_id))
    db_session.commit()

    response = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_follow_notifies_once(client, auth_token, test_user, other_user, db_session) -> None:
    path = f"/api/v1/users/{other_user.user_id}/follow"

    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT

    profile = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()
    assert profile["is_following"] is True
    notifications = db_session.query(Notification).filter_by(user_id=other_user.user_id).all()
    assert [n.message for n in notifications] == ["@alice started following you."]
    assert notifications[0].facets == [
        {"type": "mention", "user_id": test_user.user_id, "index_start": 0, "index_end": 6}
    ]

    assert client.delete(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    profile = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()
    assert profile["is_following"] is False


def test_follow_self_rejected(client, auth_token, test_user) -> None:
    response = client.post(f"/api/v1/users/{test_user.user_id}/follow", headers=auth_token)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_follow_blocked_user_forbidden(
    client, auth_token, test_user, other_user, db_session
) -> None:
    db_session.add(Block(user_id=test_user.user_id, target_user_id=other_user.user_id))
    db_session.commit()

    response = client.post(f"/api/v1/users/{other_user.user_id}/follow", headers=auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_block_removes_follows(client, auth_token, test_user, other_user, db_session) -> None:
    db_session.add_all(
        [
            Follow(follower_id=test_user.user_id, following_id=other_user.user_id),
            Follow(follower_id=other_user.user_id, following_id=test_user.user_id),
        ]
    )
    db_session.commit()

    response = client.post(f"/api/v1/users/{other_user.user_id}/block", headers=auth_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    profile = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()
    assert profile["is_blocking"] is True
    assert profile["is_following"] is False
    assert profile["is_follower"] is False

    client.delete(f"/api/v1/users/{other_user.user_id}/block", headers=auth_token)
    profile = client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()
    assert profile["is_blocking"] is False


def test_mute_hides_posts_from_all_feed(
    client, auth_token, other_user, make_post
) -> None:
    make_post(other_user, "noisy")

    client.post(f"/api/v1/users/{other_user.user_id}/mute", headers=auth_token)
    muted = client.get("/api/v1/posts/all", headers=auth_token).json()
    client.delete(f"/api/v1/users/{other_user.user_id}/mute", headers=auth_token)
    unmuted = client.get("/api/v1/posts/all", headers=auth_token).json()

    assert muted == []
    assert [item["post"]["text"] for item in unmuted] == ["noisy"]


def test_friend_toggle(client, auth_token, other_user) -> None:
    path = f"/api/v1/users/{other_user.user_id}/friend"

    assert client.post(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()[
        "is_friend"
    ]
    assert client.delete(path, headers=auth_token).status_code == status.HTTP_204_NO_CONTENT
    assert not client.get(f"/api/v1/users/{other_user.user_id}", headers=auth_token).json()[
        "is_friend"
    ]
