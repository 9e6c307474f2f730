# tests/fakes.py
"""In-memory repositories implementing the store protocols for service tests."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count

from splajompy_api.core.app_version import app_version_var
from splajompy_api.schemas import (
    CommentOut,
    ConnectionUser,
    CursorPage,
    Facet,
    FeedCandidate,
    ImageOut,
    NotificationOut,
    Page,
    Poll,
    PollAttachment,
    PostOut,
    PublicUser,
    RelevantLike,
)
from splajompy_api.services.comment_service import CommentService
from splajompy_api.services.enrichment import PostEnrichmentEngine
from splajompy_api.services.feed_resolver import FeedResolver
from splajompy_api.services.notification_service import NotificationService
from splajompy_api.services.polls import PollTallyEngine
from splajompy_api.services.post_service import PostService
from splajompy_api.services.relevant_likes import RelevantLikesSampler
from splajompy_api.services.social_graph import SocialGraphGate
from splajompy_api.services.storage import ObjectUrlResolver, StorageConfig
from splajompy_api.services.user_service import UserService

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
CDN_BASE_URL = "https://cdn.example.test/"


@dataclass
class InMemoryStore:
    """Shared state behind every fake repository."""

    users: dict[int, PublicUser] = field(default_factory=dict)
    bios: dict[int, str] = field(default_factory=dict)
    follows: set[tuple[int, int]] = field(default_factory=set)
    follow_times: dict[tuple[int, int], datetime] = field(default_factory=dict)
    blocks: set[tuple[int, int]] = field(default_factory=set)
    mutes: set[tuple[int, int]] = field(default_factory=set)
    friends: set[tuple[int, int]] = field(default_factory=set)
    posts: dict[int, PostOut] = field(default_factory=dict)
    images: list[ImageOut] = field(default_factory=list)
    comments: dict[int, CommentOut] = field(default_factory=dict)
    likes: set[tuple[int, int, int | None]] = field(default_factory=set)
    votes: dict[tuple[int, int], int] = field(default_factory=dict)
    pins: dict[int, int] = field(default_factory=dict)
    reports: set[tuple[int, int]] = field(default_factory=set)
    notifications: list[NotificationOut] = field(default_factory=list)
    _ids: count = field(default_factory=lambda: count(1))

    def next_id(self) -> int:
        return next(self._ids)

    def add_user(self, username: str, bio: str = "") -> PublicUser:
        user = PublicUser(user_id=self.next_id(), username=username, created_at=BASE_TIME)
        self.users[user.user_id] = user
        self.bios[user.user_id] = bio
        return user

    def add_post(
        self,
        author: PublicUser,
        text: str = "hello",
        *,
        minutes: int | None = None,
        poll: Poll | None = None,
    ) -> PostOut:
        post_id = self.next_id()
        created_at = BASE_TIME + timedelta(minutes=post_id if minutes is None else minutes)
        post = PostOut(
            post_id=post_id,
            user_id=author.user_id,
            text=text,
            created_at=created_at,
            attributes=PollAttachment(poll=poll) if poll is not None else None,
        )
        self.posts[post_id] = post
        return post

    def notifications_for(self, user_id: int) -> list[NotificationOut]:
        return [n for n in self.notifications if n.user_id == user_id]


def _visible(store: InMemoryStore, viewer_id: int, author_id: int) -> bool:
    return (
        (viewer_id, author_id) not in store.blocks
        and (author_id, viewer_id) not in store.blocks
        and (viewer_id, author_id) not in store.mutes
    )


def _paginate(posts: list[PostOut], page: Page) -> list[PostOut]:
    if isinstance(page, CursorPage):
        if page.before is not None:
            posts = [post for post in posts if post.created_at < page.before]
        posts.sort(key=lambda post: (post.created_at, post.post_id), reverse=True)
        return posts[: page.limit]
    posts.sort(key=lambda post: post.post_id, reverse=True)
    return posts[page.offset : page.offset + page.limit]


class FakePostRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.calls: list[str] = []

    async def insert_post(
        self,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
        attributes: PollAttachment | None,
    ) -> PostOut:
        post_id = self.store.next_id()
        post = PostOut(
            post_id=post_id,
            user_id=user_id,
            text=text,
            created_at=BASE_TIME + timedelta(minutes=post_id),
            facets=list(facets),
            attributes=attributes,
        )
        self.store.posts[post_id] = post
        return post

    async def delete_post(self, post_id: int) -> None:
        self.store.posts.pop(post_id, None)
        self.store.pins = {u: p for u, p in self.store.pins.items() if p != post_id}

    async def get_post_by_id(self, post_id: int) -> PostOut | None:
        self.calls.append(f"get_post_by_id:{post_id}")
        return self.store.posts.get(post_id)

    async def get_images_for_post(self, post_id: int) -> list[ImageOut]:
        images = [image for image in self.store.images if image.post_id == post_id]
        return sorted(images, key=lambda image: image.display_order)

    async def insert_image(
        self,
        post_id: int,
        height: int,
        width: int,
        image_blob_url: str,
        display_order: int,
    ) -> ImageOut:
        image = ImageOut(
            image_id=self.store.next_id(),
            post_id=post_id,
            height=height,
            width=width,
            image_blob_url=image_blob_url,
            display_order=display_order,
        )
        self.store.images.append(image)
        return image

    async def get_comment_count_for_post(self, post_id: int) -> int:
        return sum(1 for comment in self.store.comments.values() if comment.post_id == post_id)

    async def get_all_post_ids(self, viewer_id: int, page: Page) -> list[int]:
        posts = [p for p in self.store.posts.values() if _visible(self.store, viewer_id, p.user_id)]
        return [post.post_id for post in _paginate(posts, page)]

    async def get_post_ids_for_following(self, viewer_id: int, page: Page) -> list[int]:
        followed = {b for a, b in self.store.follows if a == viewer_id} | {viewer_id}
        posts = [
            p
            for p in self.store.posts.values()
            if p.user_id in followed and _visible(self.store, viewer_id, p.user_id)
        ]
        return [post.post_id for post in _paginate(posts, page)]

    async def get_post_ids_for_user(self, user_id: int, page: Page) -> list[int]:
        posts = [p for p in self.store.posts.values() if p.user_id == user_id]
        return [post.post_id for post in _paginate(posts, page)]

    async def get_post_ids_for_mutual_feed(
        self,
        viewer_id: int,
        page: Page,
    ) -> list[FeedCandidate]:
        friends = {b for a, b in self.store.friends if a == viewer_id}
        followees = {b for a, b in self.store.follows if a == viewer_id}
        connectors: dict[int, set[str]] = {}
        for follower, following in self.store.follows:
            if follower in followees:
                connectors.setdefault(following, set()).add(self.store.users[follower].username)
        posts = [
            p
            for p in self.store.posts.values()
            if p.user_id != viewer_id
            and (p.user_id in friends or p.user_id in connectors)
            and _visible(self.store, viewer_id, p.user_id)
        ]
        candidates = []
        for post in _paginate(posts, page):
            if post.user_id in friends:
                candidates.append(FeedCandidate(post_id=post.post_id, relationship_type="friend"))
            else:
                candidates.append(
                    FeedCandidate(
                        post_id=post.post_id,
                        relationship_type="mutual",
                        mutual_usernames=sorted(connectors[post.user_id]),
                    )
                )
        return candidates

    async def get_pinned_post_id(self, user_id: int) -> int | None:
        return self.store.pins.get(user_id)

    async def pin_post(self, user_id: int, post_id: int) -> None:
        self.store.pins[user_id] = post_id

    async def unpin_post(self, user_id: int) -> None:
        self.store.pins.pop(user_id, None)

    async def get_user_vote_in_poll(self, post_id: int, user_id: int) -> int | None:
        return self.store.votes.get((post_id, user_id))

    async def get_poll_votes_grouped(self, post_id: int) -> dict[int, int]:
        grouped: dict[int, int] = {}
        for (voted_post_id, _), option in self.store.votes.items():
            if voted_post_id == post_id:
                grouped[option] = grouped.get(option, 0) + 1
        return grouped

    async def insert_vote(self, post_id: int, user_id: int, option_index: int) -> None:
        self.store.votes[(post_id, user_id)] = option_index

    async def report_post(self, post_id: int, reporter_id: int) -> None:
        self.store.reports.add((post_id, reporter_id))


class FakeLikeRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def add_like(self, user_id: int, post_id: int, comment_id: int | None = None) -> None:
        self.store.likes.add((user_id, post_id, comment_id))

    async def remove_like(
        self,
        user_id: int,
        post_id: int,
        comment_id: int | None = None,
    ) -> None:
        self.store.likes.discard((user_id, post_id, comment_id))

    async def is_liked(self, user_id: int, post_id: int, comment_id: int | None = None) -> bool:
        return (user_id, post_id, comment_id) in self.store.likes

    async def get_post_likes_from_followed(
        self,
        post_id: int,
        viewer_id: int,
    ) -> list[RelevantLike]:
        likers = sorted(
            user_id
            for user_id, liked_post_id, comment_id in self.store.likes
            if liked_post_id == post_id
            and comment_id is None
            and (viewer_id, user_id) in self.store.follows
        )
        return [
            RelevantLike(user_id=user_id, username=self.store.users[user_id].username)
            for user_id in likers
        ]

    async def has_likes_from_others(
        self,
        post_id: int,
        excluded_user_ids: Sequence[int],
    ) -> bool:
        return any(
            liked_post_id == post_id and comment_id is None and user_id not in excluded_user_ids
            for user_id, liked_post_id, comment_id in self.store.likes
        )


class FakeUserRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_user_by_id(self, user_id: int) -> PublicUser | None:
        return self.store.users.get(user_id)

    async def get_user_by_username(self, username: str) -> PublicUser | None:
        for user in self.store.users.values():
            if user.username.lower() == username.lower():
                return user
        return None

    async def get_bio_for_user(self, user_id: int) -> str:
        return self.store.bios.get(user_id, "")

    async def search_users(self, prefix: str, viewer_id: int, limit: int) -> list[PublicUser]:
        matches = [
            user
            for user in self.store.users.values()
            if user.username.lower().startswith(prefix.lower())
            and (user.user_id, viewer_id) not in self.store.blocks
        ]
        return sorted(matches, key=lambda user: user.username)[:limit]

    async def update_profile(self, user_id: int, **fields: str | None) -> None:
        if "bio" in fields:
            self.store.bios[user_id] = fields.pop("bio") or ""
        if fields:
            self.store.users[user_id] = self.store.users[user_id].model_copy(update=fields)

    async def get_followers(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        edges = [(f, t) for f, t in self.store.follows if t == user_id]
        return self._connections(edges, 0, limit, before)

    async def get_following(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        edges = [(f, t) for f, t in self.store.follows if f == user_id]
        return self._connections(edges, 1, limit, before)

    async def get_mutuals(
        self,
        viewer_id: int,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        edges = [
            (f, t)
            for f, t in self.store.follows
            if t == user_id and (viewer_id, f) in self.store.follows
        ]
        return self._connections(edges, 0, limit, before)

    def _connections(
        self,
        edges: list[tuple[int, int]],
        side: int,
        limit: int,
        before: datetime | None,
    ) -> list[ConnectionUser]:
        rows = [
            (self.store.follow_times.get(edge, BASE_TIME), self.store.users[edge[side]])
            for edge in edges
        ]
        if before is not None:
            rows = [row for row in rows if row[0] < before]
        rows.sort(key=lambda row: (row[0], row[1].user_id), reverse=True)
        return [
            ConnectionUser(**user.model_dump(), followed_at=followed_at)
            for followed_at, user in rows[:limit]
        ]

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        return (follower_id, following_id) in self.store.follows

    async def follow_user(self, follower_id: int, following_id: int) -> None:
        edge = (follower_id, following_id)
        if edge not in self.store.follows:
            self.store.follows.add(edge)
            offset = timedelta(seconds=len(self.store.follow_times))
            self.store.follow_times[edge] = BASE_TIME + offset

    async def unfollow_user(self, follower_id: int, following_id: int) -> None:
        self.store.follows.discard((follower_id, following_id))

    async def is_blocking(self, user_id: int, target_user_id: int) -> bool:
        return (user_id, target_user_id) in self.store.blocks

    async def block_user(self, user_id: int, target_user_id: int) -> None:
        self.store.follows.discard((user_id, target_user_id))
        self.store.follows.discard((target_user_id, user_id))
        self.store.blocks.add((user_id, target_user_id))

    async def unblock_user(self, user_id: int, target_user_id: int) -> None:
        self.store.blocks.discard((user_id, target_user_id))

    async def is_muting(self, user_id: int, target_user_id: int) -> bool:
        return (user_id, target_user_id) in self.store.mutes

    async def mute_user(self, user_id: int, target_user_id: int) -> None:
        self.store.mutes.add((user_id, target_user_id))

    async def unmute_user(self, user_id: int, target_user_id: int) -> None:
        self.store.mutes.discard((user_id, target_user_id))

    async def is_friend(self, user_id: int, target_user_id: int) -> bool:
        return (user_id, target_user_id) in self.store.friends

    async def add_friend(self, user_id: int, target_user_id: int) -> None:
        self.store.friends.add((user_id, target_user_id))

    async def remove_friend(self, user_id: int, target_user_id: int) -> None:
        self.store.friends.discard((user_id, target_user_id))


class FakeCommentRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def add_comment(
        self,
        post_id: int,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
    ) -> CommentOut:
        comment = CommentOut(
            comment_id=self.store.next_id(),
            post_id=post_id,
            user_id=user_id,
            text=text,
            facets=list(facets),
            created_at=BASE_TIME,
        )
        self.store.comments[comment.comment_id] = comment
        return comment

    async def get_comment_by_id(self, comment_id: int) -> CommentOut | None:
        return self.store.comments.get(comment_id)

    async def get_comments_for_post(self, post_id: int) -> list[CommentOut]:
        return [c for c in self.store.comments.values() if c.post_id == post_id]


class FakeNotificationRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def insert_notification(
        self,
        user_id: int,
        message: str,
        *,
        post_id: int | None = None,
        comment_id: int | None = None,
        facets: Sequence[Facet] = (),
    ) -> None:
        self.store.notifications.append(
            NotificationOut(
                notification_id=self.store.next_id(),
                user_id=user_id,
                post_id=post_id,
                comment_id=comment_id,
                message=message,
                facets=list(facets),
                viewed=False,
                created_at=BASE_TIME,
            )
        )

    async def get_notifications_for_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
    ) -> list[NotificationOut]:
        mine = list(reversed(self.store.notifications_for(user_id)))
        return mine[offset : offset + limit]

    async def get_notifications_page(
        self,
        user_id: int,
        *,
        viewed: bool,
        limit: int,
        before: datetime | None = None,
    ) -> list[NotificationOut]:
        mine = [
            n
            for n in reversed(self.store.notifications_for(user_id))
            if n.viewed is viewed and (before is None or n.created_at < before)
        ]
        return mine[:limit]

    async def get_notification_by_id(self, notification_id: int) -> NotificationOut | None:
        for notification in self.store.notifications:
            if notification.notification_id == notification_id:
                return notification
        return None

    async def mark_notification_read(self, notification_id: int) -> None:
        self.store.notifications = [
            n.model_copy(update={"viewed": True}) if n.notification_id == notification_id else n
            for n in self.store.notifications
        ]

    async def mark_all_read(self, user_id: int) -> None:
        self.store.notifications = [
            n.model_copy(update={"viewed": True}) if n.user_id == user_id else n
            for n in self.store.notifications
        ]

    async def get_unread_count(self, user_id: int) -> int:
        return sum(1 for n in self.store.notifications_for(user_id) if not n.viewed)


@dataclass
class ServiceBundle:
    """Services wired to fakes the same way the API dependencies wire SQL repositories."""

    store: InMemoryStore
    posts: FakePostRepository
    likes: FakeLikeRepository
    users: FakeUserRepository
    notifications: NotificationService
    graph: SocialGraphGate
    polls: PollTallyEngine
    resolver: FeedResolver
    enrichment: PostEnrichmentEngine
    post_service: PostService
    user_service: UserService
    comment_service: CommentService


def build_services(store: InMemoryStore | None = None) -> ServiceBundle:
    store = store or InMemoryStore()
    posts = FakePostRepository(store)
    likes = FakeLikeRepository(store)
    users = FakeUserRepository(store)
    notifications = NotificationService(FakeNotificationRepository(store), users)
    graph = SocialGraphGate(users)
    polls = PollTallyEngine(posts, users, notifications)
    resolver = FeedResolver(posts, graph, min_pinned_post_app_version="1.4.0")
    enrichment = PostEnrichmentEngine(
        posts,
        likes,
        users,
        ObjectUrlResolver(StorageConfig(cdn_base_url=CDN_BASE_URL)),
        RelevantLikesSampler(likes),
        polls,
        min_poll_app_version="1.3.0",
    )
    post_service = PostService(
        posts,
        likes,
        users,
        notifications,
        graph,
        resolver,
        enrichment,
        polls,
        max_post_length=2500,
    )
    return ServiceBundle(
        store=store,
        posts=posts,
        likes=likes,
        users=users,
        notifications=notifications,
        graph=graph,
        polls=polls,
        resolver=resolver,
        enrichment=enrichment,
        post_service=post_service,
        user_service=UserService(users, graph, notifications),
        comment_service=CommentService(
            FakeCommentRepository(store),
            posts,
            likes,
            users,
            notifications,
            graph,
        ),
    )


@contextmanager
def client_version(version: str) -> Iterator[None]:
    """Run the enclosed block as if the request carried ``X-App-Version: version``."""
    token = app_version_var.set(version)
    try:
        yield
    finally:
        app_version_var.reset(token)
