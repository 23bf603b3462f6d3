"""
Service tests for the social graph against an in-memory SQLite schema.

Covered:
- friend requests (duplicates in either direction, accept/decline, notifications)
- direct/group conversations (idempotent creation, join codes, membership)
- messaging (ordering, previews)
- posts (likes toggle, comments)
- challenges (first completion wins, leaderboard ranks)
"""

import re
from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import select, func

from app.models.conversation import Conversation, ConversationTypeEnum
from app.models.friend_request import FriendStatusEnum, pair_key
from app.models.notification import Notification
from app.models.user import RoleEnum
from app.schemas.social import ChallengeCreate, PostCreate
from app.services.challenge_service import challenge_service
from app.services.conversation_service import (
    conversation_service,
    generate_join_code,
    unique_member_ids,
    JOIN_CODE_ALPHABET,
)
from app.services.messaging_service import messaging_service
from app.services.notification_service import notification_service
from app.services.post_service import post_service
from app.services.relationship_service import relationship_service

pytestmark = pytest.mark.unit


async def count_direct(db, first_id, second_id) -> int:
    result = await db.execute(
        select(func.count(Conversation.id)).where(Conversation.direct_key == pair_key(first_id, second_id))
    )
    return result.scalar_one()


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def test_pair_key_is_direction_independent():
    assert pair_key(7, 3) == pair_key(3, 7) == "3:7"


def test_generate_join_code_format():
    for _ in range(50):
        code = generate_join_code()
        assert len(code) == 6
        assert re.fullmatch(f"[{JOIN_CODE_ALPHABET}]{{6}}", code)


def test_unique_member_ids_keeps_order_and_adds_initiator():
    assert unique_member_ids([4, 2, 4, 9], 1) == [4, 2, 9, 1]
    assert unique_member_ids([1, 5], 1) == [1, 5]


# ---------------------------------------------------------------------------
# friend requests
# ---------------------------------------------------------------------------

async def test_send_request_notifies_recipient(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")

    request = await relationship_service.send_request(db_session, alice, bob.id)

    assert request.status == FriendStatusEnum.pending
    notifications = await notification_service.list_for_user(db_session, bob.id)
    assert len(notifications) == 1
    assert notifications[0].title == "New Friend Request"
    assert notifications[0].payload == {"friend_request_id": request.id}


async def test_send_request_to_self_or_nobody_is_rejected(db_session, make_user):
    alice = await make_user("Alice")

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.send_request(db_session, alice, alice.id)
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.send_request(db_session, alice, None)
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.send_request(db_session, alice, 9999)
    assert exc_info.value.status_code == 404


async def test_duplicate_request_rejected_in_both_directions(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    await relationship_service.send_request(db_session, alice, bob.id)

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.send_request(db_session, alice, bob.id)
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.send_request(db_session, bob, alice.id)
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "A request already exists between these users"


async def test_accept_creates_direct_conversation_and_friendship(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)

    answered = await relationship_service.respond(db_session, request.id, bob, "accept")

    assert answered.status == FriendStatusEnum.accepted
    assert [u.id for u in await relationship_service.list_friends(db_session, alice.id)] == [bob.id]
    assert [u.id for u in await relationship_service.list_friends(db_session, bob.id)] == [alice.id]
    assert await count_direct(db_session, alice.id, bob.id) == 1

    titles = [n.title for n in await notification_service.list_for_user(db_session, alice.id)]
    assert "Friend Request Accepted" in titles


async def test_accept_reuses_existing_direct_conversation(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    existing, created = await conversation_service.create_conversation(db_session, bob, [alice.id])
    assert created is True

    request = await relationship_service.send_request(db_session, alice, bob.id)
    await relationship_service.respond(db_session, request.id, bob, "accept")

    assert await count_direct(db_session, alice.id, bob.id) == 1
    found = await conversation_service.find_direct(db_session, alice.id, bob.id)
    assert found.id == existing.id


async def test_decline_keeps_users_apart(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)

    answered = await relationship_service.respond(db_session, request.id, bob, "decline")

    assert answered.status == FriendStatusEnum.declined
    assert await relationship_service.list_friends(db_session, alice.id) == []
    assert await count_direct(db_session, alice.id, bob.id) == 0


async def test_only_recipient_can_respond_and_action_is_validated(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.respond(db_session, request.id, alice, "accept")
    assert exc_info.value.status_code == 404

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.respond(db_session, request.id, bob, "maybe")
    assert exc_info.value.status_code == 400


async def test_answered_request_cannot_be_answered_again(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)
    await relationship_service.respond(db_session, request.id, bob, "accept")

    for action in ("decline", "accept"):
        with pytest.raises(HTTPException) as exc_info:
            await relationship_service.respond(db_session, request.id, bob, action)
        assert exc_info.value.status_code == 404

    assert [u.id for u in await relationship_service.list_friends(db_session, alice.id)] == [bob.id]
    titles = [n.title for n in await notification_service.list_for_user(db_session, alice.id)]
    assert titles.count("Friend Request Accepted") == 1


async def test_declined_request_cannot_be_accepted_later(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)
    await relationship_service.respond(db_session, request.id, bob, "decline")

    with pytest.raises(HTTPException) as exc_info:
        await relationship_service.respond(db_session, request.id, bob, "accept")
    assert exc_info.value.status_code == 404
    assert await count_direct(db_session, alice.id, bob.id) == 0


async def test_pending_lists(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)

    incoming = await relationship_service.pending_incoming(db_session, bob.id)
    outgoing = await relationship_service.pending_outgoing(db_session, alice.id)

    assert [r.id for r in incoming] == [request.id]
    assert [r.id for r in outgoing] == [request.id]
    assert incoming[0].requester.id == alice.id


# ---------------------------------------------------------------------------
# conversations
# ---------------------------------------------------------------------------

async def test_create_direct_conversation_is_idempotent(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")

    first, created_first = await conversation_service.create_conversation(db_session, alice, [bob.id])
    second, created_second = await conversation_service.create_conversation(db_session, bob, [alice.id])

    assert created_first is True
    assert created_second is False
    assert first.id == second.id
    assert first.type == ConversationTypeEnum.direct
    assert first.join_code is None
    assert sorted(first.member_ids) == sorted([alice.id, bob.id])


async def test_create_conversation_validates_members(db_session, make_user):
    alice = await make_user("Alice")

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.create_conversation(db_session, alice, [])
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.create_conversation(db_session, alice, [4242])
    assert exc_info.value.status_code == 404


async def test_group_gets_join_code_and_needs_a_name(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    carol = await make_user("Carol")

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.create_conversation(db_session, alice, [bob.id, carol.id], name="ab")
    assert exc_info.value.status_code == 400

    group, created = await conversation_service.create_conversation(
        db_session, alice, [bob.id, carol.id], name="Morning Runners"
    )
    assert created is True
    assert group.type == ConversationTypeEnum.group
    assert re.fullmatch(f"[{JOIN_CODE_ALPHABET}]{{6}}", group.join_code)
    assert len(group.member_ids) == 3


async def test_join_codes_are_unique_across_groups(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    carol = await make_user("Carol")

    codes = set()
    for index in range(5):
        group, _ = await conversation_service.create_conversation(
            db_session, alice, [bob.id, carol.id], name=f"Group {index}"
        )
        codes.add(group.join_code)
    assert len(codes) == 5


async def test_join_by_code_is_idempotent(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    carol = await make_user("Carol")
    dave = await make_user("Dave")
    group, _ = await conversation_service.create_conversation(
        db_session, alice, [bob.id, carol.id], name="Lifters"
    )

    joined = await conversation_service.join_by_code(db_session, dave, group.join_code.lower())
    again = await conversation_service.join_by_code(db_session, dave, group.join_code)

    assert joined.id == again.id == group.id
    assert again.member_ids.count(dave.id) == 1


async def test_join_by_code_errors(db_session, make_user):
    alice = await make_user("Alice")

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.join_by_code(db_session, alice, "  ")
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.join_by_code(db_session, alice, "ZZZZZZ")
    assert exc_info.value.status_code == 404


async def test_communities_are_admin_only(db_session, make_user):
    admin = await make_user("Coach", role=RoleEnum.admin)
    alice = await make_user("Alice")

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.create_community(db_session, alice, "Gym")
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException) as exc_info:
        await conversation_service.create_community(db_session, admin, "   ")
    assert exc_info.value.status_code == 400

    community = await conversation_service.create_community(db_session, admin, "Iron Temple", "Downtown gym")
    assert community.gym_owner_id == admin.id
    assert community.member_ids == [admin.id]

    joined = await conversation_service.join_community(db_session, alice, community.id)
    assert sorted(joined.member_ids) == sorted([admin.id, alice.id])

    found = await conversation_service.list_communities(db_session, "iron")
    assert [c.id for c in found] == [community.id]


# ---------------------------------------------------------------------------
# messaging
# ---------------------------------------------------------------------------

async def test_messages_are_listed_oldest_first(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    conversation, _ = await conversation_service.create_conversation(db_session, alice, [bob.id])

    for text in ("one", "two", "three"):
        await messaging_service.send(db_session, conversation.id, alice, text)

    messages = await messaging_service.list_recent(db_session, conversation.id, bob.id)
    assert [m.content for m in messages] == ["one", "two", "three"]

    latest_two = await messaging_service.list_recent(db_session, conversation.id, bob.id, limit=2)
    assert [m.content for m in latest_two] == ["two", "three"]


async def test_send_message_checks_membership_and_content(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    eve = await make_user("Eve")
    conversation, _ = await conversation_service.create_conversation(db_session, alice, [bob.id])

    with pytest.raises(HTTPException) as exc_info:
        await messaging_service.send(db_session, conversation.id, eve, "hi")
    assert exc_info.value.status_code == 404

    with pytest.raises(HTTPException) as exc_info:
        await messaging_service.send(db_session, conversation.id, alice, "   ")
    assert exc_info.value.status_code == 400


async def test_last_messages_returns_newest_per_conversation(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    carol = await make_user("Carol")
    with_bob, _ = await conversation_service.create_conversation(db_session, alice, [bob.id])
    with_carol, _ = await conversation_service.create_conversation(db_session, alice, [carol.id])

    await messaging_service.send(db_session, with_bob.id, alice, "hey bob")
    await messaging_service.send(db_session, with_bob.id, bob, "hey alice")
    await messaging_service.send(db_session, with_carol.id, carol, "ping")

    previews = await messaging_service.last_messages(db_session, [with_bob.id, with_carol.id])

    assert previews[with_bob.id].content == "hey alice"
    assert previews[with_carol.id].content == "ping"
    assert await messaging_service.last_messages(db_session, []) == {}


# ---------------------------------------------------------------------------
# notifications
# ---------------------------------------------------------------------------

async def test_mark_read_is_idempotent_and_owner_scoped(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    await relationship_service.send_request(db_session, alice, bob.id)
    notification = (await notification_service.list_for_user(db_session, bob.id))[0]
    assert await notification_service.unread_count(db_session, bob.id) == 1

    await notification_service.mark_read(db_session, notification.id, bob.id)
    await notification_service.mark_read(db_session, notification.id, bob.id)

    assert await notification_service.unread_count(db_session, bob.id) == 0
    assert await notification_service.list_for_user(db_session, bob.id, unread_only=True) == []

    with pytest.raises(HTTPException) as exc_info:
        await notification_service.mark_read(db_session, notification.id, alice.id)
    assert exc_info.value.status_code == 404


# ---------------------------------------------------------------------------
# posts
# ---------------------------------------------------------------------------

async def test_like_toggles(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    post = await post_service.create(db_session, alice, PostCreate(content="Leg day done"))

    liked = await post_service.toggle_like(db_session, post.id, bob)
    assert liked.like_count == 1
    assert liked.liked_by == [bob.id]

    unliked = await post_service.toggle_like(db_session, post.id, bob)
    assert unliked.like_count == 0


async def test_empty_posts_and_comments_are_rejected(db_session, make_user):
    alice = await make_user("Alice")

    with pytest.raises(HTTPException) as exc_info:
        await post_service.create(db_session, alice, PostCreate(content=""))
    assert exc_info.value.status_code == 400

    post = await post_service.create(db_session, alice, PostCreate(media_urls=["https://cdn.example.com/a.jpg"]))
    with pytest.raises(HTTPException) as exc_info:
        await post_service.add_comment(db_session, post.id, alice, "  ")
    assert exc_info.value.status_code == 400

    commented = await post_service.add_comment(db_session, post.id, alice, " Nice ")
    assert [c.content for c in commented.comments] == ["Nice"]


# ---------------------------------------------------------------------------
# challenges
# ---------------------------------------------------------------------------

async def test_only_admins_create_challenges(db_session, make_user):
    alice = await make_user("Alice")
    admin = await make_user("Coach", role=RoleEnum.admin)

    with pytest.raises(HTTPException) as exc_info:
        await challenge_service.create(db_session, alice, ChallengeCreate(title="100 pushups"))
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException) as exc_info:
        await challenge_service.create(db_session, admin, ChallengeCreate(title=" "))
    assert exc_info.value.status_code == 400

    challenge = await challenge_service.create(db_session, admin, ChallengeCreate(title="100 pushups"))
    assert challenge.participants == []


async def test_participate_keeps_first_completion_time(db_session, make_user):
    admin = await make_user("Coach", role=RoleEnum.admin)
    alice = await make_user("Alice")
    challenge = await challenge_service.create(db_session, admin, ChallengeCreate(title="Plank week"))

    await challenge_service.participate(db_session, challenge.id, alice)
    first = challenge.participants[0].completed_at

    again = await challenge_service.participate(db_session, challenge.id, alice)

    assert len(again.participants) == 1
    assert again.participants[0].completed is True
    assert again.participants[0].progress == 100
    assert again.participants[0].completed_at == first


async def test_leaderboard_ranks_by_completion_time(db_session, make_user):
    admin = await make_user("Coach", role=RoleEnum.admin)
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    challenge = await challenge_service.create(db_session, admin, ChallengeCreate(title="5k run"))

    await challenge_service.participate(db_session, challenge.id, bob)
    await challenge_service.participate(db_session, challenge.id, alice)
    # Alice finished earlier than Bob
    alice_entry = next(p for p in challenge.participants if p.user_id == alice.id)
    alice_entry.completed_at = datetime.utcnow() - timedelta(hours=1)
    await db_session.commit()

    board = await challenge_service.leaderboard(db_session, challenge.id)

    assert board["challenge"] == {"id": challenge.id, "title": "5k run"}
    assert [(e["rank"], e["user"].id) for e in board["leaderboard"]] == [(1, alice.id), (2, bob.id)]


async def test_unknown_challenge_is_404(db_session, make_user):
    alice = await make_user("Alice")
    with pytest.raises(HTTPException) as exc_info:
        await challenge_service.participate(db_session, 777, alice)
    assert exc_info.value.status_code == 404


async def test_notifications_not_created_for_declined_requests(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    request = await relationship_service.send_request(db_session, alice, bob.id)
    await relationship_service.respond(db_session, request.id, bob, "decline")

    result = await db_session.execute(select(func.count(Notification.id)).where(Notification.user_id == alice.id))
    assert result.scalar_one() == 0
