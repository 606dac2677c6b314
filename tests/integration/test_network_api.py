from datetime import UTC, datetime
from unittest.mock import AsyncMock

from castingfy.db.helpers import DatabaseError
from castingfy.models.domain.chat_domain import Conversation, ConversationDigest, Message
from castingfy.models.domain.network_domain import Connection, Favorite
from castingfy.models.domain.review_domain import Review
from castingfy.models.domain.user_domain import User, UserSummary

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def test_list_connections_marks_incoming(client, login, monkeypatch):
    login("user-b")
    connection = Connection(
        id="conn-1", user_id="user-a", connected_user_id="user-b", created_at=NOW, updated_at=NOW
    )
    monkeypatch.setattr(
        "castingfy.services.connection_service.ConnectionRepository.list_for_user",
        AsyncMock(return_value=[connection]),
    )
    monkeypatch.setattr(
        "castingfy.services.connection_service.ProfileRepository.get_summary",
        AsyncMock(return_value=UserSummary(id="user-a", display_name="Ana Ruiz")),
    )

    entry = client.get("/connections").json()["connections"][0]

    assert entry["isIncoming"] is True
    assert entry["status"] == "pending"
    assert entry["otherUser"]["displayName"] == "Ana Ruiz"


def test_connecting_with_self_is_400(client, login):
    login("user-a")

    response = client.post("/connections", json={"connectedUserId": "user-a"})

    assert response.status_code == 400
    assert response.json() == {"error": "You cannot connect with yourself"}


def test_favorites_return_ids(client, login, monkeypatch):
    login("user-a")
    monkeypatch.setattr(
        "castingfy.services.favorite_service.FavoriteRepository.list_for_user",
        AsyncMock(return_value=[Favorite(id="f-1", user_id="user-a", favorited_user_id="user-c")]),
    )

    assert client.get("/favorites").json() == {"favorites": ["user-c"]}


def test_duplicate_favorite_is_409(client, login, monkeypatch):
    login("user-a")
    monkeypatch.setattr(
        "castingfy.services.favorite_service.FavoriteRepository.insert",
        AsyncMock(side_effect=DatabaseError("duplicate key", sqlstate="23505")),
    )

    response = client.post("/favorites", json={"favoritedUserId": "user-c"})

    assert response.status_code == 409


def test_conversation_list_has_last_message_and_unread_count(client, login, monkeypatch):
    login("user-a")
    digest = ConversationDigest(
        conversation=Conversation(id="conv-1", user1_id="user-a", user2_id="user-b", updated_at=NOW),
        last_message=Message(id="m-1", sender_id="user-b", content="Hola", created_at=NOW),
        unread_count=3,
    )
    monkeypatch.setattr(
        "castingfy.services.chat_service.ChatRepository.list_digests", AsyncMock(return_value=[digest])
    )
    monkeypatch.setattr(
        "castingfy.services.chat_service.ProfileRepository.get_summary",
        AsyncMock(return_value=UserSummary(id="user-b", display_name="Leo")),
    )

    conversation = client.get("/chat/conversations").json()["conversations"][0]

    assert conversation["id"] == "conv-1"
    assert conversation["unreadCount"] == 3
    assert conversation["lastMessage"]["content"] == "Hola"
    assert conversation["otherUser"]["id"] == "user-b"


def test_outsider_cannot_read_messages(client, login, monkeypatch):
    login("user-z")
    monkeypatch.setattr(
        "castingfy.services.chat_service.ChatRepository.get_conversation",
        AsyncMock(return_value=Conversation(id="conv-1", user1_id="user-a", user2_id="user-b")),
    )

    response = client.get("/chat/messages", params={"conversationId": "conv-1"})

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}


def test_review_conflict_is_409(client, login, monkeypatch):
    login("producer-1")
    monkeypatch.setattr(
        "castingfy.services.review_service.UserRepository.get_user",
        AsyncMock(return_value=User(id="producer-1", email="p@example.com", role="producer", status="verified")),
    )
    monkeypatch.setattr(
        "castingfy.services.review_service.ReviewRepository.insert",
        AsyncMock(side_effect=DatabaseError("duplicate key", sqlstate="23505")),
    )

    response = client.post(
        "/reviews", json={"talentUserId": "talent-1", "rating": 4, "reviewText": "Reliable"}
    )

    assert response.status_code == 409
    assert response.json() == {"error": "You have already reviewed this talent"}


def test_reviews_list_is_public(client, monkeypatch):
    review = Review(
        id="rev-1",
        talent_user_id="talent-1",
        reviewer_user_id="producer-1",
        rating=5,
        review_text="Great",
        reviewer_name="Norte Films",
        created_at=NOW,
    )
    monkeypatch.setattr(
        "castingfy.services.review_service.ReviewRepository.list_for_talent",
        AsyncMock(return_value=[review]),
    )

    reviews = client.get("/reviews", params={"talentUserId": "talent-1"}).json()["reviews"]

    assert reviews[0]["reviewer_name"] == "Norte Films"


def test_reviews_list_requires_talent(client):
    response = client.get("/reviews")

    assert response.status_code == 400
    assert response.json() == {"error": "talentUserId parameter is required"}


def test_deleting_a_connection_you_are_not_part_of_is_404(client, login, monkeypatch):
    login("user-a")
    monkeypatch.setattr(
        "castingfy.services.connection_service.ConnectionRepository.delete",
        AsyncMock(return_value=False),
    )

    response = client.delete("/connections", params={"connectionId": "conn-9"})

    assert response.status_code == 404
    assert response.json() == {"error": "Connection not found"}


def test_delete_connection_requires_id(client, login):
    login("user-a")

    response = client.delete("/connections")

    assert response.status_code == 400
    assert response.json() == {"error": "connectionId is required"}


def test_reviewer_deletes_own_review(client, login, monkeypatch):
    login("producer-1")
    delete = AsyncMock(return_value=True)
    monkeypatch.setattr("castingfy.services.review_service.ReviewRepository.delete", delete)

    response = client.delete("/reviews", params={"reviewId": "review-1"})

    assert response.json() == {"success": True}
    delete.assert_awaited_once_with("producer-1", "review-1")


def test_deleting_someone_elses_review_is_404(client, login, monkeypatch):
    login("producer-2")
    monkeypatch.setattr(
        "castingfy.services.review_service.ReviewRepository.delete", AsyncMock(return_value=False)
    )

    response = client.delete("/reviews", params={"reviewId": "review-1"})

    assert response.status_code == 404
    assert response.json() == {"error": "Review not found"}
