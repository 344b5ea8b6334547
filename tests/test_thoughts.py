# File: tests/test_thoughts.py
import asyncio
import uuid

import httpx

from backend.app.db.session import Database
from backend.app.main import create_application
from backend.app.models.thought import Thought


def auth(token):
    return {"Authorization": token}


def insert_unowned_thought(client, message="from before accounts existed"):
    async def insert():
        async with client.app.state.db.session() as session:
            thought = Thought(message=message, category="legacy")
            session.add(thought)
            await session.commit()
            return thought.id

    return client.portal.call(insert)


def test_create_thought_records_owner(client, register_user):
    user = register_user()
    resp = client.post(
        "/thoughts",
        json={"message": "  Sunny day  ", "category": " Weather "},
        headers=auth(user["accessToken"]),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["message"] == "Sunny day"
    assert data["category"] == "weather"
    assert data["hearts"] == 0
    assert data["user"] == user["userId"]
    assert data["username"] == "ana"
    assert data["createdAt"]
    uuid.UUID(data["id"])


def test_create_thought_without_category(client, register_user, create_thought):
    token = register_user()["accessToken"]
    thought = create_thought(token)
    assert thought["category"] is None


def test_create_thought_validation(client, register_user):
    token = register_user()["accessToken"]

    resp = client.post("/thoughts", json={"message": "   "}, headers=auth(token))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation failed"

    resp = client.post("/thoughts", json={"message": "x" * 141}, headers=auth(token))
    assert resp.status_code == 400

    resp = client.post("/thoughts", json={}, headers=auth(token))
    assert resp.status_code == 400
    assert resp.json()["details"][0]["field"] == "message"


def test_get_thought(client, register_user, create_thought):
    thought = create_thought(register_user()["accessToken"])
    resp = client.get(f"/thoughts/{thought['id']}")
    assert resp.status_code == 200
    assert resp.json() == thought


def test_get_thought_malformed_id(client):
    resp = client.get("/thoughts/not-an-id")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid id format"


def test_get_thought_not_found(client):
    missing = str(uuid.uuid4())
    resp = client.get(f"/thoughts/{missing}")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "Thought not found",
        "message": f"No thought with id {missing} exists",
    }


def test_like_increments_by_exactly_n(client, register_user, create_thought):
    thought = create_thought(register_user()["accessToken"])

    for expected in range(1, 6):
        resp = client.post(f"/thoughts/{thought['id']}/like")
        assert resp.status_code == 200
        assert resp.json()["hearts"] == expected

    assert client.get(f"/thoughts/{thought['id']}").json()["hearts"] == 5


def test_concurrent_likes_are_all_counted(settings):
    likes = 20
    app = create_application(settings)

    async def scenario():
        # ASGITransport skips the lifespan, so wire the database by hand
        database = Database.from_settings(settings)
        database.connect()
        await database.create_all()
        app.state.db = database
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
                resp = await ac.post(
                    "/users",
                    json={"username": "ana", "email": "a@x.com", "password": "password123"},
                )
                token = resp.json()["accessToken"]
                resp = await ac.post("/thoughts", json={"message": "like me"}, headers=auth(token))
                thought_id = resp.json()["id"]

                responses = await asyncio.gather(
                    *(ac.post(f"/thoughts/{thought_id}/like") for _ in range(likes))
                )
                assert [r.status_code for r in responses] == [200] * likes

                return (await ac.get(f"/thoughts/{thought_id}")).json()["hearts"]
        finally:
            await database.dispose()

    assert asyncio.run(scenario()) == likes


def test_like_missing_and_malformed(client):
    assert client.post(f"/thoughts/{uuid.uuid4()}/like").status_code == 404
    assert client.post("/thoughts/123/like").status_code == 400


def test_owner_can_update(client, register_user, create_thought):
    token = register_user()["accessToken"]
    thought = create_thought(token, category="food")

    resp = client.patch(
        f"/thoughts/{thought['id']}",
        json={"message": "Edited message"},
        headers=auth(token),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Edited message"
    assert data["category"] == "food"
    assert data["createdAt"] == thought["createdAt"]
    assert data["user"] == thought["user"]

    resp = client.patch(f"/thoughts/{thought['id']}", json={"category": None}, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["category"] is None


def test_update_requires_changes(client, register_user, create_thought):
    token = register_user()["accessToken"]
    thought = create_thought(token)

    resp = client.patch(f"/thoughts/{thought['id']}", json={}, headers=auth(token))
    assert resp.status_code == 400

    resp = client.patch(f"/thoughts/{thought['id']}", json={"message": None}, headers=auth(token))
    assert resp.status_code == 400


def test_non_owner_cannot_update(client, register_user, create_thought):
    owner = register_user(username="ana", email="a@x.com")
    other = register_user(username="bob", email="b@x.com")
    thought = create_thought(owner["accessToken"])

    resp = client.patch(
        f"/thoughts/{thought['id']}",
        json={"message": "hijacked"},
        headers=auth(other["accessToken"]),
    )
    assert resp.status_code == 403
    assert resp.json()["error"] == "Not authorized"
    assert client.get(f"/thoughts/{thought['id']}").json()["message"] == thought["message"]


def test_update_missing_thought_is_404_before_ownership(client, register_user):
    token = register_user()["accessToken"]
    resp = client.patch(f"/thoughts/{uuid.uuid4()}", json={"message": "x"}, headers=auth(token))
    assert resp.status_code == 404


def test_update_requires_token(client, register_user, create_thought):
    thought = create_thought(register_user()["accessToken"])
    resp = client.patch(f"/thoughts/{thought['id']}", json={"message": "x"})
    assert resp.status_code == 401


def test_owner_can_delete(client, register_user, create_thought):
    token = register_user()["accessToken"]
    thought = create_thought(token)

    resp = client.delete(f"/thoughts/{thought['id']}", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Thought deleted", "deleted": thought}

    assert client.get(f"/thoughts/{thought['id']}").status_code == 404
    assert client.delete(f"/thoughts/{thought['id']}", headers=auth(token)).status_code == 404


def test_non_owner_cannot_delete(client, register_user, create_thought):
    owner = register_user(username="ana", email="a@x.com")
    other = register_user(username="bob", email="b@x.com")
    thought = create_thought(owner["accessToken"])

    resp = client.delete(f"/thoughts/{thought['id']}", headers=auth(other["accessToken"]))
    assert resp.status_code == 403
    assert client.get(f"/thoughts/{thought['id']}").status_code == 200


def test_unowned_thought_is_read_only(client, register_user):
    thought_id = insert_unowned_thought(client)
    token = register_user()["accessToken"]

    resp = client.get(f"/thoughts/{thought_id}")
    assert resp.status_code == 200
    assert resp.json()["user"] is None

    assert client.post(f"/thoughts/{thought_id}/like").json()["hearts"] == 1

    resp = client.patch(f"/thoughts/{thought_id}", json={"message": "mine now"}, headers=auth(token))
    assert resp.status_code == 403
    resp = client.delete(f"/thoughts/{thought_id}", headers=auth(token))
    assert resp.status_code == 403
    assert client.get(f"/thoughts/{thought_id}").status_code == 200


def test_full_scenario(client, register_user):
    t1 = register_user(username="ana", email="a@x.com", password="password123")["accessToken"]

    resp = client.post("/sessions", json={"email": "a@x.com", "password": "password123"})
    login = resp.json()
    t2 = login["accessToken"]
    assert t2 != t1
    assert client.post("/thoughts", json={"message": "hi"}, headers=auth(t1)).status_code == 401

    resp = client.post("/thoughts", json={"message": "hi"}, headers=auth(t2))
    assert resp.status_code == 201
    thought = resp.json()
    assert thought["user"] == login["userId"]

    client.post(f"/thoughts/{thought['id']}/like")
    resp = client.post(f"/thoughts/{thought['id']}/like")
    assert resp.json()["hearts"] == 2

    tb = register_user(username="bob", email="b@x.com")["accessToken"]
    assert client.delete(f"/thoughts/{thought['id']}", headers=auth(tb)).status_code == 403
