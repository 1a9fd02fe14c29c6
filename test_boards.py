import pytest


async def create_board(client, headers, name="Sprint"):
    response = await client.post("/boards", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestBoardsApi:
    """HTTP тесты для досок"""

    @pytest.mark.asyncio
    async def test_end_to_end_scenario(self, client):
        """Полный сценарий: регистрация, доска, список, карточка, чужой доступ, удаление"""
        response = await client.post("/users", json={"username": "alice", "password": "secret1"})
        assert response.status_code == 201
        alice_id = response.json()["id"]

        response = await client.post("/sessions", json={"username": "alice", "password": "secret1"})
        assert response.status_code == 200
        alice = {"Authorization": f"Bearer {response.json()['token']}"}

        response = await client.post("/boards", json={"name": "Sprint"}, headers=alice)
        assert response.status_code == 201
        board = response.json()
        assert board["members"] == [{"userId": alice_id, "role": "owner"}]

        response = await client.post(f"/boards/{board['id']}/lists", json={"title": "Todo"}, headers=alice)
        assert response.status_code == 201
        board_list = response.json()

        response = await client.post(f"/lists/{board_list['id']}/cards", json={"title": "Fix bug"}, headers=alice)
        assert response.status_code == 201
        assert response.json()["position"] == 0
        assert response.json()["comments"] == []

        await client.post("/users", json={"username": "bob", "password": "secret2"})
        response = await client.post("/sessions", json={"username": "bob", "password": "secret2"})
        bob = {"Authorization": f"Bearer {response.json()['token']}"}
        assert (await client.get(f"/boards/{board['id']}", headers=bob)).status_code == 403

        assert (await client.delete(f"/boards/{board['id']}", headers=alice)).status_code == 204
        assert (await client.get(f"/lists/{board_list['id']}", headers=alice)).status_code == 404

    @pytest.mark.asyncio
    async def test_create_board_defaults(self, client, make_user):
        _, headers = await make_user("alice")

        response = await client.post("/boards", json={"name": "Sprint"}, headers=headers)

        body = response.json()
        assert response.headers["location"] == f"/boards/{body['id']}"
        assert body["isArchived"] is False
        assert body["isFavorite"] is False
        assert body["isTemplate"] is False

    @pytest.mark.asyncio
    async def test_create_board_requires_name(self, client, make_user):
        _, headers = await make_user("alice")

        assert (await client.post("/boards", json={"name": " "}, headers=headers)).status_code == 400
        assert (await client.post("/boards", json={}, headers=headers)).status_code == 400

    @pytest.mark.asyncio
    async def test_list_boards_only_returns_memberships(self, client, make_user):
        _, alice = await make_user("alice")
        _, bob = await make_user("bob")
        await create_board(client, alice, "Alice board")
        await create_board(client, bob, "Bob board")

        response = await client.get("/boards", headers=alice)

        assert [board["name"] for board in response.json()] == ["Alice board"]

    @pytest.mark.asyncio
    async def test_get_board_includes_lists_and_cards(self, client, make_user):
        _, headers = await make_user("alice")
        board = await create_board(client, headers)
        todo = (await client.post(f"/boards/{board['id']}/lists", json={"title": "Todo"}, headers=headers)).json()
        done = (await client.post(f"/boards/{board['id']}/lists", json={"title": "Done"}, headers=headers)).json()
        await client.post(f"/lists/{todo['id']}/cards", json={"title": "Fix bug"}, headers=headers)

        response = await client.get(f"/boards/{board['id']}", headers=headers)

        assert response.status_code == 200
        lists = response.json()["lists"]
        assert [board_list["id"] for board_list in lists] == [todo["id"], done["id"]]
        assert [card["title"] for card in lists[0]["cards"]] == ["Fix bug"]
        assert lists[1]["cards"] == []

    @pytest.mark.asyncio
    async def test_get_missing_board(self, client, make_user):
        _, headers = await make_user("alice")

        response = await client.get("/boards/missing", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Board not found."}

    @pytest.mark.asyncio
    async def test_update_board_partial(self, client, make_user):
        _, headers = await make_user("alice")
        board = await create_board(client, headers)

        response = await client.put(f"/boards/{board['id']}", json={"isFavorite": True}, headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Sprint"
        assert response.json()["isFavorite"] is True

    @pytest.mark.asyncio
    async def test_member_cannot_update_or_delete_board(self, client, make_user):
        _, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        board = await create_board(client, alice)
        await client.post(f"/boards/{board['id']}/members", json={"userId": bob_id}, headers=alice)

        assert (await client.put(f"/boards/{board['id']}", json={"name": "X"}, headers=bob)).status_code == 403
        assert (await client.delete(f"/boards/{board['id']}", headers=bob)).status_code == 403

    @pytest.mark.asyncio
    async def test_admin_can_update_but_not_delete_board(self, client, make_user):
        _, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        board = await create_board(client, alice)
        await client.post(
            f"/boards/{board['id']}/members", json={"userId": bob_id, "role": "admin"}, headers=alice
        )

        assert (await client.put(f"/boards/{board['id']}", json={"name": "X"}, headers=bob)).status_code == 200
        assert (await client.delete(f"/boards/{board['id']}", headers=bob)).status_code == 403

    @pytest.mark.asyncio
    async def test_delete_board_cascades(self, client, make_user):
        """Удаление доски удаляет списки, карточки и комментарии"""
        _, headers = await make_user("alice")
        board = await create_board(client, headers)
        board_list = (await client.post(
            f"/boards/{board['id']}/lists", json={"title": "Todo"}, headers=headers
        )).json()
        card = (await client.post(
            f"/lists/{board_list['id']}/cards", json={"title": "Fix bug"}, headers=headers
        )).json()
        comment = (await client.post(
            f"/cards/{card['id']}/comments", json={"text": "on it"}, headers=headers
        )).json()

        assert (await client.delete(f"/boards/{board['id']}", headers=headers)).status_code == 204

        assert (await client.get(f"/boards/{board['id']}", headers=headers)).status_code == 404
        assert (await client.get(f"/lists/{board_list['id']}", headers=headers)).status_code == 404
        assert (await client.get(f"/cards/{card['id']}", headers=headers)).status_code == 404
        assert (await client.get(f"/comments/{comment['id']}", headers=headers)).status_code == 404
        assert (await client.get("/comments", headers=headers)).json() == []


class TestBoardMembersApi:
    """HTTP тесты для участников доски"""

    @pytest.mark.asyncio
    async def test_owner_adds_member(self, client, make_user):
        alice_id, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        board = await create_board(client, alice)

        response = await client.post(f"/boards/{board['id']}/members", json={"userId": bob_id}, headers=alice)

        assert response.status_code == 201
        assert response.json() == {"userId": bob_id, "role": "member"}
        members = (await client.get(f"/boards/{board['id']}/members", headers=bob)).json()
        assert members == [
            {"userId": alice_id, "role": "owner"},
            {"userId": bob_id, "role": "member"},
        ]

    @pytest.mark.asyncio
    async def test_add_member_errors(self, client, make_user):
        _, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        carol_id, _ = await make_user("carol")
        board = await create_board(client, alice)
        url = f"/boards/{board['id']}/members"

        assert (await client.post(url, json={"userId": "missing"}, headers=alice)).status_code == 404
        assert (await client.post(url, json={"userId": bob_id, "role": "owner"}, headers=alice)).status_code == 400
        assert (await client.post(url, json={"userId": bob_id}, headers=alice)).status_code == 201
        assert (await client.post(url, json={"userId": bob_id}, headers=alice)).status_code == 409
        # Добавлять участников может только владелец
        assert (await client.post(url, json={"userId": carol_id}, headers=bob)).status_code == 403

    @pytest.mark.asyncio
    async def test_change_member_role(self, client, make_user):
        alice_id, alice = await make_user("alice")
        bob_id, _ = await make_user("bob")
        board = await create_board(client, alice)
        await client.post(f"/boards/{board['id']}/members", json={"userId": bob_id}, headers=alice)

        response = await client.patch(
            f"/boards/{board['id']}/members/{bob_id}", json={"role": "admin"}, headers=alice
        )
        assert response.status_code == 200
        assert response.json() == {"userId": bob_id, "role": "admin"}
        assert response.headers["location"] == f"/boards/{board['id']}/members/{bob_id}"

        response = await client.patch(
            f"/boards/{board['id']}/members/{alice_id}", json={"role": "member"}, headers=alice
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_removes_member_but_not_admin(self, client, make_user):
        _, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        carol_id, _ = await make_user("carol")
        dave_id, _ = await make_user("dave")
        board = await create_board(client, alice)
        url = f"/boards/{board['id']}/members"
        await client.post(url, json={"userId": bob_id, "role": "admin"}, headers=alice)
        await client.post(url, json={"userId": carol_id, "role": "admin"}, headers=alice)
        await client.post(url, json={"userId": dave_id}, headers=alice)

        assert (await client.delete(f"{url}/{carol_id}", headers=bob)).status_code == 403
        assert (await client.delete(f"{url}/{dave_id}", headers=bob)).status_code == 204

        members = (await client.get(url, headers=alice)).json()
        assert dave_id not in [member["userId"] for member in members]

    @pytest.mark.asyncio
    async def test_member_can_leave_and_loses_access(self, client, make_user):
        _, alice = await make_user("alice")
        bob_id, bob = await make_user("bob")
        board = await create_board(client, alice)
        await client.post(f"/boards/{board['id']}/members", json={"userId": bob_id}, headers=alice)

        response = await client.delete(f"/boards/{board['id']}/members/{bob_id}", headers=bob)

        assert response.status_code == 204
        assert (await client.get(f"/boards/{board['id']}", headers=bob)).status_code == 403

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, client, make_user):
        alice_id, alice = await make_user("alice")
        board = await create_board(client, alice)

        response = await client.delete(f"/boards/{board['id']}/members/{alice_id}", headers=alice)

        assert response.status_code == 400
