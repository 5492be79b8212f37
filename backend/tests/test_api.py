def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok", "totalRooms": 0, "totalPlayers": 0}


def test_create_and_get_room(client):
    res = client.post("/api/rooms", json={"roomCode": "ABC"})
    assert res.status_code == 201
    assert res.get_json() == {"roomCode": "ABC"}

    res = client.get("/api/rooms/ABC")
    assert res.status_code == 200
    room = res.get_json()
    assert room["code"] == "ABC"
    assert room["state"] == "waiting"
    assert room["players"] == []
    assert len(room["categories"]) == 8


def test_create_room_generates_code(client):
    res = client.post("/api/rooms")
    assert res.status_code == 201
    code = res.get_json()["roomCode"]
    assert len(code) == 6
    assert client.get(f"/api/rooms/{code}").status_code == 200


def test_missing_room(client):
    res = client.get("/api/rooms/nope")
    assert res.status_code == 404
    assert res.get_json() == {"error": "room_not_found"}


def test_list_rooms_includes_stats(client):
    client.post("/api/rooms", json={"roomCode": "A"})
    client.post("/api/rooms", json={"roomCode": "B"})
    data = client.get("/api/rooms").get_json()
    assert data["stats"] == {"totalRooms": 2, "totalPlayers": 0}
    assert sorted(r["code"] for r in data["rooms"]) == ["A", "B"]


def test_update_categories(client):
    client.post("/api/rooms", json={"roomCode": "ABC"})
    res = client.put(
        "/api/rooms/ABC/categories",
        json={"categories": [{"id": "fruta", "label": "Fruta", "icon": "🍎"}]},
    )
    assert res.status_code == 200
    assert res.get_json()["categories"] == [{"id": "fruta", "label": "Fruta", "icon": "🍎"}]


def test_update_categories_validation(client):
    client.post("/api/rooms", json={"roomCode": "ABC"})
    res = client.put("/api/rooms/ABC/categories", json={"categories": [{"id": "x"}]})
    assert res.status_code == 400
    assert res.get_json() == {"error": "invalid_categories"}

    res = client.put("/api/rooms/nope/categories", json={"categories": [{"id": "x", "label": "X"}]})
    assert res.status_code == 404
