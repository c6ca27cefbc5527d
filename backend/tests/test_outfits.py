from conftest import auth_headers, seed_outfit, seed_wardrobe


def test_create_outfit_with_bare_item_ids(client, supabase):
    response = client.post(
        "/api/Outfit",
        json={"name": "Casual Friday", "category": "work", "items": [52, 54, 65]},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    body = response.json()
    outfit_id = body["outfitId"]
    assert body["data"]["outfit_name"] == "Casual Friday"
    assert supabase.tables["outfit"][0]["user_id"] == "user-1"
    rows = supabase.tables["outfit_item"]
    assert [(r["outfit_id"], r["item_id"]) for r in rows] == [(outfit_id, 52), (outfit_id, 54), (outfit_id, 65)]
    assert all("layout_data" not in r for r in rows)


def test_create_outfit_with_flat_layouts(client, supabase):
    response = client.post(
        "/api/Outfit",
        json={"name": "Canvas", "items": [{"itemId": 52, "x": 10, "y": 20, "scale": 1.5}]},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    assert supabase.tables["outfit_item"][0]["layout_data"] == {
        "x": 10.0, "y": 20.0, "scale": 1.5, "width": 100, "height": 100,
    }


def test_create_outfit_with_no_items_skips_item_insert(client, supabase):
    response = client.post("/api/Outfit", json={"name": "Empty", "items": []}, headers=auth_headers())

    assert response.status_code == 200
    assert supabase.calls_for("POST", "outfit_item") == []


def test_create_outfit_item_failure_reports_partial_creation(client, supabase):
    supabase.fail("POST", "outfit_item", status=409, body='{"message":"duplicate key"}')

    response = client.post("/api/Outfit", json={"name": "Dup", "items": [1, 1]}, headers=auth_headers())

    assert response.status_code == 409
    body = response.json()
    assert body["message"] == "Outfit created but failed to add items"
    assert body["details"]["body"] == '{"message":"duplicate key"}'
    assert len(supabase.tables["outfit"]) == 1


def test_create_outfit_requires_name(client):
    response = client.post("/api/Outfit", json={"items": [1]}, headers=auth_headers())
    assert response.status_code == 400
    assert "name" in response.json()["details"]["fields"]


def test_list_outfits_returns_views(client, supabase):
    seed_wardrobe(supabase)
    seed_outfit(supabase, 100)
    seed_outfit(supabase, 200, user_id="someone-else")

    response = client.get("/api/Outfit", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert [o["outfitId"] for o in body] == [100]
    assert body[0]["items"][0]["name"] == "Blue shirt"
    assert body[0]["items"][1]["subcategory"] == ""


def test_get_outfit_items(client, supabase):
    seed_wardrobe(supabase)
    seed_outfit(supabase, 100)

    response = client.get("/api/Outfit/100/items", headers=auth_headers())

    assert response.status_code == 200
    assert [i["itemId"] for i in response.json()] == [52, 54]


def test_get_items_of_unknown_outfit_is_404(client):
    response = client.get("/api/Outfit/100/items", headers=auth_headers())
    assert response.status_code == 404


def test_update_outfit_replaces_items_when_supplied(client, supabase):
    seed_wardrobe(supabase)
    seed_outfit(supabase, 100)

    response = client.put(
        "/api/Outfit/100",
        json={"name": "Renamed", "items": [{"itemId": 52, "layout": {"x": 3}}]},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    assert supabase.tables["outfit"][0]["outfit_name"] == "Renamed"
    rows = supabase.tables["outfit_item"]
    assert len(rows) == 1
    assert rows[0]["layout_data"]["x"] == 3.0


def test_update_outfit_keeps_items_when_not_mentioned(client, supabase):
    seed_wardrobe(supabase)
    seed_outfit(supabase, 100)

    response = client.put("/api/Outfit/100", json={"name": "Renamed"}, headers=auth_headers())

    assert response.status_code == 200
    assert len(supabase.tables["outfit_item"]) == 2
    assert supabase.calls_for("DELETE", "outfit_item") == []


def test_update_unknown_outfit_is_404(client, supabase):
    seed_outfit(supabase, 100, user_id="someone-else")

    response = client.put("/api/Outfit/100", json={"name": "Mine now", "items": []}, headers=auth_headers())

    assert response.status_code == 404
    assert supabase.calls_for("DELETE", "outfit_item") == []


def test_delete_outfit(client, supabase):
    seed_outfit(supabase, 100)

    response = client.delete("/api/Outfit/100", headers=auth_headers())

    assert response.status_code == 200
    assert supabase.tables["outfit"] == []
