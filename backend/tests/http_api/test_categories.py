# tests/http_api/test_categories.py
import pytest

BASE = "/api/v1/categories"


async def create(client, **payload):
    response = await client.post(f"{BASE}/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestCategoryEndpoints:

    async def test_create_returns_generated_slug(self, client):
        body = await create(client, name="Tech News")

        assert body["slug"] == "tech-news"
        assert body["type"] == "post"
        assert body["parent"] is None
        assert body["children"] == []

    async def test_duplicate_names_are_numbered(self, client):
        first = await create(client, name="Tech")
        second = await create(client, name="Tech")

        assert (first["slug"], second["slug"]) == ("tech", "tech-1")

    async def test_explicit_duplicate_slug_is_409(self, client):
        await create(client, name="Tech", slug="tech")

        response = await client.post(f"{BASE}/", json={"name": "Other", "slug": "tech"})

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT_ERROR"

    async def test_malformed_slug_is_422(self, client):
        response = await client.post(f"{BASE}/", json={"name": "Tech", "slug": "Not A Slug"})

        assert response.status_code == 422

    async def test_get_by_id_and_slug(self, client):
        root = await create(client, name="Tech")
        child = await create(client, name="AI", parent_id=root["id"])

        by_id = (await client.get(f"{BASE}/{root['id']}")).json()
        by_slug = (await client.get(f"{BASE}/slug/ai")).json()

        assert by_id["children_count"] == 1
        assert by_id["children"][0]["id"] == child["id"]
        assert by_slug["parent"]["id"] == root["id"]

    async def test_missing_category_is_404(self, client):
        assert (await client.get(f"{BASE}/999")).status_code == 404
        assert (await client.get(f"{BASE}/slug/nothing")).status_code == 404
        assert (await client.put(f"{BASE}/999", json={"name": "Nope"})).status_code == 404

    async def test_cycle_is_400_with_reason(self, client):
        root = await create(client, name="Root")
        child = await create(client, name="Child", parent_id=root["id"])

        response = await client.put(f"{BASE}/{root['id']}", json={"parent_id": child["id"]})

        assert response.status_code == 400
        assert response.json()["reason"] == "descendant-as-parent"

    async def test_self_parent_is_400(self, client):
        root = await create(client, name="Root")

        response = await client.put(f"{BASE}/{root['id']}", json={"parent_id": root["id"]})

        assert response.status_code == 400
        assert response.json()["reason"] == "self-parent"

    async def test_missing_parent_on_create_is_400(self, client):
        response = await client.post(f"{BASE}/", json={"name": "Lost", "parent_id": 404})

        assert response.status_code == 400
        assert response.json()["reason"] == "parent-not-found"

    async def test_rename_updates_slug(self, client):
        cat = await create(client, name="Old name")

        response = await client.put(f"{BASE}/{cat['id']}", json={"name": "New name"})

        assert response.status_code == 200
        assert response.json()["slug"] == "new-name"

    async def test_delete_moves_children_up(self, client):
        """
        Scenario: Tech -> AI, delete Tech.
        Expected: AI becomes a root; a second delete is 404.
        """
        tech = await create(client, name="Tech")
        ai = await create(client, name="AI", parent_id=tech["id"])

        response = await client.delete(f"{BASE}/{tech['id']}")

        assert response.status_code == 200
        assert response.json()["deleted_ids"] == [tech["id"]]
        assert (await client.get(f"{BASE}/{ai['id']}")).json()["parent_id"] is None
        assert (await client.delete(f"{BASE}/{tech['id']}")).status_code == 404

    async def test_tree_nests_by_depth(self, client):
        news = await create(client, name="News")
        tech = await create(client, name="Tech", parent_id=news["id"])
        await create(client, name="AI", parent_id=tech["id"])
        await create(client, name="Shoes", type="product")

        tree = (await client.get(f"{BASE}/tree")).json()

        assert [n["name"] for n in tree] == ["News"]
        level1 = tree[0]["children"]
        assert [(n["name"], n["depth"]) for n in level1] == [("Tech", 1)]
        assert [(n["name"], n["depth"]) for n in level1[0]["children"]] == [("AI", 2)]

        products = (await client.get(f"{BASE}/tree", params={"type": "product"})).json()
        assert [n["name"] for n in products] == ["Shoes"]

    async def test_path(self, client):
        news = await create(client, name="News")
        tech = await create(client, name="Tech", parent_id=news["id"])

        path = (await client.get(f"{BASE}/{tech['id']}/path")).json()

        assert [p["slug"] for p in path] == ["news", "tech"]

    async def test_reorder(self, client):
        a = await create(client, name="Aaa")
        b = await create(client, name="Bbb")

        response = await client.put(f"{BASE}/reorder", json={"items": [
            {"id": a["id"], "sort_order": 1},
            {"id": b["id"], "sort_order": 0},
        ]})

        assert response.status_code == 200
        assert response.json()["updated"] == 2
        tree = (await client.get(f"{BASE}/tree")).json()
        assert [n["id"] for n in tree] == [b["id"], a["id"]]

    async def test_empty_reorder_is_422(self, client):
        response = await client.put(f"{BASE}/reorder", json={"items": []})

        assert response.status_code == 422

    async def test_list_and_stats(self, client):
        await create(client, name="News")
        await create(client, name="Sports", status="inactive")
        await create(client, name="Shoes", type="product")

        listing = (await client.get(f"{BASE}/", params={"limit": 1})).json()
        stats = (await client.get(f"{BASE}/stats")).json()

        assert listing["total"] == 2
        assert listing["total_pages"] == 2
        assert len(listing["data"]) == 1
        assert stats["total"] == 3
        assert {s["value"]: s["count"] for s in stats["by_type"]} == {"post": 2, "product": 1}


@pytest.mark.asyncio
class TestProductCategoryEndpoints:

    async def test_crud_round(self, client):
        base = "/api/v1/product-categories"
        laptops = (await client.post(f"{base}/", json={"name": "Laptops"})).json()
        gaming = (await client.post(f"{base}/", json={"name": "Gaming", "parent_id": laptops["id"]})).json()

        tree = (await client.get(f"{base}/tree")).json()
        assert tree[0]["children"][0]["id"] == gaming["id"]

        assert (await client.delete(f"{base}/{laptops['id']}")).status_code == 200
        assert (await client.get(f"{base}/{gaming['id']}")).json()["parent_id"] is None


@pytest.mark.asyncio
class TestNullPatches:

    async def test_null_status_is_400(self, client):
        cat = await create(client, name="Tech")

        response = await client.put(f"{BASE}/{cat['id']}", json={"status": None})

        assert response.status_code == 400
        assert response.json()["reason"] == "null-not-allowed"
        assert (await client.get(f"{BASE}/{cat['id']}")).json()["status"] == "active"

    async def test_null_product_category_status_is_400(self, client):
        base = "/api/v1/product-categories"
        cat = (await client.post(f"{base}/", json={"name": "Laptops"})).json()

        response = await client.put(f"{base}/{cat['id']}", json={"status": None})

        assert response.status_code == 400
