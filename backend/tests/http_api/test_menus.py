# tests/http_api/test_menus.py
import pytest

BASE = "/api/v1/menus"


async def create_menu(client, name="Main menu", location="header"):
    response = await client.post(f"{BASE}/", json={"name": name, "location": location})
    assert response.status_code == 201, response.text
    return response.json()


async def add_item(client, menu_id, **payload):
    response = await client.post(f"{BASE}/{menu_id}/items", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestMenuEndpoints:

    async def test_create_and_list(self, client):
        menu = await create_menu(client)

        menus = (await client.get(f"{BASE}/")).json()

        assert [m["id"] for m in menus] == [menu["id"]]

    async def test_taken_location_is_400(self, client):
        await create_menu(client)

        response = await client.post(f"{BASE}/", json={"name": "Second", "location": "header"})

        assert response.status_code == 400
        assert response.json()["reason"] == "location-taken"

    async def test_unknown_location_value_is_422(self, client):
        response = await client.post(f"{BASE}/", json={"name": "Nowhere", "location": "basement"})

        assert response.status_code == 422

    async def test_menu_with_nested_items(self, client):
        menu = await create_menu(client)
        shop = await add_item(client, menu["id"], title="Shop", url="/shop")
        await add_item(client, menu["id"], title="Sale", parent_id=shop["id"])

        body = (await client.get(f"{BASE}/{menu['id']}")).json()

        assert body["location"] == "header"
        assert body["items"][0]["title"] == "Shop"
        assert body["items"][0]["children"][0]["title"] == "Sale"
        assert body["items"][0]["children"][0]["depth"] == 1

    async def test_location_lookup_skips_inactive(self, client):
        menu = await create_menu(client, location="footer")
        await add_item(client, menu["id"], title="Contact")
        await add_item(client, menu["id"], title="Hidden", is_active=False)

        body = (await client.get(f"{BASE}/location/footer")).json()

        assert [i["title"] for i in body["items"]] == ["Contact"]
        assert (await client.get(f"{BASE}/location/sidebar")).status_code == 404

    async def test_cascade_delete_of_item(self, client):
        """
        Scenario: Products -> Laptops -> Gaming, delete Products.
        Expected: all three ids reported and the menu is empty.
        """
        menu = await create_menu(client)
        products = await add_item(client, menu["id"], title="Products")
        laptops = await add_item(client, menu["id"], title="Laptops", parent_id=products["id"])
        gaming = await add_item(client, menu["id"], title="Gaming", parent_id=laptops["id"])

        response = await client.delete(f"{BASE}/{menu['id']}/items/{products['id']}")

        assert response.status_code == 200
        assert sorted(response.json()["deleted_ids"]) == sorted([products["id"], laptops["id"], gaming["id"]])
        assert (await client.get(f"{BASE}/{menu['id']}/items/tree")).json() == []

    async def test_item_cycle_is_400(self, client):
        menu = await create_menu(client)
        parent = await add_item(client, menu["id"], title="Shop")
        child = await add_item(client, menu["id"], title="Sale", parent_id=parent["id"])

        response = await client.put(f"{BASE}/{menu['id']}/items/{parent['id']}", json={"parent_id": child["id"]})

        assert response.status_code == 400
        assert response.json()["reason"] == "descendant-as-parent"

    async def test_reorder_items(self, client):
        menu = await create_menu(client)
        a = await add_item(client, menu["id"], title="Aaa")
        b = await add_item(client, menu["id"], title="Bbb")

        response = await client.put(f"{BASE}/{menu['id']}/items/reorder", json={"items": [
            {"id": a["id"], "sort_order": 2},
            {"id": b["id"], "sort_order": 1},
        ]})

        assert response.json()["updated"] == 2
        tree = (await client.get(f"{BASE}/{menu['id']}/items/tree")).json()
        assert [i["id"] for i in tree] == [b["id"], a["id"]]

    async def test_delete_menu(self, client):
        menu = await create_menu(client)
        await add_item(client, menu["id"], title="Home")

        assert (await client.delete(f"{BASE}/{menu['id']}")).status_code == 200
        assert (await client.get(f"{BASE}/{menu['id']}")).status_code == 404
        assert (await client.post(f"{BASE}/{menu['id']}/items", json={"title": "Late"})).status_code == 404

    async def test_null_item_flag_is_400(self, client):
        menu = await create_menu(client)
        item = await add_item(client, menu["id"], title="Home")

        response = await client.put(f"{BASE}/{menu['id']}/items/{item['id']}", json={"is_active": None})

        assert response.status_code == 400
        assert response.json()["reason"] == "null-not-allowed"
