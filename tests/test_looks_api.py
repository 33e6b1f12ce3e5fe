"""Tests for the look endpoints and the look lifecycle."""

from conftest import BLOB_BASE, look_payload, seo_payload
from styleinspo.database.repositories.looks import LookRepository
from styleinspo.services.seo import SEOContentGenerator

LOOKS = "/api/v1/looks"


def create_look(client, headers, look_id="look-1", **overrides):
    response = client.post(LOOKS, json=look_payload(look_id, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateLook:
    def test_create_returns_stored_look(self, client, admin_headers):
        look = create_look(client, admin_headers)

        assert look["id"] == "look-1"
        assert look["mainImage"] == f"{BLOB_BASE}/looks/look-1-main.jpg"
        assert [item["id"] for item in look["items"]] == ["item-1", "item-2"]
        assert look["items"][0]["affiliateLink"] == "https://shop.example.com/blazer"
        assert look["occasion"] == "professional"
        assert look["createdAt"]
        assert look["seo"] is None

    def test_repeated_id_returns_existing_look(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.post(
            LOOKS,
            json=look_payload(title="A different title"),
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Autumn Office Layers"
        assert len(client.get(LOOKS).json()) == 1

    def test_create_requires_admin(self, client):
        response = client.post(LOOKS, json=look_payload())

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Authentication required"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_invalid_token_is_rejected(self, client):
        response = client.post(
            LOOKS,
            json=look_payload(),
            headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Could not validate credentials"

    def test_missing_title_is_a_bad_request(self, client, admin_headers):
        payload = look_payload()
        del payload["title"]

        response = client.post(LOOKS, json=payload, headers=admin_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("Invalid request")

    def test_supplied_seo_is_keyed_by_current_items(self, client, admin_headers):
        look = create_look(client, admin_headers, seo=seo_payload())

        descriptions = look["seo"]["itemDescriptions"]
        assert set(descriptions) == {"item-1", "item-2"}
        assert descriptions["item-1"] == "Hand written blazer copy."
        assert "silk blouse" in descriptions["item-2"]
        assert set(look["seo"]["itemAltTexts"]) == {"item-1", "item-2"}

    def test_tags_are_trimmed(self, client, admin_headers):
        look = create_look(client, admin_headers, tags=[" autumn ", "", "  ", "office"])

        assert look["tags"] == ["autumn", "office"]


class TestReadLooks:
    def test_missing_look_is_not_found(self, client):
        response = client.get(f"{LOOKS}/missing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Look not found"}

    def test_search_keeps_looks_matching_every_term(self, client, admin_headers):
        create_look(client, admin_headers)
        create_look(
            client,
            admin_headers,
            look_id="look-2",
            title="Summer Picnic",
            tags=["summer"],
            items=[{"id": "dress", "name": "Sundress", "category": "dresses"}]
        )

        assert {look["id"] for look in client.get(LOOKS).json()} == {"look-1", "look-2"}
        assert [look["id"] for look in client.get(LOOKS, params={"q": "OUTERWEAR autumn"}).json()] == ["look-1"]
        assert [look["id"] for look in client.get(LOOKS, params={"q": "dresses"}).json()] == ["look-2"]
        assert client.get(LOOKS, params={"q": "autumn dresses"}).json() == []


class TestUpdateLook:
    def test_update_merges_provided_fields(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.put(
            f"{LOOKS}/look-1",
            json={"title": "Office Layers", "tags": None},
            headers=admin_headers
        )

        assert response.status_code == 200
        look = response.json()
        assert look["title"] == "Office Layers"
        assert look["tags"] == ["autumn", "office"]
        assert len(look["items"]) == 2
        assert look["season"] == "fall"

    def test_update_missing_look(self, client, admin_headers):
        response = client.put(f"{LOOKS}/missing", json={"title": "x"}, headers=admin_headers)

        assert response.status_code == 404

    def test_replacing_items_prunes_seo_maps(self, client, admin_headers):
        look = create_look(client, admin_headers, seo=seo_payload())

        response = client.put(
            f"{LOOKS}/look-1",
            json={"items": [look["items"][1]]},
            headers=admin_headers
        )

        seo = response.json()["seo"]
        assert set(seo["itemDescriptions"]) == {"item-2"}
        assert set(seo["itemAltTexts"]) == {"item-2"}


class TestDeleteLook:
    def test_delete_removes_hosted_images_then_row(self, client, admin_headers, media):
        create_look(client, admin_headers)

        response = client.delete(f"{LOOKS}/look-1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Look deleted"}
        assert sorted(media.deleted) == ["looks/look-1-item-1.jpg", "looks/look-1-main.jpg"]
        assert client.get(f"{LOOKS}/look-1").status_code == 404

    def test_delete_succeeds_when_image_cleanup_fails(self, client, admin_headers, media):
        create_look(client, admin_headers)
        media.fail_deletes = True

        response = client.delete(f"{LOOKS}/look-1", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"{LOOKS}/look-1").status_code == 404

    def test_second_delete_is_not_found_without_more_cleanup(self, client, admin_headers, media):
        create_look(client, admin_headers)
        client.delete(f"{LOOKS}/look-1", headers=admin_headers)
        cleaned = list(media.deleted)

        response = client.delete(f"{LOOKS}/look-1", headers=admin_headers)

        assert response.status_code == 404
        assert media.deleted == cleaned

    def test_delete_racing_another_delete_still_succeeds(self, client, admin_headers, mocker):
        create_look(client, admin_headers)
        # The other request removed the row between the load and the delete
        mocker.patch.object(LookRepository, "delete", mocker.AsyncMock(return_value=False))

        response = client.delete(f"{LOOKS}/look-1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_delete_missing_look(self, client, admin_headers, media):
        response = client.delete(f"{LOOKS}/missing", headers=admin_headers)

        assert response.status_code == 404
        assert media.deleted == []


class TestItems:
    def test_add_item_extends_seo_maps(self, client, admin_headers):
        create_look(client, admin_headers, seo=seo_payload())

        response = client.post(
            f"{LOOKS}/look-1/items",
            json={"id": "item-3", "name": "Belt", "category": "accessories", "price": "$20"},
            headers=admin_headers
        )

        assert response.status_code == 201
        look = response.json()
        assert [item["id"] for item in look["items"]] == ["item-1", "item-2", "item-3"]
        assert look["seo"]["itemDescriptions"]["item-3"] == (
            "This stylish accessories belt features modern fashion styling "
            "perfect for casual occasions. Available for $20."
        )
        assert look["seo"]["itemAltTexts"]["item-3"] == (
            "stylish accessories Belt - modern fashion style for casual"
        )

    def test_added_item_gets_an_id(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.post(
            f"{LOOKS}/look-1/items",
            json={"name": "Loafers"},
            headers=admin_headers
        )

        added = response.json()["items"][-1]
        assert added["name"] == "Loafers"
        assert added["id"]

    def test_update_item_keeps_other_fields(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.put(
            f"{LOOKS}/look-1/items/item-2",
            json={"price": "$39"},
            headers=admin_headers
        )

        assert response.status_code == 200
        item = response.json()["items"][1]
        assert item["price"] == "$39"
        assert item["name"] == "Silk Blouse"

    def test_update_missing_item(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.put(
            f"{LOOKS}/look-1/items/nope",
            json={"price": "$39"},
            headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Item not found"

    def test_remove_item_cleans_up_its_image(self, client, admin_headers, media):
        create_look(client, admin_headers, seo=seo_payload())

        response = client.delete(f"{LOOKS}/look-1/items/item-1", headers=admin_headers)

        assert response.status_code == 200
        look = response.json()
        assert [item["id"] for item in look["items"]] == ["item-2"]
        assert set(look["seo"]["itemDescriptions"]) == {"item-2"}
        assert media.deleted == ["looks/look-1-item-1.jpg"]

    def test_remove_item_keeps_image_shared_with_look(self, client, admin_headers, media):
        payload = look_payload()
        payload["items"][0]["image"] = payload["mainImage"]
        client.post(LOOKS, json=payload, headers=admin_headers)

        client.delete(f"{LOOKS}/look-1/items/item-1", headers=admin_headers)

        assert media.deleted == []

    def test_remove_item_keeps_image_shared_with_another_item(self, client, admin_headers, media):
        shared = f"{BLOB_BASE}/looks/shared.jpg"
        payload = look_payload()
        for item in payload["items"]:
            item["image"] = shared
        client.post(LOOKS, json=payload, headers=admin_headers)

        response = client.delete(f"{LOOKS}/look-1/items/item-1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["items"][0]["image"] == shared
        assert media.deleted == []


class TestRegenerateSeo:
    def test_regenerate_stores_bundle(self, client, admin_headers):
        create_look(client, admin_headers)

        response = client.post(f"{LOOKS}/look-1/seo", headers=admin_headers)

        assert response.status_code == 200
        result = response.json()
        assert result["success"] is True
        assert result["seoData"]["pageTitle"] == "stylish Professional Outfit - 2 Piece Look"
        assert result["aiAnalysis"]["confidence"] == 0.7
        assert result["aiAnalysis"]["priceRange"] == "$49.99 - $120"

        look = client.get(f"{LOOKS}/look-1").json()
        assert look["seo"]["urlSlug"] == "stylish-professional-outfit-2-piece-look"
        assert set(look["seo"]["itemDescriptions"]) == {"item-1", "item-2"}
        assert look["aiAnalysis"]["occasion"] == "professional"
        assert look["aiAnalysis"]["season"] == "fall"
        assert look["seoLastUpdated"] is not None

    def test_failed_regeneration_keeps_stored_seo(self, client, admin_headers, mocker):
        create_look(client, admin_headers, seo=seo_payload())
        mocker.patch.object(
            SEOContentGenerator,
            "synthesize",
            side_effect=RuntimeError("template failure")
        )

        response = client.post(f"{LOOKS}/look-1/seo", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "template failure"}
        look = client.get(f"{LOOKS}/look-1").json()
        assert look["seo"]["pageTitle"] == "Camel Professional Outfit - 2 Piece Look"
        assert look["seoLastUpdated"] is None

    def test_regenerate_missing_look(self, client, admin_headers):
        response = client.post(f"{LOOKS}/missing/seo", headers=admin_headers)

        assert response.status_code == 404
