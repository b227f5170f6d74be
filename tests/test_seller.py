from datetime import datetime, timezone

import pytest

from conftest import auth

PRODUCT_FORM = {
    "name": "Mug",
    "description": "Ceramic mug",
    "price": "12.50",
    "category": " Kitchen ",
    "stock": "10",
}


@pytest.fixture()
def seller(make_user):
    return make_user("sam", role="seller")


class TestCreateProduct:
    def test_create_without_image(self, client, db, seller):
        response = client.post("/market/seller/product", data=PRODUCT_FORM, headers=auth(seller))

        assert response.status_code == 201
        body = response.json()
        assert body["seller_id"] == "sam"
        assert body["category"] == "kitchen"
        assert body["price"] == 12.5
        assert body["images"] == []
        assert body["is_active"] is True
        assert body["created_at"] is not None
        assert db.doc("products", body["id"])["stock"] == 10

    def test_create_with_image(self, client, bucket, seller):
        response = client.post(
            "/market/seller/product",
            data=PRODUCT_FORM,
            files={"image": ("mug.png", b"\x89PNG fake", "image/png")},
            headers=auth(seller),
        )

        assert response.status_code == 201
        body = response.json()
        [url] = body["images"]
        assert url.startswith(f"https://storage.googleapis.com/{bucket.name}/products/{body['id']}/")
        assert url.endswith(".png")
        [blob] = bucket.blobs.values()
        assert blob.public
        assert blob.content == b"\x89PNG fake"

    def test_rejects_unsupported_image_type(self, client, db, seller):
        response = client.post(
            "/market/seller/product",
            data=PRODUCT_FORM,
            files={"image": ("mug.gif", b"GIF89a", "image/gif")},
            headers=auth(seller),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "File type not supported"
        assert db.data.get("products", {}) == {}

    def test_duplicate_name_for_same_seller(self, client, seller, make_product):
        make_product(seller_id=seller, name="Mug")

        response = client.post("/market/seller/product", data=PRODUCT_FORM, headers=auth(seller))

        assert response.status_code == 400
        assert response.json()["message"] == "Product with this name already exists."

    def test_same_name_for_other_seller_is_fine(self, client, seller, make_product):
        make_product(seller_id="zoe", name="Mug")

        response = client.post("/market/seller/product", data=PRODUCT_FORM, headers=auth(seller))

        assert response.status_code == 201

    def test_negative_price(self, client, seller):
        response = client.post("/market/seller/product", data={**PRODUCT_FORM, "price": "-1"}, headers=auth(seller))

        assert response.status_code == 400
        assert response.json()["message"].startswith("price:")

    def test_missing_field(self, client, seller):
        form = {k: v for k, v in PRODUCT_FORM.items() if k != "stock"}

        response = client.post("/market/seller/product", data=form, headers=auth(seller))

        assert response.status_code == 400
        assert response.json()["message"].startswith("stock:")

    def test_buyers_are_forbidden(self, client, make_user):
        make_user("alice")

        response = client.post("/market/seller/product", data=PRODUCT_FORM, headers=auth("alice"))

        assert response.status_code == 403
        assert response.json()["message"] == "Seller account required"


class TestUpdateProduct:
    def test_partial_update(self, client, db, seller, make_product):
        pid = make_product(seller_id=seller, name="Mug", price=10.0, stock=5)

        response = client.put(f"/market/seller/product/{pid}", data={"price": "15", "stock": "8"}, headers=auth(seller))

        assert response.status_code == 200
        stored = db.doc("products", pid)
        assert stored["price"] == 15.0
        assert stored["stock"] == 8
        assert stored["name"] == "Mug"

    def test_new_image_replaces_images(self, client, db, seller, make_product):
        pid = make_product(seller_id=seller)

        response = client.put(
            f"/market/seller/product/{pid}",
            files={"image": ("new.jpg", b"jpeg bytes", "image/jpeg")},
            headers=auth(seller),
        )

        assert response.status_code == 200
        [url] = db.doc("products", pid)["images"]
        assert f"/products/{pid}/" in url

    def test_rename_to_existing_name(self, client, seller, make_product):
        make_product(seller_id=seller, name="Lamp")
        pid = make_product(seller_id=seller, name="Mug")

        response = client.put(f"/market/seller/product/{pid}", data={"name": "Lamp"}, headers=auth(seller))

        assert response.status_code == 400

    def test_keeping_own_name_is_fine(self, client, seller, make_product):
        pid = make_product(seller_id=seller, name="Mug")

        response = client.put(f"/market/seller/product/{pid}", data={"name": "Mug", "stock": "1"}, headers=auth(seller))

        assert response.status_code == 200

    @pytest.mark.parametrize("field", ["name", "category"])
    def test_blank_name_or_category(self, client, db, seller, make_product, field):
        pid = make_product(seller_id=seller, name="Mug", category="kitchen")

        response = client.put(f"/market/seller/product/{pid}", data={field: "   "}, headers=auth(seller))

        assert response.status_code == 400
        assert response.json()["message"] == f"{field}: Value error, {field} cannot be empty"
        stored = db.doc("products", pid)
        assert (stored["name"], stored["category"]) == ("Mug", "kitchen")

    def test_other_sellers_product(self, client, seller, make_product):
        pid = make_product(seller_id="zoe")

        response = client.put(f"/market/seller/product/{pid}", data={"price": "1"}, headers=auth(seller))

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"


class TestDeleteProduct:
    def test_delete_own_product(self, client, db, seller, make_product):
        pid = make_product(seller_id=seller)

        response = client.delete(f"/market/seller/product/{pid}", headers=auth(seller))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted"}
        assert db.doc("products", pid) is None

    def test_cannot_delete_other_sellers_product(self, client, db, seller, make_product):
        pid = make_product(seller_id="zoe")

        response = client.delete(f"/market/seller/product/{pid}", headers=auth(seller))

        assert response.status_code == 404
        assert db.doc("products", pid) is not None


class TestInventoryAndHistory:
    def test_my_products_newest_first(self, client, seller, make_product):
        make_product(seller_id=seller, name="Old", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        make_product(seller_id=seller, name="Hidden", is_active=False,
                     created_at=datetime(2024, 6, 1, tzinfo=timezone.utc))
        make_product(seller_id=seller, name="New", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        make_product(seller_id="zoe", name="Theirs")

        response = client.get("/market/seller/my-products", headers=auth(seller))

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["New", "Hidden", "Old"]

    def test_history_lists_only_own_lines(self, client, seller, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        mug = make_product(seller_id=seller, name="Mug", price=10.0, stock=10)
        lamp = make_product(seller_id="zoe", name="Lamp", price=40.0, stock=10)
        set_address("alice")
        fill_cart("alice", (mug, 3), (lamp, 1))
        order_id = client.post("/market/buy", headers=auth("alice")).json()["order_id"]

        response = client.get("/market/seller/history", headers=auth(seller))

        assert response.status_code == 200
        [sale] = response.json()
        assert sale["order_id"] == order_id
        assert sale["buyer"] == {"id": "alice", "userName": "Alice", "email": "alice@example.com"}
        assert sale["status"] == "placed"
        assert [it["name"] for it in sale["items_sold"]] == ["Mug"]
        assert sale["total_earnings"] == 30.0

    def test_history_empty(self, client, seller):
        response = client.get("/market/seller/history", headers=auth(seller))

        assert response.status_code == 200
        assert response.json() == []
