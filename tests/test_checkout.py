from conftest import auth


class TestPlaceOrder:
    def test_order_totals_stock_and_cart(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        make_user("sam", role="seller")
        mug = make_product(seller_id="sam", name="Mug", price=100.0, stock=5)
        set_address("alice")
        fill_cart("alice", (mug, 2))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Order placed!"
        assert body["total_amount"] == 200.0

        assert db.doc("products", mug)["stock"] == 3
        assert db.doc("carts", "alice")["items"] == []

        order = db.doc("orders", body["order_id"])
        assert order["buyer_id"] == "alice"
        assert order["status"] == "placed"
        assert order["seller_ids"] == ["sam"]
        assert order["shipping_address"]["street"] == "1 Main St"
        assert order["payment_id"].startswith("DEMO_")
        assert order["items"] == [{
            "product_id": mug,
            "seller_id": "sam",
            "name": "Mug",
            "price": 100.0,
            "quantity": 2,
            "image": "https://img.example.com/mug.png",
        }]

    def test_total_is_exact_for_decimal_prices(self, client, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        pen = make_product(name="Pen", price=0.1, stock=10)
        pad = make_product(name="Pad", price=0.2, stock=10)
        set_address("alice")
        fill_cart("alice", (pen, 3), (pad, 1))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 201
        assert response.json()["total_amount"] == 0.5

    def test_order_spanning_sellers(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        mug = make_product(seller_id="sam", name="Mug", price=10.0)
        lamp = make_product(seller_id="zoe", name="Lamp", price=25.0)
        set_address("alice")
        fill_cart("alice", (mug, 1), (lamp, 2))

        response = client.post("/market/buy", headers=auth("alice"))

        order = db.doc("orders", response.json()["order_id"])
        assert order["seller_ids"] == ["sam", "zoe"]
        assert order["total_amount"] == 60.0

    def test_empty_cart(self, client, make_user, set_address, fill_cart):
        make_user("alice")
        set_address("alice")
        fill_cart("alice")

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Cart is empty"}

    def test_missing_cart_document(self, client, make_user, set_address):
        make_user("alice")
        set_address("alice")

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    def test_requires_street_address(self, client, db, make_user, make_product, fill_cart):
        make_user("alice")
        mug = make_product(stock=5)
        fill_cart("alice", (mug, 1))
        db.collection("profiles").document("alice").set({"user_id": "alice", "address": {"city": "Pune"}})

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json()["message"] == "Please complete your Market Profile (Address) before buying!"
        assert db.doc("products", mug)["stock"] == 5

    def test_requires_profile(self, client, make_user, make_product, fill_cart):
        make_user("alice")
        fill_cart("alice", (make_product(), 1))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert "Address" in response.json()["message"]

    def test_out_of_stock_line_aborts_whole_order(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        mug = make_product(name="Mug", price=10.0, stock=5)
        lamp = make_product(name="Lamp", price=25.0, stock=1)
        set_address("alice")
        fill_cart("alice", (mug, 2), (lamp, 3))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json()["message"] == "Item Lamp is out of stock"
        assert db.doc("products", mug)["stock"] == 5
        assert db.doc("products", lamp)["stock"] == 1
        assert len(db.doc("carts", "alice")["items"]) == 2
        assert db.data.get("orders", {}) == {}

    def test_deleted_product_in_cart(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        mug = make_product(stock=5)
        set_address("alice")
        fill_cart("alice", (mug, 1), ("gone-product", 1))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json()["message"] == "One or more items in your cart no longer exist."
        assert db.doc("products", mug)["stock"] == 5

    def test_inactive_product_counts_as_missing(self, client, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        hidden = make_product(is_active=False)
        set_address("alice")
        fill_cart("alice", (hidden, 1))

        response = client.post("/market/buy", headers=auth("alice"))

        assert response.status_code == 400
        assert response.json()["message"] == "One or more items in your cart no longer exist."

    def test_buying_exact_stock_leaves_zero(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        mug = make_product(stock=2)
        set_address("alice")
        fill_cart("alice", (mug, 2))

        assert client.post("/market/buy", headers=auth("alice")).status_code == 201
        assert db.doc("products", mug)["stock"] == 0

    def test_writes_go_through_one_transaction(self, client, db, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        set_address("alice")
        fill_cart("alice", (make_product(), 1))

        client.post("/market/buy", headers=auth("alice"))

        assert len(db.transactions) == 1
        txn = db.transactions[0]
        assert txn.committed
        # stock update, order, cart reset
        assert len(txn.writes) == 3

    def test_requires_login(self, client):
        response = client.post("/market/buy")

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication credentials were not provided"


class TestOrderHistory:
    def test_no_orders_yet(self, client, make_user):
        make_user("alice")

        response = client.get("/market/orders", headers=auth("alice"))

        assert response.status_code == 200
        assert response.json() == {"message": "You have no orders yet.", "orders": []}

    def test_lists_own_orders(self, client, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        make_user("bob")
        set_address("alice")
        mug = make_product(price=10.0, stock=10)
        fill_cart("alice", (mug, 1))
        order_id = client.post("/market/buy", headers=auth("alice")).json()["order_id"]

        mine = client.get("/market/orders", headers=auth("alice")).json()["orders"]
        theirs = client.get("/market/orders", headers=auth("bob")).json()["orders"]

        assert [o["id"] for o in mine] == [order_id]
        assert mine[0]["items"][0]["quantity"] == 1
        assert theirs == []

    def test_get_single_order(self, client, make_user, make_product, set_address, fill_cart):
        make_user("alice")
        make_user("bob")
        set_address("alice")
        fill_cart("alice", (make_product(price=7.5), 2))
        order_id = client.post("/market/buy", headers=auth("alice")).json()["order_id"]

        own = client.get(f"/market/orders/{order_id}", headers=auth("alice"))
        other = client.get(f"/market/orders/{order_id}", headers=auth("bob"))

        assert own.status_code == 200
        assert own.json()["total_amount"] == 15.0
        assert other.status_code == 404
        assert other.json()["message"] == "Order not found"
