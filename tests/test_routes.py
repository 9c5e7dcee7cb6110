from core.extensions import db
from main import seed_demo_data
from models.productModels import Products
from models.userModel import ROLE_STORE_OWNER


def test_ping(client):
    response = client.get('/ping')
    assert response.status_code == 200


def test_register_and_login(client):
    response = client.post('/api/auth/register/supplier', json={
        "email": "Sales@FreshFarms.com",
        "password": "secret123",
        "company_name": "Fresh Farms",
        "phone_number": "0501234567",
        "representative_name": "Dana",
    })
    assert response.status_code == 201
    assert response.get_json()["user"]["role"] == "supplier"

    response = client.post('/api/auth/register/supplier', json={"email": "x@y.com", "password": "pw"})
    assert response.status_code == 400

    response = client.post('/api/auth/register/store-owner', json={"email": "sales@freshfarms.com", "password": "pw"})
    assert response.status_code == 409

    response = client.post('/api/auth/login', json={"email": "sales@freshfarms.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.get_json()["access_token"]

    response = client.get('/api/auth/me', headers={"Authorization": f"Bearer {token}"})
    assert response.get_json()["user"]["company_name"] == "Fresh Farms"

    response = client.post('/api/auth/login', json={"email": "sales@freshfarms.com", "password": "wrong"})
    assert response.status_code == 401


def test_requests_without_token_are_rejected(client):
    assert client.get('/api/orders').status_code == 401


def test_order_lifecycle_over_http(client, supplier, store_owner, headers_for):
    response = client.post('/api/supplier/products', headers=headers_for(supplier), json={
        "name": "Tomatoes 1kg", "price_per_item": 10, "minimum_purchase_quantity": 2, "current_stock": 0,
    })
    assert response.status_code == 201
    product_id = response.get_json()["product"]["product_id"]

    response = client.post('/api/orders', headers=headers_for(store_owner), json={
        "supplier_id": supplier.id, "items": [{"product_id": product_id, "quantity": 3}],
    })
    assert response.status_code == 201
    order = response.get_json()["order"]
    assert order["total_price"] == 30
    assert order["items"][0]["price_at_order"] == 10
    assert [h["status"] for h in order["status_history"]] == ["pending"]
    order_id = order["order_id"]

    response = client.patch(f'/api/orders/{order_id}/status', headers=headers_for(supplier),
                            json={"status": "in-progress"})
    assert response.status_code == 200
    assert len(response.get_json()["order"]["status_history"]) == 2

    response = client.patch(f'/api/orders/{order_id}/status', headers=headers_for(supplier),
                            json={"status": "completed"})
    assert response.status_code == 400
    assert response.get_json()["code"] == "ILLEGAL_TRANSITION"
    assert response.get_json()["details"]["current_status"] == "in-progress"

    response = client.patch(f'/api/orders/{order_id}/status', headers=headers_for(store_owner),
                            json={"status": "completed"})
    assert response.status_code == 200
    body = response.get_json()["order"]
    assert body["status"] == "completed"
    assert [h["status"] for h in body["status_history"]] == ["pending", "in-progress", "completed"]
    assert db.session.get(Products, product_id).current_stock == 3


def test_below_minimum_over_http(client, supplier, store_owner, make_product, headers_for):
    product = make_product(supplier, minimum_purchase_quantity=5)

    response = client.post('/api/orders', headers=headers_for(store_owner), json={
        "supplier_id": supplier.id, "items": [{"product_id": product.id, "quantity": 1}],
    })

    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "BELOW_MINIMUM_QUANTITY"
    assert body["details"]["minimum"] == 5


def test_oversized_quantity_over_http(client, supplier, store_owner, make_product, headers_for):
    product = make_product(supplier)

    response = client.post('/api/orders', headers=headers_for(store_owner), json={
        "supplier_id": supplier.id, "items": [{"product_id": product.id, "quantity": 10**20}],
    })

    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"]["field"] == "quantity"

    response = client.post('/api/inventory/purchase', json={
        "items": [{"product_id": product.id, "quantity": 10**20}],
    })
    assert response.status_code == 400


def test_overprecise_price_over_http(client, supplier, headers_for):
    response = client.post('/api/supplier/products', headers=headers_for(supplier),
                           json={"name": "Saffron", "price_per_item": "1.005"})

    assert response.status_code == 400
    assert response.get_json()["details"]["field"] == "price_per_item"


def test_only_parties_see_an_order(client, make_user, supplier, store_owner, make_product, headers_for):
    product = make_product(supplier)
    response = client.post('/api/orders', headers=headers_for(store_owner), json={
        "supplier_id": supplier.id, "items": [{"product_id": product.id, "quantity": 1}],
    })
    order_id = response.get_json()["order"]["order_id"]
    stranger = make_user(ROLE_STORE_OWNER)

    assert client.get(f'/api/orders/{order_id}', headers=headers_for(supplier)).status_code == 200
    assert client.get(f'/api/orders/{order_id}', headers=headers_for(stranger)).status_code == 403
    assert client.get('/api/orders/999', headers=headers_for(supplier)).status_code == 404

    listed = client.get('/api/orders', headers=headers_for(supplier)).get_json()["orders"]
    assert [o["order_id"] for o in listed] == [order_id]
    assert client.get('/api/orders', headers=headers_for(stranger)).get_json()["orders"] == []


def test_role_gated_endpoints(client, supplier, store_owner, headers_for):
    response = client.post('/api/supplier/products', headers=headers_for(store_owner),
                           json={"name": "Rice", "price_per_item": 3})
    assert response.status_code == 403

    response = client.post('/api/orders', headers=headers_for(supplier),
                           json={"supplier_id": supplier.id, "items": []})
    assert response.status_code == 403

    assert client.get('/api/inventory/status', headers=headers_for(supplier)).status_code == 403


def test_supplier_price_edit_keeps_existing_orders(client, supplier, store_owner, make_product, headers_for):
    product = make_product(supplier, price=10)
    response = client.post('/api/orders', headers=headers_for(store_owner), json={
        "supplier_id": supplier.id, "items": [{"product_id": product.id, "quantity": 2}],
    })
    order_id = response.get_json()["order"]["order_id"]

    response = client.patch(f'/api/supplier/products/{product.id}', headers=headers_for(supplier),
                            json={"price_per_item": 15})
    assert response.status_code == 200
    assert response.get_json()["product"]["price_per_item"] == 15

    order = client.get(f'/api/orders/{order_id}', headers=headers_for(store_owner)).get_json()["order"]
    assert order["total_price"] == 20
    assert order["items"][0]["price_at_order"] == 10


def test_purchase_feed_creates_auto_orders(app, client, supplier, store_owner, make_product):
    app.config["AUTO_ORDER_STORE_OWNER_ID"] = store_owner.id
    product = make_product(supplier, current_stock=4, minimum_stock_threshold=5, minimum_purchase_quantity=3)

    response = client.post('/api/inventory/purchase', json={
        "items": [{"product_id": product.id, "quantity": 2}, {"product_id": 31337, "quantity": 1}],
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body["updated_products"][0]["current_stock"] == 2
    assert len(body["auto_orders"]) == 1
    auto_order = body["auto_orders"][0]
    assert auto_order["status"] == "pending"
    assert auto_order["store_owner_id"] == store_owner.id
    assert auto_order["items"][0]["quantity"] == 3


def test_purchase_feed_without_ordering_party(client, supplier, make_product):
    product = make_product(supplier, current_stock=4, minimum_stock_threshold=5)

    response = client.post('/api/inventory/purchase', json={"items": [{"product_id": product.id, "quantity": 2}]})

    assert response.status_code == 409
    assert response.get_json()["code"] == "NO_ORDERING_PARTY"
    assert db.session.get(Products, product.id).current_stock == 4


def test_invalid_purchase_payload(client):
    response = client.post('/api/inventory/purchase', json={"items": []})
    assert response.status_code == 400


def test_inventory_status_and_stock_update(client, supplier, store_owner, make_product, headers_for):
    product = make_product(supplier, current_stock=1, minimum_stock_threshold=3)

    body = client.get('/api/inventory/status', headers=headers_for(store_owner)).get_json()
    assert body["total_products"] == 1
    assert [p["product_id"] for p in body["low_stock"]] == [product.id]

    response = client.patch(f'/api/products/{product.id}/stock', headers=headers_for(store_owner),
                            json={"current_stock": 10})
    assert response.status_code == 200
    assert response.get_json()["product"]["current_stock"] == 10

    body = client.get('/api/inventory/status', headers=headers_for(store_owner)).get_json()
    assert body["low_stock"] == []


def test_catalog_listings(client, supplier, other_supplier, store_owner, make_product, headers_for):
    mine = make_product(supplier)
    make_product(other_supplier)

    all_products = client.get('/api/products', headers=headers_for(store_owner)).get_json()["products"]
    assert len(all_products) == 2

    by_supplier = client.get(f'/api/suppliers/{supplier.id}/products', headers=headers_for(store_owner))
    assert [p["product_id"] for p in by_supplier.get_json()["products"]] == [mine.id]

    own = client.get('/api/supplier/products', headers=headers_for(supplier)).get_json()
    assert own["count"] == 1

    assert client.get('/api/products/404', headers=headers_for(store_owner)).status_code == 404


def test_demo_seed_binds_the_ordering_party(app, client):
    store_owner = seed_demo_data(app)
    assert app.config["AUTO_ORDER_STORE_OWNER_ID"] == store_owner.id

    eggs = Products.query.filter_by(name="Free Range Eggs (12)").one()
    response = client.post('/api/inventory/purchase', json={"items": [{"product_id": eggs.id, "quantity": 1}]})

    assert response.status_code == 200
    auto_order = response.get_json()["auto_orders"][0]
    assert auto_order["store_owner_id"] == store_owner.id
    assert auto_order["items"][0]["quantity"] == 6


def test_demo_seed_keeps_a_configured_ordering_party(app, store_owner):
    app.config["AUTO_ORDER_STORE_OWNER_ID"] = store_owner.id
    seed_demo_data(app)

    assert app.config["AUTO_ORDER_STORE_OWNER_ID"] == store_owner.id
