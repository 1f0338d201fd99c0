import base64

from storefront.security.utils import create_access_token

from tests.conftest import JPEG

API = "/api"
DATA_URI = "data:image/jpeg;base64," + base64.b64encode(JPEG).decode()


def create_category(client, headers, **form):
    resp = client.post(f"{API}/categories", data=form, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_product(client, headers, **form):
    resp = client.post(
        f"{API}/products", data=form, files={"image": ("speaker.jpg", JPEG, "image/jpeg")}, headers=headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    assert client.get(f"{API}/health").json() == {"status": "OK", "message": "Server is running"}
    assert client.get("/v1/_info").json()["service"] == "storefront"


def test_catalog_writes_need_admin(client):
    resp = client.post(f"{API}/categories", data={"name": "Audio"})
    assert resp.status_code == 401
    assert "error" in resp.json()

    token, _ = create_access_token("shopper", "user")
    resp = client.post(f"{API}/categories", data={"name": "Audio"}, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}

    resp = client.delete(f"{API}/products/1", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_product_round_trip_over_http(client, admin_headers):
    audio = create_category(client, admin_headers, name="Audio", slug="audio")
    product = create_product(
        client, admin_headers, name="Speaker", price="100000", categoryId=str(audio["id"]), featured="true"
    )
    assert product["image"] == DATA_URI
    assert product["categoryName"] == "Audio"
    assert product["categorySlug"] == "audio"
    assert product["inStock"] is True
    assert product["featured"] is True

    listed = client.get(f"{API}/products", params={"categoryId": audio["id"]}).json()
    assert [p["name"] for p in listed] == ["Speaker"]
    assert client.get(f"{API}/products", params={"category": "audio"}).json()[0]["id"] == product["id"]
    assert len(client.get(f"{API}/products", params={"featured": "true"}).json()) == 1

    resp = client.put(f"{API}/products/{product['id']}", data={"price": "95000", "inStock": "false"}, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["price"] == 95000
    assert body["inStock"] is False
    assert body["image"] == DATA_URI

    assert client.delete(f"{API}/products/{product['id']}", headers=admin_headers).json() == {
        "message": "Product deleted successfully"
    }
    assert client.get(f"{API}/products/{product['id']}").status_code == 404


def test_product_without_image_is_rejected(client, admin_headers):
    create_category(client, admin_headers, name="Audio")
    resp = client.post(f"{API}/products", data={"name": "Speaker", "price": "10", "category": "audio"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Image file is required"}


def test_category_errors_over_http(client, admin_headers):
    audio = create_category(client, admin_headers, name="Audio")
    assert audio["slug"] == "audio"
    assert audio["image"] is None

    resp = client.post(f"{API}/categories", data={"name": "Audio"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Category name or slug already exists"}

    create_product(client, admin_headers, name="Speaker", price="5", category="audio")
    resp = client.delete(f"{API}/categories/{audio['id']}", headers=admin_headers)
    assert resp.status_code == 400
    assert "reassign" in resp.json()["error"]

    assert client.get(f"{API}/categories/999").json() == {"error": "Category not found"}


def test_category_image_upload(client, admin_headers):
    resp = client.post(
        f"{API}/categories", data={"name": "Cameras"},
        files={"image": ("c.jpg", JPEG, "image/jpeg")}, headers=admin_headers,
    )
    assert resp.status_code == 201
    cat = resp.json()
    assert cat["image"] == DATA_URI
    renamed = client.put(f"{API}/categories/{cat['id']}", data={"name": "Photo"}, headers=admin_headers).json()
    assert renamed["name"] == "Photo"
    assert renamed["image"] == DATA_URI
    assert [c["name"] for c in client.get(f"{API}/categories").json()] == ["Photo"]


def test_checkout_flow(client, admin_headers):
    create_category(client, admin_headers, name="Audio")
    product = create_product(client, admin_headers, name="Speaker", price="50000", category="Audio")

    checked = client.post(f"{API}/cart/validate", json={"items": [
        {"productId": product["id"], "quantity": 2}, {"productId": 999, "quantity": 1},
    ]}).json()
    assert len(checked) == 1
    assert checked[0]["quantity"] == 2

    added = client.post(f"{API}/cart/add", json={"productId": product["id"], "quantity": 2})
    assert added.status_code == 200
    assert added.json()["message"] == "Product added to cart"

    resp = client.post(f"{API}/orders", json={
        "items": [{"productId": product["id"], "quantity": 2, "price": 50000}],
        "total": 100000,
        "customerName": "Jane",
        "customerEmail": "jane@x.com",
        "customerContact": "+256700000000",
    })
    assert resp.status_code == 201, resp.text
    order = resp.json()
    assert order["status"] == "pending"
    assert order["customerEmail"] == "jane@x.com"
    assert order["items"][0]["quantity"] == 2
    assert order["items"][0]["productId"] == product["id"]

    detail = client.get(f"{API}/orders/{order['id']}").json()
    assert detail["items"][0]["product"] == {"id": product["id"], "name": "Speaker", "image": DATA_URI}
    assert [o["id"] for o in client.get(f"{API}/orders").json()] == [order["id"]]

    resp = client.put(f"{API}/orders/{order['id']}/status", json={"status": "shipped"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "shipped"
    assert "items" not in resp.json()


def test_order_errors_over_http(client):
    resp = client.post(f"{API}/orders", json={"items": [], "total": 10})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Order items are required"}

    resp = client.post(f"{API}/orders", json={"items": "nope", "total": 10})
    assert resp.status_code == 400
    assert "items" in resp.json()["error"]

    assert client.get(f"{API}/orders/5").status_code == 404
    resp = client.put(f"{API}/orders/5/status", json={"status": "lost"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid status"}
    assert client.put(f"{API}/orders/5/status", json={"status": "shipped"}).status_code == 404


def test_cart_validate_needs_array(client):
    resp = client.post(f"{API}/cart/validate", json={"items": {"productId": 1}})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Items must be an array"}
    assert client.post(f"{API}/cart/add", json={"productId": 1}).json() == {
        "error": "Product ID and quantity are required"
    }


def test_non_finite_totals_are_rejected(client):
    item = '{"productId": 1, "quantity": 1, "price": 10}'
    for total in ("Infinity", "-Infinity", "NaN"):
        raw = (
            '{"items": [' + item + '], "total": ' + total + ', "customerName": "Jane", '
            '"customerEmail": "jane@x.com", "customerContact": "+256700000000"}'
        )
        resp = client.post(f"{API}/orders", content=raw, headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Valid total is required"}

    raw = (
        '{"items": [{"productId": 1, "quantity": 1, "price": NaN}], "total": 10, "customerName": "Jane", '
        '"customerEmail": "jane@x.com", "customerContact": "+256700000000"}'
    )
    resp = client.post(f"{API}/orders", content=raw, headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert client.get(f"{API}/orders").json() == []


def test_cart_validate_skips_entries_without_product_id(client, admin_headers):
    create_category(client, admin_headers, name="Audio")
    product = create_product(client, admin_headers, name="Speaker", price="50000", category="Audio")
    resp = client.post(f"{API}/cart/validate", json={"items": [
        {"productId": product["id"], "quantity": 1}, {"productId": None, "quantity": 1}, {"quantity": 3},
    ]})
    assert resp.status_code == 200
    assert [line["id"] for line in resp.json()] == [product["id"]]
