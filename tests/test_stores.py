from app.inventory.core.principal import Role
from app.inventory.db.models import Product, Store

from tests.inventory_helpers import create_product, create_store, create_user, login_headers


def _setup(db_session):
    store_a = create_store(db_session, name="Store A", address="1 High Street")
    store_b = create_store(db_session, name="Store B")
    create_user(db_session, username="owner-a", role=Role.OWNER, store=store_a)
    create_user(db_session, username="staff-a", role=Role.STAFF, store=store_a)
    create_user(db_session, username="admin", role=Role.SYSTEM_ADMIN)
    return store_a, store_b


def test_only_system_admin_lists_and_creates_stores(client, db_session):
    _setup(db_session)

    for username in ("owner-a", "staff-a"):
        headers = login_headers(client, username)
        assert client.get("/api/stores", headers=headers).status_code == 403
        assert client.post("/api/stores", headers=headers, json={"name": "Rogue"}).status_code == 403

    headers = login_headers(client, "admin")
    response = client.post("/api/stores", headers=headers, json={"name": "  Store C  ", "address": "Dock 4"})
    assert response.status_code == 201
    assert response.json()["store"]["name"] == "Store C"

    response = client.get("/api/stores", headers=headers)
    assert response.status_code == 200
    assert [row["name"] for row in response.json()["stores"]] == ["Store A", "Store B", "Store C"]


def test_blank_store_name_is_rejected(client, db_session):
    _setup(db_session)

    response = client.post("/api/stores", headers=login_headers(client, "admin"), json={"name": "   "})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_scoped_roles_read_only_their_own_store(client, db_session):
    store_a, store_b = _setup(db_session)
    headers = login_headers(client, "staff-a")

    response = client.get(f"/api/stores/{store_a.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["store"]["address"] == "1 High Street"

    response = client.get(f"/api/stores/{store_b.id}", headers=headers)
    assert response.status_code == 403
    assert response.json()["code"] == "CROSS_TENANT_ACCESS_DENIED"

    assert client.get("/api/stores/999", headers=headers).status_code == 404


def test_owner_updates_own_store_and_staff_cannot(client, db_session):
    store_a, store_b = _setup(db_session)
    body = {"name": "Store A (renamed)", "address": "2 High Street"}

    assert client.put(f"/api/stores/{store_a.id}", headers=login_headers(client, "staff-a"), json=body).status_code == 403
    owner = login_headers(client, "owner-a")
    assert client.put(f"/api/stores/{store_b.id}", headers=owner, json=body).status_code == 403
    assert client.put(f"/api/stores/{store_a.id}", headers=owner, json=body).status_code == 204

    db_session.expire_all()
    assert db_session.get(Store, store_a.id).name == "Store A (renamed)"


def test_store_soft_delete_and_restore(client, db_session):
    store_a, _store_b = _setup(db_session)
    owner = login_headers(client, "owner-a")
    admin = login_headers(client, "admin")

    assert client.delete(f"/api/stores/{store_a.id}", headers=login_headers(client, "staff-a")).status_code == 403
    assert client.delete(f"/api/stores/{store_a.id}", headers=owner).status_code == 204

    response = client.delete(f"/api/stores/{store_a.id}", headers=admin)
    assert response.status_code == 400
    assert response.json()["code"] == "RESOURCE_ALREADY_DELETED"

    names = [row["name"] for row in client.get("/api/stores", headers=admin).json()["stores"]]
    assert names == ["Store B"]
    response = client.get("/api/stores", headers=admin, params={"include_deleted": True})
    assert [row["name"] for row in response.json()["stores"]] == ["Store A", "Store B"]

    response = client.post(f"/api/stores/{store_a.id}/restore", headers=admin)
    assert response.status_code == 200
    store = response.json()["store"]
    assert store["lifecycle_state"] == "active"
    assert store["deleted_by"] == "owner-a"
    assert store["restored_by"] == "admin"


def test_products_cannot_be_created_in_deleted_store(client, db_session):
    _store_a, store_b = _setup(db_session)
    admin = login_headers(client, "admin")
    assert client.delete(f"/api/stores/{store_b.id}", headers=admin).status_code == 204

    response = client.post(
        "/api/products",
        headers=admin,
        json={"name": "Late", "quantity": 1, "price": "1.00", "store_id": store_b.id},
    )

    assert response.status_code == 422


def test_products_of_deleted_store_are_hidden_and_read_only(client, db_session):
    store_a, store_b = _setup(db_session)
    gone = create_product(db_session, store=store_a, name="A-gone")
    kept = create_product(db_session, store=store_a, name="A-kept")
    create_product(db_session, store=store_b, name="B-1")
    owner = login_headers(client, "owner-a")
    admin = login_headers(client, "admin")

    assert client.delete(f"/api/products/{gone.id}", headers=owner).status_code == 204
    assert client.delete(f"/api/stores/{store_a.id}", headers=admin).status_code == 204

    response = client.post(f"/api/products/{gone.id}/restore", headers=owner)
    assert response.status_code == 400
    assert response.json()["code"] == "STORE_DELETED"

    response = client.put(
        f"/api/products/{kept.id}",
        headers=owner,
        json={"name": "A-edited", "quantity": 1, "price": "1.00"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "STORE_DELETED"
    assert client.delete(f"/api/products/{kept.id}", headers=admin).json()["code"] == "STORE_DELETED"

    assert client.get("/api/products", headers=owner).json()["pagination"]["total"] == 0
    assert client.get(f"/api/products/{kept.id}", headers=owner).status_code == 404
    listing = client.get("/api/products", headers=admin).json()
    assert [row["name"] for row in listing["products"]] == ["B-1"]
    listing = client.get("/api/products", headers=admin, params={"include_deleted": True}).json()
    assert {row["name"] for row in listing["products"]} == {"A-gone", "A-kept", "B-1"}

    db_session.expire_all()
    assert db_session.get(Product, gone.id).lifecycle_state == "deleted"
    assert db_session.get(Product, kept.id).name == "A-kept"

    assert client.post(f"/api/stores/{store_a.id}/restore", headers=admin).status_code == 200
    assert {row["name"] for row in client.get("/api/products", headers=owner).json()["products"]} == {"A-kept"}
    assert client.post(f"/api/products/{gone.id}/restore", headers=owner).status_code == 200


def test_blank_store_name_is_rejected_on_update(client, db_session):
    store_a, _store_b = _setup(db_session)

    response = client.put(f"/api/stores/{store_a.id}", headers=login_headers(client, "owner-a"), json={"name": "   "})

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"
    db_session.expire_all()
    assert db_session.get(Store, store_a.id).name == "Store A"


def test_store_listing_sort_order(client, db_session):
    _setup(db_session)
    headers = login_headers(client, "admin")

    response = client.get("/api/stores", headers=headers, params={"sort_by": "name", "sort_order": "desc"})
    assert [row["name"] for row in response.json()["stores"]] == ["Store B", "Store A"]

    response = client.get("/api/stores", headers=headers, params={"sort_order": "sideways"})
    assert response.status_code == 422
