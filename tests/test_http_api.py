import asyncio
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from parcelhub.core.security import create_access_token
from parcelhub.interfaces.http.deps import get_coordinator, get_db_session
from parcelhub.main import create_app
from parcelhub.modules.common.exceptions import ConcurrentModification


def auth(account) -> dict[str, str]:
    token = create_access_token(account.id, account.username, account.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def app(session_factory, coordinator):
    app = create_app()

    async def override_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    return app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def _open_order(client, customer) -> dict:
    response = await client.post(
        "/api/orders",
        json={
            "purchase_site": "example-store",
            "purchase_link": "https://example.com/item/9",
            "phone_number": "0910000000",
        },
        headers=auth(customer),
    )
    assert response.status_code == 201
    return response.json()


async def test_register_login_and_me(client):
    response = await client.post("/api/auth/register", json={"username": "newbie", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["role"] == "REGULAR"

    response = await client.post("/api/auth/login", json={"username": "newbie", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "newbie"


async def test_duplicate_username_is_rejected(client, customer):
    response = await client.post("/api/auth/register", json={"username": "customer", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["code"] == "account_exists"


async def test_bad_login_and_bad_token(client, customer):
    response = await client.post("/api/auth/login", json={"username": "customer", "password": "wrong-pass"})
    assert response.status_code == 401

    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


async def test_order_payment_flow(client, customer, admin):
    order = await _open_order(client, customer)
    assert order["status"] == "PENDING_APPROVAL"

    response = await client.post(
        f"/api/orders/{order['id']}/approve", json={"total_amount_cents": 150}, headers=auth(admin)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "AWAITING_PAYMENT"

    response = await client.post(f"/api/orders/{order['id']}/pay", headers=auth(customer))
    assert response.status_code == 402
    assert response.json()["code"] == "insufficient_funds"

    response = await client.post(
        f"/api/wallet/{customer.id}/credits", json={"amount_cents": 200}, headers=auth(admin)
    )
    assert response.status_code == 200
    assert response.json()["balance_cents"] == 200

    response = await client.post(f"/api/orders/{order['id']}/pay", headers=auth(customer))
    assert response.status_code == 200
    assert response.json()["status"] == "ORDERING"

    response = await client.get("/api/wallet", headers=auth(customer))
    body = response.json()
    assert body["balance_cents"] == 50
    assert [tx["signed_amount"] for tx in body["transactions"]] == [-150, 200]

    response = await client.post(f"/api/orders/{order['id']}/pay", headers=auth(customer))
    assert response.status_code == 409
    assert response.json()["code"] == "illegal_transition"


async def test_error_mapping(client, customer, other_customer, admin):
    order = await _open_order(client, customer)

    response = await client.post(f"/api/orders/{order['id']}/approve", headers=auth(customer))
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"

    response = await client.get(f"/api/orders/{order['id']}", headers=auth(other_customer))
    assert response.status_code == 403

    response = await client.put(
        f"/api/orders/{order['id']}/price", json={"total_amount_cents": -5}, headers=auth(admin)
    )
    assert response.status_code == 422
    assert response.json()["code"] == "invalid_amount"

    response = await client.post(f"/api/orders/{order['id']}/complete", headers=auth(admin))
    assert response.status_code == 409

    response = await client.get("/api/orders/does-not-exist", headers=auth(admin))
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


async def test_listing_is_scoped(client, customer, other_customer, admin):
    await _open_order(client, customer)
    await _open_order(client, other_customer)

    mine = await client.get("/api/orders/mine", headers=auth(customer))
    assert mine.json()["total"] == 1

    everything = await client.get("/api/orders", headers=auth(admin))
    assert everything.json()["total"] == 2

    response = await client.get("/api/orders", headers=auth(customer))
    assert response.status_code == 403


async def test_package_customs_flow(client, customer, admin, shop):
    response = await client.post(
        "/api/packages",
        json={"owner_account_id": customer.id, "shop_account_id": shop.id, "customs_fee_cents": 30},
        headers=auth(admin),
    )
    assert response.status_code == 201
    package = response.json()
    assert package["customs_outstanding_cents"] == 30

    for status in ("PREPARING", "DELIVERING_TO_SHOP"):
        response = await client.post(
            f"/api/packages/{package['id']}/status", json={"status": status}, headers=auth(admin)
        )
        assert response.status_code == 200

    response = await client.post(
        f"/api/packages/{package['id']}/status", json={"status": "IN_SHOP"}, headers=auth(admin)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "customs_unpaid"

    await client.post(f"/api/wallet/{customer.id}/credits", json={"amount_cents": 30}, headers=auth(admin))
    response = await client.post(
        f"/api/packages/{package['id']}/customs-payments", json={"amount_cents": 30}, headers=auth(customer)
    )
    assert response.status_code == 200
    assert response.json()["customs_outstanding_cents"] == 0

    response = await client.post(
        f"/api/packages/{package['id']}/status", json={"status": "IN_SHOP"}, headers=auth(admin)
    )
    assert response.status_code == 200

    response = await client.get("/api/packages/shop", headers=auth(shop))
    assert [item["id"] for item in response.json()["packages"]] == [package["id"]]

    response = await client.get(f"/api/packages/track/{package['tracking_number']}", headers=auth(customer))
    assert [event["status"] for event in response.json()["events"]][-1] == "IN_SHOP"


async def test_balance_check(client, customer, admin):
    await client.post(f"/api/wallet/{customer.id}/credits", json={"amount_cents": 80}, headers=auth(admin))

    response = await client.post("/api/wallet/check-balance", json={"amount_cents": 100}, headers=auth(customer))

    assert response.status_code == 200
    assert response.json()["sufficient"] is False
    assert response.json()["balance_cents"] == 80


async def test_lost_race_is_retryable(app, client):
    @app.get("/lost-race")
    async def lost_race():
        raise ConcurrentModification("order changed underneath")

    response = await client.get("/lost-race")

    assert response.status_code == 409
    assert response.headers["retry-after"] == "1"
    assert response.json() == {"detail": "order changed underneath", "code": "concurrent_modification"}


async def test_package_management_routes(client, customer, other_customer, admin, shop):
    response = await client.post(
        "/api/packages", json={"owner_account_id": customer.id}, headers=auth(admin)
    )
    package_id = response.json()["id"]

    response = await client.put(
        f"/api/packages/{package_id}/customs-fee", json={"customs_fee_cents": 45}, headers=auth(admin)
    )
    assert response.status_code == 200
    assert response.json()["customs_outstanding_cents"] == 45

    response = await client.put(
        f"/api/packages/{package_id}/customs-fee", json={"customs_fee_cents": 10}, headers=auth(customer)
    )
    assert response.status_code == 403

    response = await client.put(
        f"/api/packages/{package_id}/shop", json={"shop_account_id": shop.id}, headers=auth(customer)
    )
    assert response.status_code == 200
    assert response.json()["shop_account_id"] == shop.id

    response = await client.put(
        f"/api/packages/{package_id}/shop", json={"shop_account_id": shop.id}, headers=auth(other_customer)
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/api/packages/{package_id}",
        json={"tracking_number": "TRK-RELABELLED", "description": "winter coat"},
        headers=auth(admin),
    )
    assert response.status_code == 200
    assert response.json()["tracking_number"] == "TRK-RELABELLED"

    response = await client.get("/api/packages/track/TRK-RELABELLED", headers=auth(customer))
    assert response.json()["package"]["description"] == "winter coat"

    response = await client.patch(
        f"/api/packages/{package_id}", json={"description": "hat"}, headers=auth(customer)
    )
    assert response.status_code == 403


async def test_staff_list_customers(client, customer, other_customer, shop, admin):
    response = await client.get("/api/auth/customers", headers=auth(admin))
    assert response.status_code == 200
    assert sorted(item["username"] for item in response.json()["accounts"]) == ["customer", "neighbour"]

    response = await client.get("/api/auth/customers", headers=auth(customer))
    assert response.status_code == 403


async def test_parallel_first_wallet_reads(client, customer):
    responses = await asyncio.gather(
        client.get("/api/wallet", headers=auth(customer)),
        client.post("/api/wallet/check-balance", json={"amount_cents": 1}, headers=auth(customer)),
    )

    assert [response.status_code for response in responses] == [200, 200]
    assert responses[0].json()["balance_cents"] == 0
    assert responses[1].json()["sufficient"] is False
