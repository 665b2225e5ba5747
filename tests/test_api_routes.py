"""HTTP tests for authentication, role policies and error mapping."""

import importlib
from collections.abc import AsyncIterator, Iterator
from decimal import Decimal
from typing import cast

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import (
    CurrentUser,
    get_current_user,
    get_payment_gateway,
    get_token_verifier,
)
from src.db.session import get_db_session
from src.integrations.base import (
    PaymentGateway,
    PaymentIntent,
    PaymentIntentError,
    TokenVerificationError,
    TokenVerifier,
    VerifiedIdentity,
)
from src.main import app
from src.services.user_service import UserService

users_module = importlib.import_module("src.api.users")
offers_module = importlib.import_module("src.api.offers")
stats_module = importlib.import_module("src.api.stats")

TOKENS = {
    "admin-token": VerifiedIdentity(uid="1", email="admin@example.com", name="Admin"),
    "agent-token": VerifiedIdentity(uid="2", email="agent@example.com", name="Agent"),
    "buyer-token": VerifiedIdentity(uid="3", email="buyer@example.com", name="Buyer"),
}


class FakeVerifier(TokenVerifier):
    async def verify(self, token: str) -> VerifiedIdentity:
        identity = TOKENS.get(token)
        if identity is None:
            raise TokenVerificationError("unknown token")
        return identity


async def _override_db_session() -> AsyncIterator[AsyncSession]:
    yield cast(AsyncSession, object())


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def override_dependencies() -> Iterator[None]:
    app.dependency_overrides[get_db_session] = _override_db_session
    app.dependency_overrides[get_token_verifier] = FakeVerifier
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(override_dependencies: None) -> AsyncIterator[AsyncClient]:
    _ = override_dependencies
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as client:
        yield client


def _act_as(role: str, email: str = "caller@example.com") -> None:
    async def _current_user() -> CurrentUser:
        return CurrentUser(email=email, role=role)

    app.dependency_overrides[get_current_user] = _current_user


@pytest.mark.anyio
async def test_root_reports_running(api_client: AsyncClient) -> None:
    response = await api_client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "BrickBase Server is running"}


@pytest.mark.anyio
async def test_missing_token_is_unauthorized(api_client: AsyncClient) -> None:
    response = await api_client.get("/offers")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized access"}


@pytest.mark.anyio
async def test_invalid_token_is_forbidden(api_client: AsyncClient) -> None:
    response = await api_client.get("/offers", headers=_auth("bogus"))

    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden access"}


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/users"),
        ("PATCH", "/users/u1/make-admin"),
        ("PATCH", "/properties/verify/p1"),
        ("GET", "/reports"),
        ("GET", "/api/admin-stats"),
        ("GET", "/payments/all"),
    ],
)
async def test_admin_routes_reject_agents(
    api_client: AsyncClient, method: str, path: str
) -> None:
    _act_as("agent")

    response = await api_client.request(method, path, headers=_auth("agent-token"))

    assert response.status_code == 403


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("GET", "/offers/agent"),
        ("GET", "/offers/sold"),
        ("PATCH", "/offers/o1/accept"),
        ("GET", "/api/agent-stats"),
    ],
)
async def test_agent_routes_reject_plain_users(
    api_client: AsyncClient, method: str, path: str
) -> None:
    _act_as("user")

    response = await api_client.request(method, path, headers=_auth("buyer-token"))

    assert response.status_code == 403


@pytest.mark.anyio
async def test_admin_can_list_users(
    monkeypatch: pytest.MonkeyPatch, api_client: AsyncClient
) -> None:
    class FakeUserService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def list_users(self, *, role: str | None = None) -> list[dict[str, object]]:
            return [{"email": "agent@example.com", "role": role or "agent"}]

    monkeypatch.setattr(users_module, "UserService", FakeUserService)
    _act_as("admin")

    response = await api_client.get(
        "/users", params={"role": "agent"}, headers=_auth("admin-token")
    )

    assert response.status_code == 200
    assert response.json() == [{"email": "agent@example.com", "role": "agent"}]


@pytest.mark.anyio
async def test_accept_offer_maps_service_status_to_http(
    monkeypatch: pytest.MonkeyPatch, api_client: AsyncClient
) -> None:
    outcomes = {
        "settled": {
            "status": "not_found",
            "message": "Offer not found or already settled",
        },
        "busy": {"status": "conflict", "message": "Settlement in progress"},
        "ok": {"status": "accepted", "message": "Offer accepted", "success": True},
    }
    calls: list[tuple[str, str, bool]] = []

    class FakeOfferService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def accept_offer(
            self, offer_id: str, *, actor_email: str, is_admin: bool = False
        ) -> dict[str, object]:
            calls.append((offer_id, actor_email, is_admin))
            return dict(outcomes[offer_id])

    monkeypatch.setattr(offers_module, "OfferService", FakeOfferService)
    _act_as("agent", email="agent@example.com")

    settled = await api_client.patch("/offers/settled/accept", headers=_auth("agent-token"))
    busy = await api_client.patch("/offers/busy/accept", headers=_auth("agent-token"))
    ok = await api_client.patch("/offers/ok/accept", headers=_auth("agent-token"))

    assert settled.status_code == 404
    assert settled.json() == {"message": "Offer not found or already settled"}
    assert busy.status_code == 409
    assert ok.status_code == 200
    assert ok.json()["success"] is True
    assert calls[-1] == ("ok", "agent@example.com", False)


@pytest.mark.anyio
async def test_offer_for_someone_else_is_forbidden(api_client: AsyncClient) -> None:
    _act_as("user", email="buyer@example.com")

    response = await api_client.post(
        "/offers",
        headers=_auth("buyer-token"),
        json={
            "property_id": "p1",
            "title": "Lake House",
            "location": "Dhaka",
            "image": "https://img.example.com/lake.jpg",
            "agent_name": "Agent A",
            "buyer_email": "someone@example.com",
            "buyer_name": "Someone",
            "offer_amount": 1000,
            "buying_date": "2026-11-01",
        },
    )

    assert response.status_code == 403


@pytest.mark.anyio
async def test_offer_amount_must_be_positive(api_client: AsyncClient) -> None:
    _act_as("user", email="buyer@example.com")

    response = await api_client.post(
        "/offers",
        headers=_auth("buyer-token"),
        json={
            "property_id": "p1",
            "title": "Lake House",
            "location": "Dhaka",
            "image": "https://img.example.com/lake.jpg",
            "agent_name": "Agent A",
            "buyer_email": "buyer@example.com",
            "buyer_name": "Buyer",
            "offer_amount": 0,
            "buying_date": "2026-11-01",
        },
    )

    assert response.status_code == 422


@pytest.mark.anyio
async def test_database_errors_become_server_error(
    monkeypatch: pytest.MonkeyPatch, api_client: AsyncClient
) -> None:
    class BrokenStatsService:
        def __init__(self, _session: AsyncSession) -> None:
            self._session = _session

        async def user_stats(self, email: str) -> dict[str, object]:
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(stats_module, "StatsService", BrokenStatsService)
    _act_as("user")

    response = await api_client.get("/api/user-stats", headers=_auth("buyer-token"))

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}


@pytest.fixture
async def db_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    async def _session_override() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_token_verifier] = FakeVerifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.anyio
async def test_new_accounts_have_no_elevated_access(db_client: AsyncClient) -> None:
    for identity in TOKENS.values():
        response = await db_client.post(
            "/users", json={"email": identity.email, "name": identity.name}
        )
        assert response.status_code == 200

    # Registered accounts carry no role until an admin promotes them.
    denied = await db_client.post(
        "/addProperties",
        headers=_auth("agent-token"),
        json={"title": "Villa", "location": "Sylhet", "min_price": 10, "max_price": 20},
    )
    assert denied.status_code == 403

    users = await db_client.get("/users", headers=_auth("admin-token"))
    assert users.status_code == 403


@pytest.mark.anyio
async def test_listing_offer_payment_over_http(
    db_client: AsyncClient, db_session: AsyncSession
) -> None:
    users = UserService(db_session)
    admin_id = str((await users.register_user("admin@example.com"))["inserted_id"])
    agent_id = str((await users.register_user("agent@example.com"))["inserted_id"])
    await users.make_admin(admin_id)
    await users.make_agent(agent_id)

    created = await db_client.post(
        "/addProperties",
        headers=_auth("agent-token"),
        json={
            "title": "Villa",
            "location": "Sylhet",
            "image": "https://img.example.com/villa.jpg",
            "min_price": 100,
            "max_price": 200,
        },
    )
    assert created.status_code == 201
    listing_id = created.json()["inserted_id"]
    assert created.json()["listing"]["agent_name"] == "Agent"

    verified = await db_client.patch(
        f"/properties/verify/{listing_id}", headers=_auth("admin-token")
    )
    assert verified.status_code == 200

    offer = await db_client.post(
        "/offers",
        headers=_auth("buyer-token"),
        json={
            "property_id": listing_id,
            "title": "Villa",
            "location": "Sylhet",
            "image": "https://img.example.com/villa.jpg",
            "agent_name": "Agent",
            "buyer_email": "buyer@example.com",
            "buyer_name": "Buyer",
            "offer_amount": "150.50",
            "buying_date": "2026-11-01",
        },
    )
    assert offer.status_code == 201
    offer_id = offer.json()["inserted_id"]

    buyer_accept = await db_client.patch(
        f"/offers/{offer_id}/accept", headers=_auth("buyer-token")
    )
    assert buyer_accept.status_code == 403

    accepted = await db_client.patch(
        f"/offers/{offer_id}/accept", headers=_auth("agent-token")
    )
    assert accepted.status_code == 200
    assert accepted.json()["listing_deleted"] == 1

    gone = await db_client.get(f"/properties/{listing_id}")
    assert gone.status_code == 404

    paid = await db_client.post(
        "/payments",
        headers=_auth("buyer-token"),
        json={
            "property_id": listing_id,
            "amount": "150.50",
            "transaction_id": "pi_abc",
        },
    )
    assert paid.status_code == 201
    assert paid.json()["payment"]["amount"] == float(Decimal("150.50"))

    sold = await db_client.get("/offers/sold", headers=_auth("agent-token"))
    assert [row["property_id"] for row in sold.json()] == [listing_id]


@pytest.mark.anyio
async def test_update_property_rejects_null_required_fields(
    db_client: AsyncClient, db_session: AsyncSession
) -> None:
    users = UserService(db_session)
    agent_id = str((await users.register_user("agent@example.com"))["inserted_id"])
    await users.make_agent(agent_id)

    created = await db_client.post(
        "/addProperties",
        headers=_auth("agent-token"),
        json={"title": "Villa", "location": "Sylhet", "min_price": 100, "max_price": 200},
    )
    listing_id = created.json()["inserted_id"]

    for body in ({"min_price": None}, {"title": None}, {"location": None}):
        response = await db_client.patch(
            f"/properties/{listing_id}", headers=_auth("agent-token"), json=body
        )
        assert response.status_code == 422

    renamed = await db_client.patch(
        f"/properties/{listing_id}",
        headers=_auth("agent-token"),
        json={"title": "Villa Two", "image": None},
    )
    assert renamed.status_code == 200

    listing = (await db_client.get(f"/properties/{listing_id}")).json()
    assert listing["title"] == "Villa Two"
    assert listing["min_price"] == 100


class FakeGateway(PaymentGateway):
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[Decimal, dict[str, str] | None]] = []

    async def create_intent(
        self, amount: Decimal, *, metadata: dict[str, str] | None = None
    ) -> PaymentIntent:
        self.calls.append((amount, metadata))
        if self.fail:
            raise PaymentIntentError("Payment provider unavailable")
        return PaymentIntent(
            intent_id="pi_1",
            client_secret="pi_1_secret",
            amount_minor=int(amount * 100),
            currency="usd",
        )


@pytest.mark.anyio
async def test_create_payment_intent_returns_client_secret(
    api_client: AsyncClient,
) -> None:
    gateway = FakeGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    _act_as("user", email="buyer@example.com")

    response = await api_client.post(
        "/create-payment-intent",
        headers=_auth("buyer-token"),
        json={"amount": "99.99", "property_id": "p1"},
    )

    assert response.status_code == 200
    assert response.json()["client_secret"] == "pi_1_secret"
    assert response.json()["amount"] == 9999
    assert gateway.calls == [
        (Decimal("99.99"), {"email": "buyer@example.com", "property_id": "p1"})
    ]


@pytest.mark.anyio
async def test_payment_provider_failure_is_bad_gateway(
    api_client: AsyncClient,
) -> None:
    app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway(fail=True)
    _act_as("user", email="buyer@example.com")

    response = await api_client.post(
        "/create-payment-intent",
        headers=_auth("buyer-token"),
        json={"amount": 10},
    )

    assert response.status_code == 502
    assert response.json() == {"message": "Payment provider unavailable"}
