"""
Integration tests for the credit offer API.

These tests verify:
1. POST /v1/credit/venues/{venue_id}/offers - Offers extended to assessed venues
2. PATCH /v1/credit/offers/{offer_id}/{action} - Accept, reject and withdraw
3. The venue's eligibility status follows its offers
4. Stale pending offers expire and free the venue
"""

from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient

from src.application.services import OfferService
from src.domain.entities import utcnow


async def current_status(client: AsyncClient, venue_id: str) -> str:
    response = await client.get(f"/v1/credit/venues/{venue_id}/details")
    return response.json()["assessment"]["eligibility_status"]


@pytest_asyncio.fixture
async def assessed(client: AsyncClient):
    """Assess the eligible and the ineligible venue."""
    for venue_id in ("ven_prime", "ven_new"):
        response = await client.get(f"/v1/credit/venues/{venue_id}")
        assert response.status_code == 200


@pytest_asyncio.fixture
async def pending_offer(client: AsyncClient, assessed, offer_request: dict) -> dict:
    response = await client.post("/v1/credit/venues/ven_prime/offers", json=offer_request)
    assert response.status_code == 201
    return response.json()


# =============================================================================
# Offer Creation Tests
# =============================================================================

class TestCreateOffer:
    """Tests for POST /v1/credit/venues/{venue_id}/offers."""

    @pytest.mark.asyncio
    async def test_create_offer(self, client: AsyncClient, assessed, offer_request: dict):
        response = await client.post("/v1/credit/venues/ven_prime/offers", json=offer_request)

        assert response.status_code == 201

        data = response.json()
        assert data["venue_id"] == "ven_prime"
        assert data["status"] == "PENDING"
        assert data["offer_amount"] == 250_000
        assert data["total_repayment"] == 280_000
        assert data["estimated_term_days"] > 0
        assert data["notes"] == "Kitchen refit"
        assert data["created_by"] == "staff_42"

        assert await current_status(client, "ven_prime") == "OFFER_PENDING"

    @pytest.mark.asyncio
    async def test_offer_appears_in_venue_offers_and_summary(
        self,
        client: AsyncClient,
        pending_offer: dict,
    ):
        offers = (await client.get("/v1/credit/venues/ven_prime/offers")).json()
        assert [o["offer_id"] for o in offers] == [pending_offer["offer_id"]]

        details = (await client.get("/v1/credit/venues/ven_prime/details")).json()
        assert details["offers"][0]["offer_id"] == pending_offer["offer_id"]

        summary = (await client.get("/v1/credit/summary")).json()
        assert summary["pending_offers"] == 1

    @pytest.mark.asyncio
    async def test_ineligible_venue_returns_409(
        self,
        client: AsyncClient,
        assessed,
        offer_request: dict,
    ):
        response = await client.post("/v1/credit/venues/ven_new/offers", json=offer_request)

        assert response.status_code == 409
        assert response.json()["error"] == "VENUE_INELIGIBLE"

    @pytest.mark.asyncio
    async def test_second_offer_returns_409(
        self,
        client: AsyncClient,
        pending_offer: dict,
        offer_request: dict,
    ):
        response = await client.post("/v1/credit/venues/ven_prime/offers", json=offer_request)

        assert response.status_code == 409
        assert response.json()["error"] == "OFFER_ALREADY_OUTSTANDING"

    @pytest.mark.asyncio
    async def test_unassessed_venue_returns_404(self, client: AsyncClient, offer_request: dict):
        response = await client.post("/v1/credit/venues/ven_prime/offers", json=offer_request)

        assert response.status_code == 404
        assert response.json()["error"] == "ASSESSMENT_NOT_FOUND"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field,value",
        [
            ("offer_amount", 0),
            ("factor_rate", 0.95),
            ("repayment_percent", 1.5),
            ("expires_in_days", 0),
        ],
    )
    async def test_invalid_terms_return_422(
        self,
        client: AsyncClient,
        assessed,
        offer_request: dict,
        field: str,
        value,
    ):
        response = await client.post(
            "/v1/credit/venues/ven_prime/offers",
            json={**offer_request, field: value},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_reassessment_keeps_offer_pending(
        self,
        client: AsyncClient,
        pending_offer: dict,
    ):
        response = await client.post("/v1/credit/venues/ven_prime/refresh")

        data = response.json()
        assert data["eligibility_status"] == "ELIGIBLE"
        assert data["current_status"] == "OFFER_PENDING"


# =============================================================================
# Offer Action Tests
# =============================================================================

class TestOfferActions:
    """Tests for PATCH /v1/credit/offers/{offer_id}/{action}."""

    @pytest.mark.asyncio
    async def test_accept_moves_venue_to_active_loan(
        self,
        client: AsyncClient,
        pending_offer: dict,
    ):
        response = await client.patch(
            f"/v1/credit/offers/{pending_offer['offer_id']}/accept",
            json={"staff_id": "staff_7"},
        )

        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ACCEPTED"
        assert data["accepted_at"] is not None

        assert await current_status(client, "ven_prime") == "ACTIVE_LOAN"

    @pytest.mark.asyncio
    async def test_reject_returns_venue_to_eligible(
        self,
        client: AsyncClient,
        pending_offer: dict,
    ):
        response = await client.patch(
            f"/v1/credit/offers/{pending_offer['offer_id']}/reject",
            json={"rejection_reason": "Prefers a smaller amount"},
        )

        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "REJECTED"
        assert data["rejection_reason"] == "Prefers a smaller amount"

        assert await current_status(client, "ven_prime") == "ELIGIBLE"

    @pytest.mark.asyncio
    async def test_withdraw_without_body(self, client: AsyncClient, pending_offer: dict):
        response = await client.patch(f"/v1/credit/offers/{pending_offer['offer_id']}/withdraw")

        assert response.status_code == 200
        assert response.json()["status"] == "WITHDRAWN"
        assert await current_status(client, "ven_prime") == "ELIGIBLE"

    @pytest.mark.asyncio
    async def test_new_offer_allowed_after_withdrawal(
        self,
        client: AsyncClient,
        pending_offer: dict,
        offer_request: dict,
    ):
        await client.patch(f"/v1/credit/offers/{pending_offer['offer_id']}/withdraw")

        response = await client.post("/v1/credit/venues/ven_prime/offers", json=offer_request)

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_accepting_twice_returns_409(self, client: AsyncClient, pending_offer: dict):
        url = f"/v1/credit/offers/{pending_offer['offer_id']}/accept"
        await client.patch(url)

        response = await client.patch(url)

        assert response.status_code == 409
        assert response.json()["error"] == "OFFER_NOT_PENDING"

    @pytest.mark.asyncio
    async def test_unknown_action_returns_400(self, client: AsyncClient, pending_offer: dict):
        response = await client.patch(f"/v1/credit/offers/{pending_offer['offer_id']}/approve")

        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_OFFER_ACTION"

    @pytest.mark.asyncio
    async def test_unknown_offer_returns_404(self, client: AsyncClient):
        response = await client.patch(f"/v1/credit/offers/{uuid4()}/accept")

        assert response.status_code == 404
        assert response.json()["error"] == "OFFER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_offer_id_returns_422(self, client: AsyncClient):
        response = await client.patch("/v1/credit/offers/not-a-uuid/accept")

        assert response.status_code == 422


# =============================================================================
# Offer Expiry Tests
# =============================================================================

class TestOfferExpiry:
    """Tests for expiring stale pending offers."""

    @pytest.mark.asyncio
    async def test_nothing_to_expire(self, client: AsyncClient, pending_offer: dict):
        response = await client.post("/v1/credit/offers/expire")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_expire_frees_venue(
        self,
        client: AsyncClient,
        pending_offer: dict,
        assessment_repository,
        offer_repository,
    ):
        service = OfferService(assessment_repository, offer_repository)

        expired = await service.expire_offers(now=utcnow() + timedelta(days=31))

        assert [o.offer_id for o in expired] == [pending_offer["offer_id"]]
        assert expired[0].status == "EXPIRED"
        assert await current_status(client, "ven_prime") == "ELIGIBLE"

        offers = (await client.get("/v1/credit/venues/ven_prime/offers")).json()
        assert offers[0]["status"] == "EXPIRED"
