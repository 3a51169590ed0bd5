"""End-to-end flow through the HTTP API against the in-memory store."""

from fastapi.testclient import TestClient

from conftest import auth_headers


class TestMarketplaceFlow:
    """Customer posts, providers bid, customer hires, job completes."""

    def test_full_lifecycle(self, test_client: TestClient) -> None:
        customer = auth_headers("c1", "carol@example.com")
        pat = auth_headers("p1", "pat@example.com", user_type="provider")
        quinn = auth_headers("p2", "quinn@example.com", user_type="provider")

        for headers in (customer, pat, quinn):
            assert test_client.post("/api/v1/session", headers=headers).status_code == 200

        job = test_client.post(
            "/api/v1/jobs",
            headers=customer,
            json={
                "title": "Fix Kitchen Faucet Leak",
                "description": "Constant drip under the sink",
                "category": "home-repair",
                "subcategory": "Plumbing",
                "budget": 150,
                "budget_type": "fixed",
                "location": "Austin, TX",
                "urgency": "high",
            },
        ).json()

        bid_ids = []
        for headers, amount in ((pat, 140), (quinn, 130)):
            response = test_client.post(
                f"/api/v1/jobs/{job['id']}/bids",
                headers=headers,
                json={"amount": amount, "message": "Available", "estimated_duration": "2 hours"},
            )
            bid_ids.append(response.json()["id"])

        accepted = test_client.post(f"/api/v1/bids/{bid_ids[0]}/accept", headers=customer)
        assert accepted.status_code == 200

        # Open jobs no longer include the hired one
        browse = test_client.get("/api/v1/jobs", headers=quinn, params={"status": "open"})
        assert browse.json() == []

        late_bid = test_client.post(
            f"/api/v1/jobs/{job['id']}/bids",
            headers=auth_headers("p3", user_type="provider"),
            json={"amount": 100, "message": "Cheaper", "estimated_duration": "1 hour"},
        )
        assert late_bid.status_code == 409
        assert late_bid.json() == {
            "error": "job_not_open",
            "detail": late_bid.json()["detail"],
        }

        done = test_client.patch(
            f"/api/v1/jobs/{job['id']}", headers=customer, json={"status": "completed"}
        )
        assert done.status_code == 200
        assert done.json()["status"] == "completed"

        stats = test_client.get("/api/v1/providers/me/stats", headers=pat).json()
        assert stats["total_earnings"] == 140
        assert stats["recent_activity"][0]["type"] == "bid_accepted"

        quinn_bids = test_client.get("/api/v1/providers/me/bids", headers=quinn).json()
        assert quinn_bids[0]["status"] == "pending"
        assert quinn_bids[0]["job"]["status"] == "completed"

    def test_provider_cannot_post_job(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/api/v1/jobs",
            headers=auth_headers("p1", user_type="provider"),
            json={
                "title": "Not allowed",
                "description": "Providers bid, they do not post",
                "category": "cleaning",
                "budget": 50,
                "location": "Austin, TX",
            },
        )
        assert response.status_code == 403
        assert response.json()["error"] == "permission_denied"

    def test_unknown_job_is_404(self, test_client: TestClient) -> None:
        response = test_client.get(
            "/api/v1/jobs/00000000-0000-0000-0000-000000000000", headers=auth_headers("c1")
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestRouteHandlers:
    """Handlers call the blocking store client directly."""

    def test_handlers_run_in_threadpool(self) -> None:
        """Given a sync store client, no route handler is a coroutine."""
        import inspect

        from fastapi.routing import APIRoute

        from marketplace.main import app

        routes = [r for r in app.routes if isinstance(r, APIRoute)]
        assert routes
        coroutines = [r.path for r in routes if inspect.iscoroutinefunction(r.endpoint)]
        assert coroutines == []
