"""
API endpoint tests
"""
import pytest

from app.core.config import settings


class TestHealthEndpoints:
    """Tests for health check endpoints"""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_database_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert "timestamp" in data
        assert data["uptime"] >= 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_root_endpoint(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "Microfinance" in response.json()["message"]


class TestCalculatorEndpoint:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_calculate_emi(self, client):
        response = await client.post(
            "/api/calculate-emi",
            json={"amount": 10000, "interest_rate": 1, "tenure": 5}
        )

        assert response.status_code == 200
        assert response.json() == {
            "emi": "2005.00",
            "totalPayment": "10025.00",
            "totalInterest": "25.00"
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_field_is_bad_request(self, client):
        response = await client.post("/api/calculate-emi", json={"amount": 10000, "tenure": 5})

        assert response.status_code == 400
        assert "interest_rate" in response.json()["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_zero_rate_is_bad_request(self, client):
        response = await client.post(
            "/api/calculate-emi",
            json={"amount": 10000, "interest_rate": 0, "tenure": 5}
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestBorrowerAndLoanEndpoints:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_register_borrower_and_apply(self, client, test_region):
        response = await client.post("/api/borrowers", json={
            "name": "Lakshmi Devi",
            "contact": "+919000000001",
            "income": 18000,
            "region_id": test_region.id
        })
        assert response.status_code == 200
        borrower_id = response.json()["borrower_id"]

        response = await client.post("/api/loans", json={
            "borrower_id": borrower_id,
            "amount": 5000,
            "interest_rate": 15,
            "tenure": 24
        })
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Pending"

        response = await client.get(f"/api/loans/{data['loan_id']}")
        assert response.status_code == 200
        assert response.json()["borrower_id"] == borrower_id

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_apply_for_unknown_borrower(self, client):
        response = await client.post("/api/loans", json={
            "borrower_id": 999, "amount": 5000, "interest_rate": 15, "tenure": 24
        })

        assert response.status_code == 404
        assert response.json() == {"error": "Borrower not found"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_loan_schedule(self, client, pending_loan):
        response = await client.get(f"/api/loans/{pending_loan.id}/schedule")

        assert response.status_code == 200
        data = response.json()
        assert data["emi"] == "888.49"
        assert len(data["schedule"]) == 12


class TestLoanDecisionEndpoints:
    """Approve and reject are open unless the admin guard is switched on"""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_approve_without_token(self, client, pending_loan, approver):
        staff_id, branch_id = approver

        response = await client.put(
            f"/api/loans/{pending_loan.id}/approve",
            json={"staff_id": staff_id, "branch_id": branch_id}
        )

        assert response.status_code == 200
        assert response.json()["emi"] == "888.49"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_reject_without_token(self, client, pending_loan):
        response = await client.put(f"/api/loans/{pending_loan.id}/reject", json={"reason": "Low income"})

        assert response.status_code == 200
        assert response.json()["reason"] == "Low income"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_guarded_approve_requires_auth(self, client, pending_loan, monkeypatch):
        monkeypatch.setattr(settings, "REQUIRE_ADMIN_FOR_DECISIONS", True)

        response = await client.put(f"/api/loans/{pending_loan.id}/approve")

        assert response.status_code == 401
        assert "error" in response.json()

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_guarded_reject_rejects_bad_token(self, client, pending_loan, monkeypatch):
        monkeypatch.setattr(settings, "REQUIRE_ADMIN_FOR_DECISIONS", True)

        response = await client.put(
            f"/api/loans/{pending_loan.id}/reject",
            headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_guarded_approve_accepts_admin_token(self, client, pending_loan, approver,
                                                       admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "REQUIRE_ADMIN_FOR_DECISIONS", True)

        response = await client.put(f"/api/loans/{pending_loan.id}/approve", headers=admin_headers)

        assert response.status_code == 200

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_explicit_zero_staff_is_not_replaced_by_default(self, client, pending_loan, approver):
        _, branch_id = approver

        response = await client.put(
            f"/api/loans/{pending_loan.id}/approve",
            json={"staff_id": 0, "branch_id": branch_id}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Staff member not found"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_approve_then_repay(self, client, pending_loan, approver, admin_headers):
        staff_id, branch_id = approver
        loan_id = pending_loan.id

        response = await client.put(
            f"/api/loans/{loan_id}/approve",
            json={"staff_id": staff_id, "branch_id": branch_id},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Loan approved successfully!"
        assert response.json()["emi"] == "888.49"

        response = await client.put(f"/api/loans/{loan_id}/approve", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Loan not found or already processed"}

        response = await client.get(f"/api/loans/{loan_id}/repayments")
        installments = response.json()
        assert len(installments) == 12
        assert installments[0]["status"] == "Pending"

        response = await client.put(
            f"/api/repayments/{installments[0]['repayment_id']}/pay",
            json={"amount_paid": 888.49}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Payment processed successfully"
        assert data["status"] == "Paid"
        assert data["amount_paid"] == pytest.approx(888.49)

        response = await client.get("/api/repayments")
        assert response.status_code == 200
        assert len(response.json()) == 12

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_approve_with_default_approver(self, client, pending_loan, approver, admin_headers):
        response = await client.put(f"/api/loans/{pending_loan.id}/approve", headers=admin_headers)

        assert response.status_code == 200

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_reject(self, client, pending_loan, admin_headers):
        loan_id = pending_loan.id

        response = await client.put(
            f"/api/loans/{loan_id}/reject",
            json={"reason": "Incomplete documents"},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["reason"] == "Incomplete documents"

        response = await client.put(f"/api/loans/{loan_id}/reject", headers=admin_headers)
        assert response.status_code == 404


class TestRepaymentEndpoints:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_zero_payment_is_bad_request(self, client):
        response = await client.put("/api/repayments/1/pay", json={"amount_paid": 0})

        assert response.status_code == 400
        assert response.json() == {"error": "Valid payment amount is required"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_missing_amount_is_bad_request(self, client):
        response = await client.put("/api/repayments/1/pay", json={})

        assert response.status_code == 400

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_pay_missing_installment(self, client):
        response = await client.put("/api/repayments/999/pay", json={"amount_paid": 100})

        assert response.status_code == 404
        assert response.json() == {"error": "Repayment record not found"}


class TestAdminLogin:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_login_success(self, client):
        response = await client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["admin"]["username"] == "admin"
        assert data["token_type"] == "bearer"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_login_failure(self, client):
        response = await client.post("/api/admin/login", json={"username": "admin", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_login_token_authorizes_decisions(self, client, pending_loan):
        loan_id = pending_loan.id
        login = await client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
        token = login.json()["access_token"]

        response = await client.put(
            f"/api/loans/{loan_id}/reject",
            headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["reason"] == "Not specified"


class TestAnalyticsEndpoints:

    @pytest.mark.integration
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/api/analytics/portfolio-summary",
        "/api/analytics/defaulters",
        "/api/analytics/nested-query",
        "/api/analytics/join-query",
        "/api/analytics/aggregate-query",
        "/api/analytics/regional",
    ])
    async def test_reports_respond(self, client, pending_loan, path):
        response = await client.get(path)

        assert response.status_code == 200

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_organization_listings(self, client, test_staff):
        for path in ("/api/regions", "/api/branches", "/api/staff"):
            response = await client.get(path)
            assert response.status_code == 200
            assert len(response.json()) == 1
