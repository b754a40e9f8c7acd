"""Integration tests for the complete booking flow.

Walks the lifecycle through the HTTP API the way the web client does:
1. Admin creates a package
2. Customer browses the catalog and books it
3. Admin confirms the booking and completes the payment
4. Customer sees the booking and the payment
5. Admin marks the trip completed; the dashboard counts the revenue
"""

from datetime import date, timedelta
from typing import Any, Callable

from fastapi.testclient import TestClient

from bhraman.models import PackageCreate, User

Headers = Callable[[User], dict[str, str]]


class TestBookingFlow:
    def test_end_to_end(
        self,
        client: TestClient,
        headers_for: Headers,
        admin: User,
        package_create: PackageCreate,
    ) -> None:
        admin_headers = headers_for(admin)
        customer_headers = {
            "x-user-sub": "sub-flow-customer",
            "x-user-email": "meera@example.com",
            "x-user-name": "Meera Nair",
        }

        # 1. Admin creates a package
        created = client.post(
            "/api/admin/packages",
            json=package_create.model_dump(mode="json"),
            headers=admin_headers,
        )
        assert created.status_code == 201
        package = created.json()["data"]

        # 2. Customer finds it by slug and books for 3 people
        found = client.get(f"/api/packages/{package['slug']}")
        assert found.status_code == 200

        body: dict[str, Any] = {
            "package_id": package["package_id"],
            "start_date": (date.today() + timedelta(days=45)).isoformat(),
            "number_of_people": 3,
            "contact_info": {
                "name": "Meera Nair",
                "email": "meera@example.com",
                "phone": "98470 12345",
            },
        }
        booked = client.post("/api/bookings", json=body, headers=customer_headers)
        assert booked.status_code == 201
        booking_id = booked.json()["booking_id"]

        # 3. Admin confirms and completes the payment
        confirmed = client.patch(
            f"/api/admin/bookings/{booking_id}",
            json={"status": "confirmed"},
            headers=admin_headers,
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["data"]["total_amount"] == 900

        paid = client.post(
            f"/api/admin/bookings/{booking_id}/complete-payment",
            json={"payment_id": "pi_flow"},
            headers=admin_headers,
        )
        assert paid.status_code == 200

        # 4. Customer sees both
        mine = client.get(f"/api/bookings/{booking_id}", headers=customer_headers).json()["data"]
        assert mine["status"] == "confirmed"
        assert mine["payment_status"] == "completed"
        assert mine["customer_name"] == "Meera Nair"

        payments = client.get("/api/payments", headers=customer_headers).json()["data"]
        assert payments[0]["id"] == "pi_flow"
        assert payments[0]["payment_method"] == "Online Payment"
        assert payments[0]["amount"] == 900

        # 5. Trip completed; completed bookings are final
        done = client.patch(
            f"/api/admin/bookings/{booking_id}",
            json={"status": "completed"},
            headers=admin_headers,
        )
        assert done.status_code == 200

        reopened = client.patch(
            f"/api/admin/bookings/{booking_id}",
            json={"status": "pending"},
            headers=admin_headers,
        )
        assert reopened.status_code == 409

        stats = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]
        assert stats["total_revenue"] == 900
        assert stats["total_users"] == 1
        assert stats["recent_bookings"][0]["booking_id"] == booking_id

    def test_rejected_booking_leaves_no_trace(
        self,
        client: TestClient,
        headers_for: Headers,
        admin: User,
        customer: User,
        package_create: PackageCreate,
    ) -> None:
        package = client.post(
            "/api/admin/packages",
            json=package_create.model_dump(mode="json"),
            headers=headers_for(admin),
        ).json()["data"]

        response = client.post(
            "/api/bookings",
            json={
                "package_id": package["package_id"],
                "start_date": (date.today() + timedelta(days=10)).isoformat(),
                "number_of_people": package["max_group_size"] + 1,
                "contact_info": {
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "phone": "+91 98765 43210",
                },
            },
            headers=headers_for(customer),
        )

        assert response.status_code == 400
        listing = client.get("/api/admin/bookings", headers=headers_for(admin)).json()
        assert listing["pagination"]["total"] == 0
