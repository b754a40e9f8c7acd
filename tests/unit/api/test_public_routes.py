"""Unit tests for public catalog routes."""

from fastapi.testclient import TestClient

from bhraman.models import Package


class TestPackageRoutes:
    def test_list_packages_is_public(self, client: TestClient, sample_package: Package) -> None:
        response = client.get("/api/packages")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["data"]] == [sample_package.slug]

    def test_list_packages_with_filters(
        self, client: TestClient, sample_package: Package
    ) -> None:
        response = client.get(
            "/api/packages",
            params={"location": "Kerala", "price_range": "Any Price", "sort_by": "newest"},
        )

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_get_by_slug(self, client: TestClient, sample_package: Package) -> None:
        response = client.get(f"/api/packages/{sample_package.slug}")

        assert response.status_code == 200
        assert response.json()["data"]["package_id"] == sample_package.package_id

    def test_unknown_slug_is_404(self, client: TestClient) -> None:
        response = client.get("/api/packages/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False
