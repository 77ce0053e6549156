from __future__ import annotations

from fastapi.testclient import TestClient

from groomhub.app import app

client = TestClient(app)


def _login_admin(c):
    c.post("/auth/login", json={"username": "superadmin", "password": "admin123"})


def _login_customer(c):
    c.post("/auth/login", json={"username": "customer", "password": "customer123"})


def _logout(c):
    c.post("/auth/logout")


# ── Provider details ─────────────────────────────────────────────────────


class TestSalonDetail:
    def test_salon_found(self):
        resp = client.get("/salons/s-1")
        assert resp.status_code == 200
        salon = resp.json()["data"]
        assert salon["shop_name"] == "Urban Clippers"
        assert salon["average_rating"] == 4.3
        assert salon["review_count"] == 3
        assert [c["id"] for c in salon["service_categories"]] == ["c-1", "c-2", "c-3", "c-8"]

    def test_salon_without_reviews(self):
        salon = client.get("/salons/s-7").json()["data"]
        assert salon["average_rating"] == 0.0
        assert salon["review_count"] == 0
        assert salon["service_categories"] == []

    def test_salon_not_found(self):
        resp = client.get("/salons/nope")
        assert resp.status_code == 404


class TestSalonServices:
    def test_grouped_by_category(self):
        resp = client.get("/salons/s-1/services")
        assert resp.status_code == 200
        groups = resp.json()["categories"]
        assert [g["category"] for g in groups] == ["haircut", "beard grooming", "facial", "massage"]
        beard = groups[1]["items"]
        assert [i["id"] for i in beard] == ["si-2"]

    def test_inactive_services_hidden(self):
        groups = client.get("/salons/s-1/services").json()["categories"]
        ids = {item["id"] for g in groups for item in g["items"]}
        assert "si-5" not in ids

    def test_salon_without_services(self):
        resp = client.get("/salons/s-7/services")
        assert resp.status_code == 200
        assert resp.json()["categories"] == []

    def test_unknown_salon(self):
        assert client.get("/salons/nope/services").status_code == 404


class TestProfessionalDetail:
    def test_professional_found(self):
        resp = client.get("/professionals/p-1")
        assert resp.status_code == 200
        pro = resp.json()["data"]
        assert pro["name"] == "Ravi Kumar"
        assert pro["address"] == "5 Bengali Market"
        assert pro["city"] == "New Delhi"
        assert pro["average_rating"] == 4.5
        assert pro["review_count"] == 2
        assert [s["name"] for s in pro["specializations"]] == [
            "haircut", "beard grooming", "facial", "hair spa",
        ]

    def test_professional_not_found(self):
        resp = client.get("/professionals/s-1")
        assert resp.status_code == 404


# ── Categories ───────────────────────────────────────────────────────────


class TestCategories:
    def test_active_newest_first(self):
        body = client.get("/categories").json()
        assert body["total"] == 7
        assert body["gender_applied"] == "none"
        assert [c["id"] for c in body["categories"]][:3] == ["c-7", "c-6", "c-5"]
        assert "c-8" not in [c["id"] for c in body["categories"]]

    def test_gender_filter(self):
        body = client.get("/categories", params={"gender": "men"}).json()
        assert [c["id"] for c in body["categories"]] == ["c-3", "c-2", "c-1"]
        assert body["gender_applied"] == "men"

    def test_pagination(self):
        body = client.get("/categories", params={"page": 2, "limit": 3}).json()
        assert [c["id"] for c in body["categories"]] == ["c-4", "c-3", "c-2"]
        assert body["total_pages"] == 3
        assert body["count"] == 3

    def test_public_fields_only(self):
        category = client.get("/categories").json()["categories"][0]
        assert set(category) == {"id", "name", "gender", "icon", "active"}

    def test_invalid_gender(self):
        resp = client.get("/categories", params={"gender": "kids"})
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "message": "Invalid gender. Allowed: men | women | unisex",
        }

    def test_invalid_page(self):
        assert client.get("/categories", params={"page": "x"}).status_code == 400


# ── Administration ───────────────────────────────────────────────────────


class TestAdminSalons:
    def test_requires_login(self):
        _logout(client)
        assert client.get("/admin/salons").status_code == 401

    def test_customer_forbidden(self):
        _login_customer(client)
        assert client.get("/admin/salons").status_code == 403

    def test_lists_every_salon(self):
        _login_admin(client)
        body = client.get("/admin/salons").json()
        assert body["total_count"] == 10
        assert body["limit"] == 20
        assert body["total_pages"] == 1
        assert body["count"] == 10

    def test_last_page(self):
        _login_admin(client)
        body = client.get("/admin/salons", params={"page": 3, "limit": 4}).json()
        assert body["count"] == 2
        assert body["total_pages"] == 3
        assert [s["id"] for s in body["salons"]] == ["s-9", "s-10"]

    def test_unverified(self):
        _login_admin(client)
        data = client.get("/admin/salons/unverified").json()["data"]
        assert [s["id"] for s in data] == ["s-3", "s-5", "s-7"]

    def test_verify(self):
        _login_admin(client)
        resp = client.patch("/admin/salons/s-3/verify")
        assert resp.status_code == 200
        assert resp.json()["salon"]["verified_by_admin"] is True
        data = client.get("/admin/salons/unverified").json()["data"]
        assert [s["id"] for s in data] == ["s-5", "s-7"]

    def test_verify_unknown(self):
        _login_admin(client)
        assert client.patch("/admin/salons/nope/verify").status_code == 404
