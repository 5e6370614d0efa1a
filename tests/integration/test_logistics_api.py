"""Integration tests for the logistics partner API."""

import pytest

pytestmark = pytest.mark.integration

PARTNERS_URL = "/api/v1/logistics-partners/"


class TestLogisticsPartnerAPI:
    def test_manager_lists_partners_for_pincode(
        self, auth_client, manager_user, partner, make_partner
    ):
        make_partner(pincodes=["110001"])
        make_partner(pincodes=["560002"], is_active=False)

        response = auth_client(manager_user).get(PARTNERS_URL, {"pincode": "560002"})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["results"]] == [str(partner.id)]

    def test_customer_forbidden(self, auth_client, customer):
        response = auth_client(customer).get(PARTNERS_URL)
        assert response.status_code == 403

    def test_update_coverage(self, auth_client, admin_user, partner):
        response = auth_client(admin_user).put(
            f"{PARTNERS_URL}{partner.id}/coverage/",
            {"serviceable_pincodes": ["560095", "560034", "560034"]},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["serviceable_pincodes"] == ["560034", "560095"]

    def test_coverage_rejects_bad_pincode(self, auth_client, admin_user, partner):
        response = auth_client(admin_user).put(
            f"{PARTNERS_URL}{partner.id}/coverage/",
            {"serviceable_pincodes": ["56OO34"]},
            format="json",
        )
        assert response.status_code == 400

    def test_manager_cannot_change_coverage(self, auth_client, manager_user, partner):
        response = auth_client(manager_user).put(
            f"{PARTNERS_URL}{partner.id}/coverage/",
            {"serviceable_pincodes": ["560034"]},
            format="json",
        )
        assert response.status_code == 403

    def test_toggle_status(self, auth_client, admin_user, partner):
        response = auth_client(admin_user).post(f"{PARTNERS_URL}{partner.id}/toggle-status/")
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_unknown_partner(self, auth_client, admin_user):
        response = auth_client(admin_user).post(
            f"{PARTNERS_URL}0190f3c2-7a1b-7c3d-8e4f-5a6b7c8d9e0f/toggle-status/"
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "LOGISTICS_NOT_FOUND"
