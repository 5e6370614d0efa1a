import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_mobile_number_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "phone": "9876543210"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "9876543210" not in result["phone"]
        assert "***MASKED***" in result["phone"]

    def test_mobile_number_with_country_code_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "detail": "call +91 9876543210 on arrival"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "9876543210" not in result["detail"]
        assert result["detail"] == "call ***MASKED*** on arrival"

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {
            "event": "order.status_changed",
            "order_number": "ORD-20260301-00042",
            "order_id": "0190f3c2-7a1b-7c3d-8e4f-5a6b7c8d9e0f",
            "pincode": "560001",
        }
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_number"] == "ORD-20260301-00042"
        assert result["order_id"] == "0190f3c2-7a1b-7c3d-8e4f-5a6b7c8d9e0f"
        assert result["pincode"] == "560001"
        assert result["event"] == "order.status_changed"
