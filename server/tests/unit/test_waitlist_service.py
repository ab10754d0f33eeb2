"""Unit tests for WaitlistService."""

import pytest

from famtivity.backend import SelectQuery
from famtivity.services.waitlist_service import WaitlistService


class TestSubmitToWaitlist:
    """Tests for waitlist signup."""

    @pytest.mark.asyncio
    async def test_signup_creates_entry(self, backend, sample_signup_data):
        """Test a valid form creates one waitlist row with defaults applied."""
        service = WaitlistService(backend)

        result = await service.submit_to_waitlist(sample_signup_data)

        assert result.success is True
        assert result.status_code == 201
        entry = result.data
        assert entry["id"]
        assert entry["email"] == "jamie.rivera@example.com"
        assert entry["first_name"] == "Jamie"
        assert entry["zip_code"] == "94110"
        assert entry["family_size"] == 4
        assert entry["source"] == "website"
        assert entry["user_role"] == "waitlist"
        assert entry["completed_onboarding"] is False

    @pytest.mark.asyncio
    async def test_integer_family_size_accepted(self, backend, sample_signup_data):
        """Test family size may also arrive as an integer."""
        sample_signup_data["family_size"] = 2
        result = await WaitlistService(backend).submit_to_waitlist(sample_signup_data)

        assert result.success is True
        assert result.data["family_size"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("family_size", ["four", "4.5", "", "-3", "0", None])
    async def test_unparseable_family_size_writes_nothing(
        self, backend, sample_signup_data, family_size
    ):
        """Test a family size that is not a positive whole number is rejected before any write."""
        sample_signup_data["family_size"] = family_size

        result = await WaitlistService(backend).submit_to_waitlist(sample_signup_data)

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"
        assert result.status_code == 400
        paths = [v["path"] for v in result.details["violations"]]
        assert "family_size" in paths
        assert await backend.select(SelectQuery(table="waitlist")) == []

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, backend, sample_signup_data):
        """Test a malformed email is a validation failure."""
        sample_signup_data["email"] = "not-an-email"

        result = await WaitlistService(backend).submit_to_waitlist(sample_signup_data)

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_zip_code_rejected(self, backend, sample_signup_data):
        """Test ZIP codes must be five digits with an optional +4 suffix."""
        sample_signup_data["zip_code"] = "9411"

        result = await WaitlistService(backend).submit_to_waitlist(sample_signup_data)

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, backend, sample_signup_data):
        """Test a second signup with the same email, in any case, is a conflict."""
        service = WaitlistService(backend)
        first = await service.submit_to_waitlist(sample_signup_data)
        assert first.success is True

        second = await service.submit_to_waitlist(
            {**sample_signup_data, "email": "JAMIE.RIVERA@EXAMPLE.COM"}
        )

        assert second.success is False
        assert second.code == "CONFLICT"
        assert second.status_code == 409
        assert len(await backend.select(SelectQuery(table="waitlist"))) == 1

    @pytest.mark.asyncio
    async def test_backend_outage_is_reported(self, faulty_backend, sample_signup_data):
        """Test an unreachable backend comes back as a failure envelope, not an exception."""
        service = WaitlistService(faulty_backend(("insert", "waitlist")))

        result = await service.submit_to_waitlist(sample_signup_data)

        assert result.success is False
        assert result.code == "BACKEND_UNAVAILABLE"
        assert result.error == "simulated outage"
