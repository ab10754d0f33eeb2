"""Unit tests for OnboardingService."""

import pytest

from famtivity.backend import SelectQuery, eq
from famtivity.core.exceptions import BackendUnavailableError
from famtivity.services.onboarding_service import OnboardingService


async def _table(backend, name, *filters):
    return await backend.select(SelectQuery(table=name, filters=tuple(filters)))


class TestCompleteFamilyOnboarding:
    """Tests for the three-step onboarding sequence."""

    @pytest.mark.asyncio
    async def test_onboarding_creates_family_and_children(
        self, backend, waitlist_entry, sample_family_data, sample_children_data
    ):
        """Test one family row, one row per child, and the entry marked onboarded."""
        service = OnboardingService(backend)

        result = await service.complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, sample_children_data
        )

        assert result.success is True
        assert result.status_code == 201
        onboarding = result.data
        assert onboarding.family["waitlist_id"] == waitlist_entry["id"]
        assert onboarding.family["max_travel_distance"] == 15
        assert onboarding.family["preferred_times"] == ["weekday_afternoon", "weekend_morning"]

        children = await _table(backend, "children", eq("family_id", onboarding.family_id))
        assert len(children) == 3
        assert sorted(child["age"] for child in children) == [4, 7, 10]
        assert sum(1 for child in children if child["name"] is None) == 2

        entry = (await _table(backend, "waitlist", eq("id", waitlist_entry["id"])))[0]
        assert entry["completed_onboarding"] is True
        assert entry["user_role"] == "family"

    @pytest.mark.asyncio
    async def test_onboarding_without_children(self, backend, waitlist_entry, sample_family_data):
        """Test a family may onboard with no children."""
        result = await OnboardingService(backend).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, []
        )

        assert result.success is True
        assert result.data.children == []
        assert await _table(backend, "children") == []

    @pytest.mark.asyncio
    async def test_numeric_budget_is_accepted(self, backend, waitlist_entry, sample_family_data):
        """Test a budget sent as a number is stored like a typed-in amount."""
        sample_family_data["monthly_budget"] = 250

        result = await OnboardingService(backend).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, [{"age": "7"}]
        )

        assert result.success is True
        assert result.data.family["monthly_budget"] == "250"
        assert len(result.data.children) == 1

    @pytest.mark.asyncio
    async def test_invalid_child_age_writes_nothing(
        self, backend, waitlist_entry, sample_family_data, sample_children_data
    ):
        """Test an unparseable age is rejected before the family row is written."""
        sample_children_data[1]["age"] = "four"

        result = await OnboardingService(backend).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, sample_children_data
        )

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"
        assert "children.1.age" in [v["path"] for v in result.details["violations"]]
        assert await _table(backend, "family_profiles") == []

    @pytest.mark.asyncio
    async def test_invalid_travel_distance_rejected(self, backend, waitlist_entry, sample_family_data):
        """Test max travel must be a whole number."""
        sample_family_data["max_travel"] = "ten miles"

        result = await OnboardingService(backend).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, []
        )

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_unknown_waitlist_entry_fails(self, backend, sample_family_data):
        """Test a family cannot reference a missing waitlist entry."""
        result = await OnboardingService(backend).complete_family_onboarding(
            "00000000-0000-0000-0000-000000000000", sample_family_data, []
        )

        assert result.success is False
        assert result.code == "VALIDATION_ERROR"
        assert await _table(backend, "family_profiles") == []

    @pytest.mark.asyncio
    async def test_children_failure_rolls_back_family(
        self, backend, faulty_backend, waitlist_entry, sample_family_data, sample_children_data
    ):
        """Test a failed children insert removes the family row already written."""
        service = OnboardingService(faulty_backend(("insert", "children")))

        result = await service.complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, sample_children_data
        )

        assert result.success is False
        assert result.code == "BACKEND_UNAVAILABLE"
        assert result.details["rolled_back"] is True
        assert await _table(backend, "family_profiles") == []
        assert await _table(backend, "children") == []

        entry = (await _table(backend, "waitlist", eq("id", waitlist_entry["id"])))[0]
        assert entry["completed_onboarding"] is False

    @pytest.mark.asyncio
    async def test_waitlist_update_failure_rolls_back_all_rows(
        self, backend, faulty_backend, waitlist_entry, sample_family_data, sample_children_data
    ):
        """Test a failed final step removes both the children and the family."""
        faulty = faulty_backend(("update", "waitlist"))

        result = await OnboardingService(faulty).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, sample_children_data
        )

        assert result.success is False
        assert result.details["rolled_back"] is True
        assert await _table(backend, "family_profiles") == []
        assert await _table(backend, "children") == []
        # Children are undone before the family
        deletes = [table for method, table in faulty.calls if method == "delete"]
        assert deletes == ["children", "family_profiles"]

    @pytest.mark.asyncio
    async def test_failed_compensation_is_flagged(
        self, backend, faulty_backend, waitlist_entry, sample_family_data
    ):
        """Test a compensation that cannot run is reported instead of hidden."""
        faulty = faulty_backend(("update", "waitlist"), ("delete", "family_profiles"))

        result = await OnboardingService(faulty).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, []
        )

        assert result.success is False
        assert result.code == "BACKEND_UNAVAILABLE"
        assert result.details["compensation_failed"] is True
        assert "rolled_back" not in result.details
        assert len(await _table(backend, "family_profiles")) == 1

    @pytest.mark.asyncio
    async def test_update_matching_no_entry_is_not_found(
        self, recording_backend, sample_family_data
    ):
        """Test an update that touches no waitlist row fails and compensates."""

        class NoMatchBackend(recording_backend):
            async def update(self, table, values, filters):
                self.calls.append(("update", table, values, filters))
                return []

        fake = NoMatchBackend()

        result = await OnboardingService(fake).complete_family_onboarding(
            "waitlist-1", sample_family_data, [{"age": 6}]
        )

        assert result.success is False
        assert result.code == "NOT_FOUND"
        deletes = [call[1] for call in fake.calls if call[0] == "delete"]
        assert deletes == ["children", "family_profiles"]

    @pytest.mark.asyncio
    async def test_backend_error_type_is_preserved(
        self, faulty_backend, waitlist_entry, sample_family_data
    ):
        """Test the failure code reflects the error the failing step raised."""
        faulty = faulty_backend(
            ("insert", "family_profiles"),
            error_factory=lambda: BackendUnavailableError(detail="connection refused"),
        )

        result = await OnboardingService(faulty).complete_family_onboarding(
            waitlist_entry["id"], sample_family_data, []
        )

        assert result.success is False
        assert result.code == "BACKEND_UNAVAILABLE"
        assert result.error == "connection refused"
        # Nothing was written, so nothing is compensated
        assert not [call for call in faulty.calls if call[0] == "delete"]
