"""Property-based tests for input parsing and search predicate invariants."""

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from famtivity.backend import FilterOp
from famtivity.schemas.activity import ActivitySearchFilters
from famtivity.schemas.common import WholeNumber, validate_payload
from famtivity.schemas.waitlist import WaitlistSignupRequest
from famtivity.core.exceptions import ValidationError

# Strategies for generating test data
whole_numbers = st.integers(min_value=0, max_value=10**6)
ages = st.integers(min_value=0, max_value=18)
prices = st.floats(min_value=0, max_value=500, allow_nan=False)
non_numeric_text = st.text(min_size=1, max_size=10).filter(lambda s: not s.strip().isdigit())

whole_number = TypeAdapter(WholeNumber)

activity_rows = st.fixed_dictionaries({
    "category": st.sampled_from(["sports", "arts", "stem", "music"]),
    "min_age": ages,
    "span": st.integers(min_value=0, max_value=10),
    "price_per_month": prices,
    "is_active": st.booleans(),
}).map(lambda row: {**row, "max_age": row["min_age"] + row.pop("span")})


def _matches(row, filters):
    """Evaluate backend predicates against an in-memory row."""
    for flt in filters:
        value = row[flt.column]
        if flt.op is FilterOp.EQ and value != flt.value:
            return False
        if flt.op is FilterOp.LTE and not value <= flt.value:
            return False
        if flt.op is FilterOp.GTE and not value >= flt.value:
            return False
    return True


@given(value=whole_numbers)
def test_digit_strings_parse_like_integers(value):
    """Test a whole number parses the same from an int or its digit string."""
    assert whole_number.validate_python(value) == value
    assert whole_number.validate_python(str(value)) == value
    assert whole_number.validate_python(f" {value} ") == value


@given(text=non_numeric_text)
def test_non_numeric_text_never_parses(text):
    """Test text that is not all digits is rejected rather than coerced."""
    with pytest.raises(PydanticValidationError):
        whole_number.validate_python(text)


@given(value=st.floats(allow_nan=True, allow_infinity=True))
def test_floats_never_parse(value):
    """Test fractional input is never truncated into a whole number."""
    with pytest.raises(PydanticValidationError):
        whole_number.validate_python(value)


@given(family_size=st.integers(min_value=1, max_value=20), email_case=st.booleans())
def test_valid_signup_always_normalizes(family_size, email_case):
    """Test any valid signup yields a lower-case email and integer family size."""
    email = "Parent.Name@Example.org"
    request = validate_payload(WaitlistSignupRequest, {
        "email": email.upper() if email_case else email,
        "first_name": "Pat",
        "zip_code": "02139",
        "family_size": str(family_size),
    })

    assert request.email == "parent.name@example.org"
    assert request.family_size == family_size
    assert request.to_row()["source"] == "website"


@given(family_size=st.integers().filter(lambda n: n < 1 or n > 20))
def test_out_of_range_family_size_rejected(family_size):
    with pytest.raises(ValidationError):
        validate_payload(WaitlistSignupRequest, {
            "email": "p@example.org",
            "first_name": "Pat",
            "zip_code": "02139",
            "family_size": family_size,
        })


@given(
    row=activity_rows,
    min_age=st.none() | ages,
    max_age=st.none() | ages,
    max_price=st.none() | prices,
)
def test_search_predicates_match_age_overlap(row, min_age, max_age, max_price):
    """Test search predicates keep exactly the active rows overlapping the age range within budget."""
    assume(min_age is None or max_age is None or min_age <= max_age)
    criteria = ActivitySearchFilters(min_age=min_age, max_age=max_age, max_price=max_price)

    expected = (
        row["is_active"]
        and (max_age is None or row["min_age"] <= max_age)
        and (min_age is None or row["max_age"] >= min_age)
        and (max_price is None or row["price_per_month"] <= max_price)
    )

    assert _matches(row, criteria.predicates()) == expected


@given(
    lat=st.floats(min_value=-90, max_value=90),
    lng=st.floats(min_value=-180, max_value=180),
    distance=st.floats(min_value=0.1, max_value=500),
    category=st.none() | st.sampled_from(["sports", "arts"]),
)
def test_geo_and_local_queries_share_predicates(lat, lng, distance, category):
    """Test adding a location changes the strategy but not the row predicates."""
    local = ActivitySearchFilters(category=category)
    geo = ActivitySearchFilters(
        category=category, user_lat=lat, user_lng=lng, max_distance=distance
    )

    call = geo.to_query().to_call()

    assert call.filters == local.to_query().to_select().filters
    assert call.params == {"user_lat": lat, "user_lng": lng, "max_distance_km": distance}
