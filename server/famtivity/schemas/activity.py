"""Activity search schemas and the two query strategies they resolve to."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..backend import Filter, ProcedureCall, SelectQuery, eq, gte, lte
from .common import WholeNumber, blank_to_none

ACTIVITIES_TABLE = "activities"
DISTANCE_PROCEDURE = "get_activities_within_distance"


@dataclass(frozen=True)
class LocalFilterQuery:
    """Search expressed as a filtered read of the activities table."""

    filters: tuple[Filter, ...]

    def to_select(self) -> SelectQuery:
        return SelectQuery(table=ACTIVITIES_TABLE, filters=self.filters)


@dataclass(frozen=True)
class GeoProcedureQuery:
    """
    Search delegated to the backend's distance procedure.

    ``filters`` are the same predicates a local search would apply; they
    narrow the procedure's result rows.
    """

    user_lat: float
    user_lng: float
    max_distance_km: float
    filters: tuple[Filter, ...]

    def to_call(self) -> ProcedureCall:
        return ProcedureCall(
            name=DISTANCE_PROCEDURE,
            params={
                "user_lat": self.user_lat,
                "user_lng": self.user_lng,
                "max_distance_km": self.max_distance_km,
            },
            filters=self.filters,
            returns=ACTIVITIES_TABLE,
        )


ActivityQuery = Union[LocalFilterQuery, GeoProcedureQuery]


class ActivitySearchFilters(BaseModel):
    """Optional search criteria; omitted criteria do not narrow the search."""

    model_config = ConfigDict(allow_inf_nan=False)

    category: Optional[str] = Field(None, min_length=1, max_length=50, description="Exact category")
    min_age: Optional[WholeNumber] = Field(None, ge=0, le=99, description="Youngest age the activity must accept")
    max_age: Optional[WholeNumber] = Field(None, ge=0, le=99, description="Oldest age the activity must accept")
    max_price: Optional[float] = Field(None, ge=0, description="Maximum monthly price")
    user_lat: Optional[float] = Field(None, ge=-90, le=90, description="Searcher latitude")
    user_lng: Optional[float] = Field(None, ge=-180, le=180, description="Searcher longitude")
    max_distance: Optional[float] = Field(None, gt=0, description="Maximum distance in kilometres")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_omitted(cls, v: Any) -> Any:
        return blank_to_none(v)

    @model_validator(mode="after")
    def check_ranges(self) -> "ActivitySearchFilters":
        location = (self.user_lat, self.user_lng, self.max_distance)
        if any(v is not None for v in location) and any(v is None for v in location):
            raise ValueError("user_lat, user_lng and max_distance must be given together")
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        return self

    @property
    def has_location(self) -> bool:
        return self.max_distance is not None

    def predicates(self) -> tuple[Filter, ...]:
        """Predicates on activity rows implied by these criteria."""
        filters = [eq("is_active", True)]
        if self.category is not None:
            filters.append(eq("category", self.category))
        # An activity's age range must overlap the requested one
        if self.max_age is not None:
            filters.append(lte("min_age", self.max_age))
        if self.min_age is not None:
            filters.append(gte("max_age", self.min_age))
        if self.max_price is not None:
            filters.append(lte("price_per_month", self.max_price))
        return tuple(filters)

    def to_query(self) -> ActivityQuery:
        if self.has_location:
            return GeoProcedureQuery(
                user_lat=self.user_lat,
                user_lng=self.user_lng,
                max_distance_km=self.max_distance,
                filters=self.predicates(),
            )
        return LocalFilterQuery(filters=self.predicates())
