from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Shared field shapes ---

# Segmentation query tools only anchor the start of the value.
SEGMENTATION_DATE_PATTERN = r"^\d{8}"
DASHBOARD_DATE_PATTERN = r"^\d{8}$"
EXPORT_HOUR_PATTERN = r"^\d{8}T\d{2}$"
ANNOTATION_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

FilterOperator = Literal[
    "is", "is not", "contains", "does not contain", ">", "<", ">=", "<="
]
Scalar = Union[str, int, float, bool]
FilterValue = Union[Scalar, List[Scalar]]


class _Params(BaseModel):
    """Tool payloads: unknown keys are dropped, camelCase aliases accepted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Segmentation sub-objects ---


class PropertyFilter(_Params):
    property_name: str = Field(alias="propertyName")
    value: FilterValue
    op: FilterOperator


class EventDefinition(_Params):
    event_type: str = Field(
        alias="eventType", min_length=1, description="Event type is required"
    )
    property_filters: Optional[List[PropertyFilter]] = Field(
        default=None, alias="propertyFilters"
    )


class SegmentationFilter(_Params):
    type: Literal["property", "event", "user"]
    property_name: Optional[str] = Field(default=None, alias="propertyName")
    value: Optional[FilterValue] = None
    op: Optional[FilterOperator] = None


class Breakdown(_Params):
    type: Literal["event", "user"]
    property_name: str = Field(alias="propertyName")


# --- Input Models (Tool Payloads) ---


class QueryEventsParams(_Params):
    events: List[EventDefinition] = Field(
        min_length=1, description="At least one event is required"
    )
    start: str = Field(
        pattern=SEGMENTATION_DATE_PATTERN,
        description="Start date in YYYYMMDD format",
    )
    end: str = Field(
        pattern=SEGMENTATION_DATE_PATTERN, description="End date in YYYYMMDD format"
    )
    interval: Optional[Literal["day", "week", "month"]] = None
    group_by: Optional[str] = Field(default=None, alias="groupBy")


class SegmentEventsParams(QueryEventsParams):
    filters: Optional[List[SegmentationFilter]] = None
    breakdowns: Optional[List[Breakdown]] = None


class ExportEventsParams(_Params):
    start: str = Field(
        pattern=EXPORT_HOUR_PATTERN,
        description="Start time in YYYYMMDDTHH format (e.g., 20220201T05)",
    )
    end: str = Field(
        pattern=EXPORT_HOUR_PATTERN,
        description="End time in YYYYMMDDTHH format (e.g., 20220201T23)",
    )
    limit: Optional[int] = Field(
        default=None,
        ge=1,
        le=10000,
        description="Maximum number of events to return (default: 1000, max: 10000)",
    )


class ChartParams(_Params):
    chart_id: str = Field(
        alias="chartId", min_length=1, description="Chart ID from the chart's URL"
    )


class DashboardRangeParams(_Params):
    start: str = Field(
        pattern=DASHBOARD_DATE_PATTERN, description="Start date in YYYYMMDD format"
    )
    end: str = Field(
        pattern=DASHBOARD_DATE_PATTERN, description="End date in YYYYMMDD format"
    )


class ActiveUsersParams(DashboardRangeParams):
    m: Optional[Literal["active", "new"]] = Field(
        default=None, description="Count active or new users (default: active)"
    )
    i: Optional[Literal[1, 7, 30]] = Field(
        default=None, description="Interval: 1 daily, 7 weekly, 30 monthly"
    )
    s: Optional[str] = Field(default=None, description="Segment definitions (JSON)")
    g: Optional[str] = Field(default=None, description="Property to group by")


class EventSegmentationParams(DashboardRangeParams):
    e: str = Field(min_length=1, description="Event definition (JSON)")
    m: Optional[str] = Field(
        default=None, description="Metric, e.g. uniques, totals, pct_dau, average"
    )
    i: Optional[int] = Field(default=None, description="Interval")
    s: Optional[str] = Field(default=None, description="Segment definitions (JSON)")
    g: Optional[str] = Field(default=None, description="Property to group by")
    limit: Optional[int] = Field(
        default=None, ge=1, le=1000, description="Number of group-by values returned"
    )


class FunnelAnalysisParams(DashboardRangeParams):
    events: List[str] = Field(
        min_length=2, description="Funnel steps, each a JSON encoded event"
    )
    mode: Optional[Literal["ordered", "unordered", "sequential"]] = None
    i: Optional[int] = Field(default=None, description="Interval")
    s: Optional[str] = Field(default=None, description="Segment definitions (JSON)")
    g: Optional[str] = Field(default=None, description="Property to group by")
    cs: Optional[int] = Field(
        default=None, ge=1, description="Conversion window in seconds"
    )
    limit: Optional[int] = Field(
        default=None, ge=1, le=1000, description="Number of group-by values returned"
    )


class RetentionAnalysisParams(DashboardRangeParams):
    se: str = Field(min_length=1, description="Start event (JSON)")
    re: str = Field(min_length=1, description="Return event (JSON)")
    rm: Optional[Literal["bracket", "rolling", "n-day"]] = Field(
        default=None, description="Retention mode"
    )
    rb: Optional[str] = Field(default=None, description="Bracket definition (JSON)")
    i: Optional[int] = Field(default=None, description="Interval")
    s: Optional[str] = Field(default=None, description="Segment definitions (JSON)")
    g: Optional[str] = Field(default=None, description="Property to group by")


class UserActivityParams(_Params):
    user: str = Field(min_length=1, description="Amplitude ID of the user")
    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=1, le=1000)
    direction: Optional[Literal["earliest", "latest"]] = None


class EventsListParams(_Params):
    pass


class CreateAnnotationParams(_Params):
    app_id: int = Field(description="Project (app) ID")
    date: str = Field(
        pattern=ANNOTATION_DATE_PATTERN, description="Date in YYYY-MM-DD format"
    )
    label: str = Field(min_length=1, description="Annotation title")
    chart_id: Optional[str] = Field(
        default=None, description="Chart to attach the annotation to"
    )
    details: Optional[str] = None


class AllAnnotationsParams(_Params):
    pass


class AnnotationParams(_Params):
    id: int = Field(description="Annotation ID")


__all__ = [
    "PropertyFilter",
    "EventDefinition",
    "SegmentationFilter",
    "Breakdown",
    "QueryEventsParams",
    "SegmentEventsParams",
    "ExportEventsParams",
    "ChartParams",
    "ActiveUsersParams",
    "EventSegmentationParams",
    "FunnelAnalysisParams",
    "RetentionAnalysisParams",
    "UserActivityParams",
    "EventsListParams",
    "CreateAnnotationParams",
    "AllAnnotationsParams",
    "AnnotationParams",
]
