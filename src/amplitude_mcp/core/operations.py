"""
Operation table for the Amplitude tools.

Each entry ties a tool name to its parameter model, its request builder and
the way a successful payload is summarised. run_operation is the single
dispatch path used by every tool and resource.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from . import endpoints, models
from .client import AmplitudeClient, AmplitudeValidationError
from .decoding import ExportResult, limit_events

Presenter = Callable[[Any, Any], Tuple[str, Any]]


@dataclass(frozen=True)
class OperationResult:
    summary: str
    payload: Any


@dataclass(frozen=True)
class Operation:
    name: str
    action: str
    error_label: str
    description: str
    params_model: Type[BaseModel]
    build: Callable[[Any], endpoints.ApiRequest]
    present: Optional[Presenter] = None
    success_summary: str = ""

    def summarize(self, params: BaseModel, payload: Any) -> Tuple[str, Any]:
        if self.present is not None:
            return self.present(params, payload)
        return self.success_summary, payload


def _present_export(
    params: models.ExportEventsParams, result: ExportResult
) -> Tuple[str, Any]:
    returned = limit_events(result.events, params.limit)
    summary = (
        "Raw event data exported successfully. "
        f"Total events: {result.total}, Returned: {len(returned)}"
    )
    if result.skipped_lines:
        summary += f", Skipped malformed lines: {result.skipped_lines}"
    return summary, returned


_SEGMENTATION_NOTE = (
    " Only the first event's type is sent to Amplitude; further events and "
    "property filters are accepted but not applied."
)

_OPERATIONS = (
    Operation(
        name="query_events",
        action="query events",
        error_label="Error querying events",
        description="Query event counts with the Event Segmentation API."
        + _SEGMENTATION_NOTE,
        params_model=models.QueryEventsParams,
        build=endpoints.build_query_events,
        success_summary="Event data retrieved successfully:",
    ),
    Operation(
        name="segment_events",
        action="segment events",
        error_label="Error segmenting events",
        description="Segment events with filters and breakdowns via the "
        "Event Segmentation API." + _SEGMENTATION_NOTE,
        params_model=models.SegmentEventsParams,
        build=endpoints.build_query_events,
        success_summary="Segmented event data retrieved successfully:",
    ),
    Operation(
        name="export_events",
        action="export events",
        error_label="Error exporting events",
        description="Export raw event data for an hour range (YYYYMMDDTHH). "
        "Returns at most `limit` events (default 1000).",
        params_model=models.ExportEventsParams,
        build=endpoints.build_export_events,
        present=_present_export,
    ),
    Operation(
        name="get_chart",
        action="get chart",
        error_label="Error getting chart",
        description="Get the results of an existing chart by its ID.",
        params_model=models.ChartParams,
        build=endpoints.build_get_chart,
        success_summary="Chart data retrieved successfully:",
    ),
    Operation(
        name="get_active_users",
        action="get active users",
        error_label="Error getting active users",
        description="Get active or new user counts for a date range.",
        params_model=models.ActiveUsersParams,
        build=endpoints.build_active_users,
        success_summary="User counts retrieved successfully:",
    ),
    Operation(
        name="get_event_segmentation",
        action="get event segmentation",
        error_label="Error getting event segmentation",
        description="Get event segmentation data from the Dashboard REST API "
        "using a JSON encoded event definition.",
        params_model=models.EventSegmentationParams,
        build=endpoints.build_event_segmentation,
        success_summary="Event segmentation data retrieved successfully:",
    ),
    Operation(
        name="get_funnel_analysis",
        action="get funnel analysis",
        error_label="Error getting funnel analysis",
        description="Get funnel conversion data for two or more events.",
        params_model=models.FunnelAnalysisParams,
        build=endpoints.build_funnel_analysis,
        success_summary="Funnel analysis data retrieved successfully:",
    ),
    Operation(
        name="get_retention_analysis",
        action="get retention analysis",
        error_label="Error getting retention analysis",
        description="Get retention data between a start event and a return event.",
        params_model=models.RetentionAnalysisParams,
        build=endpoints.build_retention_analysis,
        success_summary="Retention analysis data retrieved successfully:",
    ),
    Operation(
        name="get_user_activity",
        action="get user activity",
        error_label="Error getting user activity",
        description="Get a user's summary and their most recent events.",
        params_model=models.UserActivityParams,
        build=endpoints.build_user_activity,
        success_summary="User activity retrieved successfully:",
    ),
    Operation(
        name="get_events_list",
        action="get events list",
        error_label="Error getting events list",
        description="List all visible events with this week's totals.",
        params_model=models.EventsListParams,
        build=endpoints.build_events_list,
        success_summary="Events list retrieved successfully:",
    ),
    Operation(
        name="create_annotation",
        action="create annotation",
        error_label="Error creating annotation",
        description="Create a chart annotation on a date.",
        params_model=models.CreateAnnotationParams,
        build=endpoints.build_create_annotation,
        success_summary="Annotation created successfully:",
    ),
    Operation(
        name="get_all_annotations",
        action="get annotations",
        error_label="Error getting annotations",
        description="List all chart annotations in the project.",
        params_model=models.AllAnnotationsParams,
        build=endpoints.build_all_annotations,
        success_summary="Annotations retrieved successfully:",
    ),
    Operation(
        name="get_annotation",
        action="get annotation",
        error_label="Error getting annotation",
        description="Get a single chart annotation by ID.",
        params_model=models.AnnotationParams,
        build=endpoints.build_annotation,
        success_summary="Annotation retrieved successfully:",
    ),
)

OPERATIONS: Dict[str, Operation] = {op.name: op for op in _OPERATIONS}


def get_operation(name: str) -> Operation:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise KeyError(f"Unknown operation: {name}") from None


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def validate_arguments(operation: Operation, arguments: Mapping[str, Any]) -> BaseModel:
    try:
        return operation.params_model.model_validate(dict(arguments))
    except ValidationError as exc:
        raise AmplitudeValidationError(
            f"Invalid arguments for {operation.name}: "
            f"{_format_validation_error(exc)}"
        ) from exc


async def run_operation(
    client: AmplitudeClient,
    operation: Union[str, Operation],
    arguments: Optional[Mapping[str, Any]] = None,
) -> OperationResult:
    """
    Validate, build, execute and summarise one operation.

    Invalid arguments raise AmplitudeValidationError before any request is
    made; every other failure arrives as an AmplitudeClientError from the
    client.
    """
    op = get_operation(operation) if isinstance(operation, str) else operation
    params = validate_arguments(op, arguments or {})
    request = op.build(params)
    payload = await client.execute(request, action=op.action, tool=op.name)
    summary, shaped = op.summarize(params, payload)
    return OperationResult(summary=summary, payload=shaped)


__all__ = [
    "Operation",
    "OperationResult",
    "OPERATIONS",
    "get_operation",
    "run_operation",
    "validate_arguments",
]
