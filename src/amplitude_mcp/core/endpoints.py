"""
Request shapes for every Amplitude endpoint the server exposes.

Builders are pure: they take an already validated parameter model and return
an ApiRequest. Optional values are only emitted when set, and list values are
repeated under the same key in input order.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Tuple
from urllib.parse import quote

if TYPE_CHECKING:
    from .models import (
        ActiveUsersParams,
        AllAnnotationsParams,
        AnnotationParams,
        ChartParams,
        CreateAnnotationParams,
        EventSegmentationParams,
        EventsListParams,
        ExportEventsParams,
        FunnelAnalysisParams,
        QueryEventsParams,
        RetentionAnalysisParams,
        UserActivityParams,
    )

API_V2 = "/api/2"
API_V3 = "/api/3"

QueryParams = List[Tuple[str, str]]


class ResponseFormat(enum.Enum):
    JSON = "json"
    NDJSON_GZIP = "ndjson+gzip"


@dataclass(frozen=True)
class ApiRequest:
    method: str
    path: str
    params: QueryParams = field(default_factory=list)
    response_format: ResponseFormat = ResponseFormat.JSON
    # Error bodies are {error, code?, message?} rather than plain text.
    structured_errors: bool = False

    def param_keys(self) -> List[str]:
        return [key for key, _ in self.params]

    def param(self, key: str) -> Optional[str]:
        for k, v in self.params:
            if k == key:
                return v
        return None


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _sparse(*pairs: Tuple[str, Any]) -> QueryParams:
    """Keep only the pairs whose value is set."""
    return [(key, _query_value(value)) for key, value in pairs if value is not None]


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


# --- Event Segmentation (query/segment tools) ---


def build_query_events(params: "QueryEventsParams") -> ApiRequest:
    """
    Only the first event type is sent. Later events, property filters and the
    grouping/filter/breakdown options are accepted but not forwarded.
    """
    first = params.events[0]
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/events/segmentation",
        params=[
            ("e", _compact_json({"event_type": first.event_type})),
            ("start", params.start),
            ("end", params.end),
        ],
        structured_errors=True,
    )


# --- Export ---


def build_export_events(params: "ExportEventsParams") -> ApiRequest:
    # limit is applied client side after decoding.
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/export",
        params=[("start", params.start), ("end", params.end)],
        response_format=ResponseFormat.NDJSON_GZIP,
    )


# --- Charts ---


def build_get_chart(params: "ChartParams") -> ApiRequest:
    chart_id = quote(params.chart_id, safe="")
    return ApiRequest(method="GET", path=f"{API_V3}/chart/{chart_id}/csv")


# --- Dashboard REST API ---


def build_active_users(params: "ActiveUsersParams") -> ApiRequest:
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/users",
        params=_sparse(
            ("start", params.start),
            ("end", params.end),
            ("m", params.m),
            ("i", params.i),
            ("s", params.s),
            ("g", params.g),
        ),
    )


def build_event_segmentation(params: "EventSegmentationParams") -> ApiRequest:
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/events/segmentation",
        params=_sparse(
            ("e", params.e),
            ("start", params.start),
            ("end", params.end),
            ("m", params.m),
            ("i", params.i),
            ("s", params.s),
            ("g", params.g),
            ("limit", params.limit),
        ),
    )


def build_funnel_analysis(params: "FunnelAnalysisParams") -> ApiRequest:
    query = _sparse(
        ("start", params.start),
        ("end", params.end),
        ("mode", params.mode),
        ("i", params.i),
        ("s", params.s),
        ("g", params.g),
        ("cs", params.cs),
        ("limit", params.limit),
    )
    query.extend(("e", event) for event in params.events)
    return ApiRequest(method="GET", path=f"{API_V2}/funnels", params=query)


def build_retention_analysis(params: "RetentionAnalysisParams") -> ApiRequest:
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/retention",
        params=_sparse(
            ("se", params.se),
            ("re", params.re),
            ("start", params.start),
            ("end", params.end),
            ("rm", params.rm),
            ("rb", params.rb),
            ("i", params.i),
            ("s", params.s),
            ("g", params.g),
        ),
    )


def build_user_activity(params: "UserActivityParams") -> ApiRequest:
    return ApiRequest(
        method="GET",
        path=f"{API_V2}/useractivity",
        params=_sparse(
            ("user", params.user),
            ("offset", params.offset),
            ("limit", params.limit),
            ("direction", params.direction),
        ),
    )


def build_events_list(params: "EventsListParams") -> ApiRequest:
    return ApiRequest(method="GET", path=f"{API_V2}/events/list")


# --- Annotations ---


def build_create_annotation(params: "CreateAnnotationParams") -> ApiRequest:
    # The Annotations API takes its fields in the query string of an empty POST.
    return ApiRequest(
        method="POST",
        path=f"{API_V2}/annotations",
        params=_sparse(
            ("app_id", params.app_id),
            ("date", params.date),
            ("label", params.label),
            ("chart_id", params.chart_id),
            ("details", params.details),
        ),
    )


def build_all_annotations(params: "AllAnnotationsParams") -> ApiRequest:
    return ApiRequest(method="GET", path=f"{API_V2}/annotations")


def build_annotation(params: "AnnotationParams") -> ApiRequest:
    return ApiRequest(
        method="GET", path=f"{API_V2}/annotations", params=[("id", str(params.id))]
    )
