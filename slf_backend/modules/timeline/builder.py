"""
Activity timeline assembled from three sources: project rows, schedules and documents.

Each source becomes its own event stream; the streams are concatenated and ordered
newest first. Events without a timestamp are kept but sorted to the end.
"""

from typing import Any, Dict, Iterable, List, Optional

from slf_backend.config.workflow_config import project_status_label
from slf_backend.core.filters import matches_search, matches_filter, sort_by_timestamp

PROJECT_STATUS_CHANGE = "project_status_change"
SCHEDULE_EVENT = "schedule_event"
DOCUMENT_STATUS_CHANGE = "document_status_change"

UNKNOWN_PROJECT = "N/A"


def project_events(projects: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"proj-status-{p['id']}-{p.get('created_at')}",
            "type": PROJECT_STATUS_CHANGE,
            "project_id": p["id"],
            "project_name": p.get("name") or UNKNOWN_PROJECT,
            "status": p.get("status"),
            "status_label": project_status_label(p.get("status")),
            "timestamp": p.get("created_at"),
            "description": f"Status proyek berubah ke {project_status_label(p.get('status'))}",
        }
        for p in projects
    ]


def schedule_events(schedules: Iterable[Dict[str, Any]], project_names: Dict[str, str]) -> List[Dict[str, Any]]:
    events = []
    for s in schedules:
        name = project_names.get(s.get("project_id"))
        events.append({
            "id": f"sched-{s['id']}",
            "type": SCHEDULE_EVENT,
            "project_id": s.get("project_id"),
            "project_name": name or UNKNOWN_PROJECT,
            "schedule_title": s.get("title"),
            "schedule_type": s.get("schedule_type"),
            "schedule_date": s.get("schedule_date"),
            "timestamp": s.get("created_at"),
            "description": f"Jadwal {s.get('schedule_type')} untuk {name or 'proyek'}",
        })
    return events


def document_events(documents: Iterable[Dict[str, Any]], project_names: Dict[str, str]) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"doc-{d['id']}",
            "type": DOCUMENT_STATUS_CHANGE,
            "project_id": d.get("project_id"),
            "project_name": project_names.get(d.get("project_id")) or UNKNOWN_PROJECT,
            "document_name": d.get("name"),
            "doc_status": d.get("status"),
            "timestamp": d.get("created_at"),
            "description": f"Status dokumen \"{d.get('name')}\" berubah",
        }
        for d in documents
    ]


def build_timeline(
    projects: List[Dict[str, Any]],
    schedules: List[Dict[str, Any]],
    documents: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    project_names = {p["id"]: p.get("name") for p in projects}
    events = project_events(projects) + schedule_events(schedules, project_names) + document_events(documents, project_names)
    return sort_by_timestamp(events, "timestamp")


def filter_events(
    events: List[Dict[str, Any]],
    search: Optional[str] = None,
    project_id: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """`status` matches either the project status or the document status of an event"""
    return [
        e for e in events
        if matches_search(search, e.get("description"), e.get("project_name"))
        and matches_filter(e.get("project_id"), project_id)
        and (matches_filter(e.get("status"), status) or matches_filter(e.get("doc_status"), status))
    ]
