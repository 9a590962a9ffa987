from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class TimelineEvent(BaseModel):
    id: str
    type: str
    project_id: Optional[str] = None
    project_name: str = "N/A"
    status: Optional[str] = None
    status_label: Optional[str] = None
    schedule_title: Optional[str] = None
    schedule_type: Optional[str] = None
    schedule_date: Optional[str] = None
    document_name: Optional[str] = None
    doc_status: Optional[str] = None
    timestamp: Optional[str] = None
    description: str


class TimelineResponse(BaseModel):
    events: List[TimelineEvent]
    projects: List[Dict[str, Any]]
