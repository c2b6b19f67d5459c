from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IntentKind(str, Enum):
    """Closed set of pipeline branches the orchestrator dispatches on."""
    READ = "READ"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UNKNOWN = "UNKNOWN"


# Jira's fixed priority-name -> id table.
PRIORITY_IDS = {
    "highest": "1",
    "high": "2",
    "medium": "3",
    "low": "4",
    "lowest": "5",
}


def priority_id(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return PRIORITY_IDS.get(name.strip().lower())


class IssueDetails(BaseModel):
    """
    Fields extracted from a write request.
    None means "do not set / do not change".
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    target: Optional[str] = None

    @field_validator("*", mode="before")
    def blank_to_none(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            v = str(v)
        v = v.strip()
        return v or None


class QueryIntent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: IntentKind = IntentKind.READ
    details: IssueDetails = Field(default_factory=IssueDetails)
    # What the model actually said when it is not one of ours
    raw_operation: Optional[str] = None

    @property
    def is_write(self) -> bool:
        return self.kind is not IntentKind.READ


class JiraUser(BaseModel):
    account_id: str = Field(alias="accountId")
    display_name: str = Field(default="", alias="displayName")
    email_address: str = Field(default="", alias="emailAddress")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("display_name", "email_address", mode="before")
    def none_to_empty(cls, v):
        return v or ""


class IssueType(BaseModel):
    """An issue type from createmeta together with the field ids it accepts."""
    id: str
    name: str
    field_ids: FrozenSet[str] = frozenset()

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "IssueType":
        return cls(
            id=str(raw["id"]),
            name=raw.get("name", ""),
            field_ids=frozenset((raw.get("fields") or {}).keys()),
        )

    def supports(self, field: str) -> bool:
        return field in self.field_ids


class IssueSummary(BaseModel):
    key: str
    summary: str = ""
    status: str = "Unknown"
    priority: Optional[str] = None
    assignee: Optional[str] = None
    type: str = "Unknown"

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "IssueSummary":
        fields = raw.get("fields") or {}

        # Nested objects are null when unset
        assignee = fields.get("assignee") or {}
        priority = fields.get("priority") or {}
        status = fields.get("status") or {}
        issuetype = fields.get("issuetype") or {}

        return cls(
            key=raw["key"],
            summary=fields.get("summary") or "",
            status=status.get("name", "Unknown"),
            priority=priority.get("name"),
            assignee=assignee.get("displayName"),
            type=issuetype.get("name", "Unknown"),
        )


class SearchResult(BaseModel):
    issues: List[IssueSummary] = Field(default_factory=list)
    total: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SearchResult":
        issues = [IssueSummary.from_api(raw) for raw in data.get("issues") or []]
        return cls(issues=issues, total=data.get("total") or len(issues))


class CreatedIssue(BaseModel):
    key: str
    summary: str
    url: str


class UpdateOutcome(BaseModel):
    key: str
    url: str
    fields_updated: List[str] = Field(default_factory=list)
    requested_status: Optional[str] = None
    # None when no status change was requested
    transitioned: Optional[bool] = None


class ConnectionReport(BaseModel):
    success: bool
    user: Optional[str] = None
    project: Optional[str] = None
    total_issues: Optional[int] = None
    error: Optional[str] = None
