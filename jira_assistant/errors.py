"""Error taxonomy shared by the gateway, resolver, executor and orchestrator."""
import json
from typing import Any, Optional


class AssistantError(Exception):
    """Base for every failure the assistant knows how to turn into a reply."""
    pass


class ConfigError(AssistantError):
    pass


class JiraError(AssistantError):
    """Non-2xx response (or transport failure) from the Jira REST API."""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        super().__init__(f"Jira API Error ({status}): {message}")

    @staticmethod
    def extract_message(payload: Any, reason: Optional[str] = None, fallback: str = "") -> str:
        """
        Pick the most useful message out of a Jira error body:
        errorMessages[0], then the field `errors` map, then the HTTP reason,
        then whatever the transport said.
        """
        if isinstance(payload, dict):
            messages = payload.get("errorMessages") or []
            if messages:
                return str(messages[0])
            errors = payload.get("errors")
            if errors:
                return json.dumps(errors)
        if reason:
            return reason
        return fallback


class LLMError(AssistantError):
    pass


class IssueNotFound(AssistantError):
    """The resolver could not map free text to an issue key."""

    def __init__(self, target: Optional[str]):
        self.target = target or ""
        super().__init__(f"No issue matches {self.target!r}")


class ProjectUnavailable(AssistantError):
    def __init__(self, project_key: str):
        self.project_key = project_key
        super().__init__("Project not found or no permission to create issues")
