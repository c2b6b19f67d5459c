import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from jira_assistant.config import Settings
from jira_assistant.errors import IssueNotFound, JiraError, ProjectUnavailable
from jira_assistant.jira_client import JiraClient
from jira_assistant.models import (
    CreatedIssue,
    IssueDetails,
    IssueType,
    JiraUser,
    UpdateOutcome,
    priority_id,
)
from jira_assistant.resolver import EntityResolver

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "New Issue"
DEFAULT_DESCRIPTION = "No description provided"


def adf_document(text: str) -> Dict[str, Any]:
    """Wrap plain text in a single-paragraph Atlassian Document Format body."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }


def pick_issue_type(issue_types: Sequence[IssueType], wanted: Optional[str]) -> IssueType:
    """Case-insensitive name match, else the first type the project reports."""
    if wanted:
        for issue_type in issue_types:
            if issue_type.name.lower() == wanted.lower():
                return issue_type
    return issue_types[0]


def find_transition(transitions: List[Dict[str, Any]], target_status: str) -> Optional[Dict[str, Any]]:
    wanted = target_status.lower()
    for transition in transitions:
        name = (transition.get("name") or "").lower()
        to_name = ((transition.get("to") or {}).get("name") or "").lower()
        if wanted in name or to_name == wanted:
            return transition
    return None


class MutationExecutor:
    """Create, update, transition and delete issues in the configured project."""

    def __init__(self, settings: Settings, jira: JiraClient, resolver: EntityResolver):
        self.settings = settings
        self.jira = jira
        self.resolver = resolver

    async def create(self, details: IssueDetails, users: Optional[Sequence[JiraUser]] = None) -> CreatedIssue:
        logger.info("Creating issue with details: %s", details.model_dump(exclude_none=True))

        # Users and createmeta are independent; fetch together
        if users is None and details.assignee:
            users, issue_types = await asyncio.gather(
                self.resolver.project_users(),
                self.jira.issue_types(),
            )
        else:
            issue_types = await self.jira.issue_types()

        assignee = await self.resolver.resolve_user(details.assignee, users or [])

        if not issue_types:
            raise ProjectUnavailable(self.settings.project_key)

        issue_type = pick_issue_type(issue_types, details.type)
        logger.info("Using issue type: %s (%s)", issue_type.name, issue_type.id)

        summary = details.summary or DEFAULT_SUMMARY
        fields: Dict[str, Any] = {
            "project": {"key": self.settings.project_key},
            "summary": summary,
            "issuetype": {"id": issue_type.id},
        }

        if issue_type.supports("description"):
            fields["description"] = adf_document(details.description or DEFAULT_DESCRIPTION)

        if assignee and issue_type.supports("assignee"):
            fields["assignee"] = {"accountId": assignee.account_id}

        priority = priority_id(details.priority)
        if priority and issue_type.supports("priority"):
            fields["priority"] = {"id": priority}

        result = await self.jira.create_issue(fields)
        key = result["key"]
        return CreatedIssue(key=key, summary=summary, url=self.settings.browse_url(key))

    async def update(self, target: Optional[str], details: IssueDetails,
                     users: Optional[Sequence[JiraUser]] = None) -> UpdateOutcome:
        key = await self.resolver.resolve_issue(target)
        if not key:
            raise IssueNotFound(target)

        fields: Dict[str, Any] = {}
        if details.summary:
            fields["summary"] = details.summary
        if details.description:
            fields["description"] = adf_document(details.description)
        if details.assignee:
            assignee = await self.resolver.resolve_user(details.assignee, users)
            if assignee:
                fields["assignee"] = {"accountId": assignee.account_id}
        priority = priority_id(details.priority)
        if priority:
            fields["priority"] = {"id": priority}

        if fields:
            await self.jira.update_issue(key, fields)
        else:
            logger.info("No field changes for %s", key)

        transitioned = None
        if details.status:
            transitioned = await self.transition(key, details.status)

        return UpdateOutcome(
            key=key,
            url=self.settings.browse_url(key),
            fields_updated=sorted(fields),
            requested_status=details.status,
            transitioned=transitioned,
        )

    async def transition(self, key: str, target_status: str) -> bool:
        """Move `key` toward `target_status`. False when no transition fits or Jira refuses."""
        try:
            transitions = await self.jira.transitions(key)
            match = find_transition(transitions, target_status)
            if match is None:
                logger.warning("No transition on %s matches %r", key, target_status)
                return False
            await self.jira.apply_transition(key, match["id"])
        except JiraError as e:
            logger.warning("Transition of %s to %r failed: %s", key, target_status, e)
            return False
        return True

    async def delete(self, target: Optional[str]) -> str:
        key = await self.resolver.resolve_issue(target)
        if not key:
            raise IssueNotFound(target)
        await self.jira.delete_issue(key)
        return key
