import logging
import re
from typing import List, Optional, Sequence

from jira_assistant.config import Settings
from jira_assistant.errors import JiraError
from jira_assistant.jira_client import JiraClient
from jira_assistant.jql import jql_quote
from jira_assistant.models import JiraUser

logger = logging.getLogger(__name__)

ISSUE_KEY_RE = re.compile(r"^[A-Z]+-\d+$")


def resolve_user(query: Optional[str], users: Sequence[JiraUser]) -> Optional[JiraUser]:
    """
    Match free text against assignable users.

    Exact (case-insensitive) name, email or account id wins over any
    substring match on name or email; within a tier the first user in
    Jira's order wins.
    """
    if not query or not users:
        return None

    needle = query.strip().lower()
    if not needle:
        return None

    for user in users:
        if needle in (user.display_name.lower(), user.email_address.lower(), user.account_id.lower()):
            return user

    for user in users:
        if needle in user.display_name.lower() or needle in user.email_address.lower():
            return user

    return None


class EntityResolver:
    def __init__(self, settings: Settings, jira: JiraClient):
        self.project_key = settings.project_key
        self.jira = jira

    async def project_users(self) -> List[JiraUser]:
        """Assignable users, fetched fresh. An unreachable list leaves assignees unset."""
        try:
            return await self.jira.assignable_users()
        except JiraError as e:
            logger.warning("Could not load project users: %s", e)
            return []

    async def resolve_user(self, query: Optional[str], users: Optional[Sequence[JiraUser]] = None) -> Optional[JiraUser]:
        if not query:
            return None
        if users is None:
            users = await self.project_users()
        match = resolve_user(query, users)
        logger.info("Assignee %r resolved to %s", query, match.display_name if match else None)
        return match

    async def resolve_issue(self, target: Optional[str]) -> Optional[str]:
        """Issue key for `target`: returned as-is when it already is one, else the first summary hit."""
        if not target or not target.strip():
            return None

        target = target.strip()
        if ISSUE_KEY_RE.match(target):
            return target

        jql = f'project = "{self.project_key}" AND summary ~ {jql_quote(target)}'
        try:
            result = await self.jira.search(jql)
        except JiraError as e:
            # e.g. a JQL syntax error from odd characters in the text
            logger.warning("Issue search for %r failed: %s", target, e)
            return None
        if result.issues:
            return result.issues[0].key
        return None
