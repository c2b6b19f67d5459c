import logging
from typing import Sequence

from jira_assistant.llm import LLMClient
from jira_assistant.models import IssueSummary, SearchResult
from jira_assistant.prompts import summary_prompt

logger = logging.getLogger(__name__)


def render_issue(issue: IssueSummary) -> str:
    assignee = issue.assignee or "Unassigned"
    priority = issue.priority or "No Priority"
    return (
        f"{issue.key}: {issue.summary}\n"
        f"   Type: {issue.type} | Status: {issue.status} | Priority: {priority} | Assignee: {assignee}"
    )


def render_issues(issues: Sequence[IssueSummary]) -> str:
    return "\n\n".join(render_issue(issue) for issue in issues)


def no_results_message(query: str, project_key: str) -> str:
    return f'I couldn\'t find any issues matching "{query}" in the {project_key} project.'


class ResultFormatter:
    """Turns search results into a reply; a failing model only makes the reply plainer."""

    def __init__(self, project_key: str, llm: LLMClient):
        self.project_key = project_key
        self.llm = llm

    async def format(self, query: str, result: SearchResult) -> str:
        if not result.issues:
            return no_results_message(query, self.project_key)

        issues_text = render_issues(result.issues)
        try:
            return await self.llm.complete(summary_prompt(query, issues_text), max_tokens=500, temperature=0.3)
        except Exception as e:
            logger.warning("Error formatting results, sending plain listing: %s", e)
            return f"Found {len(result.issues)} issues:\n\n{issues_text}"
