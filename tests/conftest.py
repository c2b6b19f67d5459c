from unittest.mock import AsyncMock

import pytest

from jira_assistant.config import Settings
from jira_assistant.jira_client import JiraClient
from jira_assistant.llm import LLMClient


@pytest.fixture
def settings():
    return Settings(
        jira_domain="https://acme.atlassian.net",
        jira_email="bot@acme.io",
        jira_token="token",
        project_key="AAD",
        openai_api_key="sk-test",
    )


@pytest.fixture
def make_jira(settings):
    """
    JiraClient whose `request` answers from a routing table keyed by
    (method, path prefix). Every call is recorded on `client.calls`.
    """
    def factory(routes=None):
        routes = routes or {}
        client = JiraClient(settings)
        client.calls = []

        async def answer(path, method="GET", body=None):
            client.calls.append((method, path, body))
            for (m, prefix), response in routes.items():
                if m == method and path.startswith(prefix):
                    if isinstance(response, Exception):
                        raise response
                    return response
            raise AssertionError(f"unexpected request {method} {path}")

        client.request = AsyncMock(side_effect=answer)
        return client

    return factory


@pytest.fixture
def llm(settings):
    client = LLMClient(settings)
    client.complete = AsyncMock()
    return client


def issue(key, summary="", status="To Do", priority=None, assignee=None, type_="Task"):
    return {
        "key": key,
        "fields": {
            "summary": summary,
            "status": {"name": status},
            "priority": {"name": priority} if priority else None,
            "assignee": {"displayName": assignee} if assignee else None,
            "issuetype": {"name": type_},
        },
    }


@pytest.fixture
def raw_issue():
    return issue
