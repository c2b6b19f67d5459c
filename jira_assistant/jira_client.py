import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp

from jira_assistant.config import Settings
from jira_assistant.errors import JiraError
from jira_assistant.models import IssueType, JiraUser, SearchResult

logger = logging.getLogger(__name__)

SEARCH_FIELDS = "key,summary,status,assignee,priority,issuetype,created,updated,description"
MAX_RESULTS = 20
MAX_USERS = 50


class JiraClient:
    """
    Authenticated gateway to the Jira Cloud REST API (v3).

    Every call goes through `request`; a non-2xx answer becomes a JiraError.
    The aiohttp session is opened lazily on first use so the client can be
    built outside of a running event loop.
    """

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None):
        self.settings = settings
        self.base_url = settings.api_base
        self.auth = aiohttp.BasicAuth(settings.jira_email, settings.jira_token)
        self.headers = {"Accept": "application/json", "Content-Type": "application/json"}
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(auth=self.auth, headers=self.headers)
        return self._session

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def request(self, path: str, method: str = "GET", body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path}"
        logger.info("%s %s", method, url)
        if body is not None:
            logger.debug("Request data: %s", json.dumps(body, indent=2))

        session = self._get_session()
        try:
            async with session.request(method, url, json=body) as response:
                payload = await _read_payload(response)
                if not 200 <= response.status < 300:
                    message = JiraError.extract_message(payload, response.reason)
                    logger.error("Jira API error %s on %s %s: %s", response.status, method, url, payload)
                    raise JiraError(response.status, message)
                return payload
        except aiohttp.ClientError as e:
            logger.error("Jira transport error on %s %s: %s", method, url, e)
            raise JiraError(None, str(e)) from e

    # -- typed endpoints -------------------------------------------------

    async def myself(self) -> Dict[str, Any]:
        return await self.request("myself")

    async def project(self) -> Dict[str, Any]:
        return await self.request(f"project/{self.settings.project_key}")

    async def search(self, jql: str, fields: str = SEARCH_FIELDS, max_results: int = MAX_RESULTS) -> SearchResult:
        logger.info("Searching with JQL: %s", jql)
        path = f"search?jql={quote(jql, safe='')}&fields={fields}&maxResults={max_results}"
        data = await self.request(path) or {}
        result = SearchResult.from_api(data)
        logger.info("Search returned %d issues", len(result.issues))
        return result

    async def count_issues(self) -> int:
        jql = f'project="{self.settings.project_key}"'
        data = await self.request(f"search?jql={quote(jql, safe='')}&maxResults=1") or {}
        return data.get("total") or 0

    async def assignable_users(self) -> List[JiraUser]:
        data = await self.request(
            f"user/assignable/search?project={self.settings.project_key}&maxResults={MAX_USERS}"
        )
        return [JiraUser.model_validate(u) for u in data or [] if u.get("accountId")]

    async def issue_types(self) -> List[IssueType]:
        """Issue types the project accepts on create, with their field schemas."""
        data = await self.request(
            f"issue/createmeta?projectKeys={self.settings.project_key}&expand=projects.issuetypes.fields"
        ) or {}
        projects = data.get("projects") or []
        if not projects:
            return []
        return [IssueType.from_api(t) for t in projects[0].get("issuetypes") or []]

    async def create_issue(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("issue", "POST", {"fields": fields})

    async def update_issue(self, key: str, fields: Dict[str, Any]) -> Any:
        return await self.request(f"issue/{key}", "PUT", {"fields": fields})

    async def delete_issue(self, key: str) -> Any:
        return await self.request(f"issue/{key}", "DELETE")

    async def transitions(self, key: str) -> List[Dict[str, Any]]:
        data = await self.request(f"issue/{key}/transitions") or {}
        return data.get("transitions") or []

    async def apply_transition(self, key: str, transition_id: str) -> Any:
        return await self.request(f"issue/{key}/transitions", "POST", {"transition": {"id": transition_id}})


async def _read_payload(response: aiohttp.ClientResponse) -> Any:
    # 204s and DELETEs come back empty
    text = await response.text()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text
