import logging
import re

from jira_assistant.config import Settings
from jira_assistant.llm import LLMClient
from jira_assistant.prompts import jql_prompt

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"^```(?:jql|sql)?\s*|\s*```$", re.IGNORECASE)
ORDER_BY_RE = re.compile(r"\border\s+by\b", re.IGNORECASE)


def jql_quote(text: str) -> str:
    """Quote free text for use as a JQL string literal."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def clean_jql(text: str) -> str:
    text = FENCE_RE.sub("", text.strip()).strip()
    if text[:4].lower() == "jql:":
        text = text[4:].strip()
    return text.strip("`").strip()


def _group_spans_all(text: str) -> bool:
    """True when the '(' opening `text` is closed by its last character."""
    depth = 0
    quote = None
    escaped = False
    for i, ch in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
    return False


def split_order_by(jql: str):
    match = ORDER_BY_RE.search(jql)
    if not match:
        return jql.strip(), ""
    return jql[:match.start()].strip(), jql[match.start():].strip()


def is_scoped(where: str, project_key: str) -> bool:
    """
    A filter is scoped only when it is the bare project predicate or the
    project predicate ANDed with one parenthesised group covering the rest.
    """
    pattern = rf'^project\s*=\s*"?{re.escape(project_key)}"?(?:\s+AND\s+(\(.*\)))?$'
    match = re.match(pattern, where, re.IGNORECASE | re.DOTALL)
    if not match:
        return False
    group = match.group(1)
    return group is None or _group_spans_all(group)


def ensure_project_filter(jql: str, project_key: str) -> str:
    """
    Make sure the query is scoped to our project. Anything the model wrote is
    kept but ANDed behind the project predicate; ORDER BY stays last.
    """
    where, order = split_order_by(jql)
    if is_scoped(where, project_key):
        return jql

    scoped = f'project = "{project_key}"'
    if where:
        scoped = f"{scoped} AND ({where})"
    if order:
        scoped = f"{scoped} {order}"
    return scoped


class QueryTranslator:
    def __init__(self, settings: Settings, llm: LLMClient):
        self.project_key = settings.project_key
        self.llm = llm

    async def translate(self, query: str) -> str:
        raw = await self.llm.complete(jql_prompt(query, self.project_key), max_tokens=150, temperature=0.1)
        jql = ensure_project_filter(clean_jql(raw), self.project_key)
        logger.info("Generated JQL: %s", jql)
        return jql
