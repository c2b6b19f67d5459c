"""Read/write intent classification for incoming requests."""
import json
import logging
from typing import Any, Dict

from jira_assistant.llm import LLMClient
from jira_assistant.models import IntentKind, IssueDetails, QueryIntent
from jira_assistant.prompts import DETAIL_PLACEHOLDERS, intent_prompt

logger = logging.getLogger(__name__)

WRITE_KINDS = {
    "CREATE": IntentKind.CREATE,
    "UPDATE": IntentKind.UPDATE,
    "DELETE": IntentKind.DELETE,
}


def parse_json(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        # Sometimes LLM wraps JSON in code blocks
        cleaned = text.strip().replace("```json", "").replace("```", "")
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end < start:
            raise
        data = json.loads(cleaned[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("intent response is not a JSON object")
    return data


def to_intent(data: Dict[str, Any]) -> QueryIntent:
    if str(data.get("intent", "")).strip().upper() != "WRITE":
        return QueryIntent(kind=IntentKind.READ)

    details = data.get("details") or {}
    if not isinstance(details, dict):
        details = {}
    details = {
        k: v for k, v in details.items()
        if not (isinstance(v, str) and v.strip().lower() in DETAIL_PLACEHOLDERS)
    }

    operation = str(data.get("operation") or "").strip().upper()
    kind = WRITE_KINDS.get(operation, IntentKind.UNKNOWN)
    return QueryIntent(
        kind=kind,
        details=IssueDetails.model_validate(details),
        raw_operation=None if kind is not IntentKind.UNKNOWN else (operation or None),
    )


class IntentClassifier:
    """
    Asks the model whether a request reads or writes.

    Any failure (model unreachable, unparsable or malformed answer) yields a
    READ intent so the user still gets a search instead of an error.
    """

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def classify(self, query: str) -> QueryIntent:
        try:
            raw = await self.llm.complete(intent_prompt(query), max_tokens=300, temperature=0.1)
            intent = to_intent(parse_json(raw))
        except Exception as e:
            logger.warning("Intent analysis failed, defaulting to READ: %s", e)
            return QueryIntent(kind=IntentKind.READ)

        logger.info("Intent analysis: %s %s", intent.kind.value, intent.details.model_dump(exclude_none=True))
        return intent
