"""
End-to-end request handling: classify, then search or mutate, then reply.

`JiraAssistant.handle` is the only entry point a chat transport needs; it
always returns a printable string and never raises.
"""
import logging
from typing import Optional

from jira_assistant.config import Settings
from jira_assistant.errors import IssueNotFound
from jira_assistant.formatter import ResultFormatter
from jira_assistant.intent import IntentClassifier
from jira_assistant.jira_client import JiraClient
from jira_assistant.jql import QueryTranslator
from jira_assistant.llm import LLMClient
from jira_assistant.models import ConnectionReport, IntentKind, QueryIntent
from jira_assistant.mutations import MutationExecutor
from jira_assistant.resolver import EntityResolver

logger = logging.getLogger(__name__)

VERBS = {
    IntentKind.CREATE: "creating",
    IntentKind.UPDATE: "updating",
    IntentKind.DELETE: "deleting",
}

HELP_TEXT = """Hi! I can help you with Jira tickets. Here's what I can do:

**📖 Read Operations:**
• "show me bugs assigned to john"
• "what tasks are in progress?"
• "high priority issues"
• "find issues about login problems"

**✏️ Write Operations:**
• "create a bug for login issue assigned to sarah"
• "update {key}-123 priority to high"
• "mark {key}-456 as done"
• "delete the test issue"
• "assign the shopping cart bug to mike"

**🔧 Debug Commands:**
• "test connection" - Check if Jira connection is working

Ask me anything!"""


def not_found_message(target: Optional[str]) -> str:
    return (
        f'❌ I couldn\'t find an issue matching "{target or ""}". '
        "Please be more specific or provide the issue key."
    )


def render_connection_report(report: ConnectionReport, project_key: str) -> str:
    if report.success:
        return (
            "✅ **Jira Connection Test Passed!**\n"
            f"👤 Authenticated as: {report.user}\n"
            f"📁 Project: {report.project}\n"
            f"📊 Total issues in project: {report.total_issues}"
        )
    return (
        "❌ **Jira Connection Test Failed!**\n"
        f"Error: {report.error}\n\n"
        "Please check:\n"
        "- JIRA_TOKEN is valid and not expired\n"
        "- JIRA_EMAIL is correct\n"
        "- JIRA_DOMAIN is accessible\n"
        f"- User has permission to access project {project_key}"
    )


def is_debug_command(text: str) -> bool:
    lowered = text.lower()
    return "test connection" in lowered or "debug" in lowered


class JiraAssistant:
    def __init__(
        self,
        settings: Settings,
        jira: JiraClient,
        classifier: IntentClassifier,
        translator: QueryTranslator,
        resolver: EntityResolver,
        executor: MutationExecutor,
        formatter: ResultFormatter,
    ):
        self.settings = settings
        self.jira = jira
        self.classifier = classifier
        self.translator = translator
        self.resolver = resolver
        self.executor = executor
        self.formatter = formatter

    @classmethod
    def build(cls, settings: Settings, jira: Optional[JiraClient] = None,
              llm: Optional[LLMClient] = None) -> "JiraAssistant":
        jira = jira or JiraClient(settings)
        llm = llm or LLMClient(settings)
        resolver = EntityResolver(settings, jira)
        return cls(
            settings=settings,
            jira=jira,
            classifier=IntentClassifier(llm),
            translator=QueryTranslator(settings, llm),
            resolver=resolver,
            executor=MutationExecutor(settings, jira, resolver),
            formatter=ResultFormatter(settings.project_key, llm),
        )

    async def close(self):
        await self.jira.close()

    async def respond(self, text: str) -> str:
        """Reply to a mention-stripped chat message, including help and debug commands."""
        text = (text or "").strip()
        if not text:
            return HELP_TEXT.format(key=self.settings.project_key)
        if is_debug_command(text):
            report = await self.check_connection()
            return render_connection_report(report, self.settings.project_key)
        return await self.handle(text)

    async def handle(self, query: str) -> str:
        try:
            intent = await self.classifier.classify(query)
            if intent.kind is IntentKind.READ:
                return await self.handle_read(query)
            return await self.handle_write(intent)
        except Exception as e:
            logger.exception("Error handling query")
            return f"Sorry, I encountered an error while processing your request: {e}"

    async def handle_read(self, query: str) -> str:
        logger.info("Processing query: %r", query)
        try:
            jql = await self.translator.translate(query)
            result = await self.jira.search(jql)
            return await self.formatter.format(query, result)
        except Exception as e:
            logger.error("Error handling read query: %s", e)
            return f"Sorry, I encountered an error while searching Jira: {e}"

    async def handle_write(self, intent: QueryIntent) -> str:
        details = intent.details
        logger.info("Processing %s operation: %s", intent.kind.value, details.model_dump(exclude_none=True))

        if intent.kind not in VERBS:
            return f"❌ Unknown operation: {intent.raw_operation or intent.kind.value}"

        try:
            if intent.kind is IntentKind.CREATE:
                created = await self.executor.create(details)
                return (
                    f"✅ Created new issue: **{created.key}**\n"
                    f"📝 Summary: {created.summary}\n"
                    f"🔗 Link: {created.url}"
                )

            if intent.kind is IntentKind.UPDATE:
                outcome = await self.executor.update(details.target, details)
                message = f"✅ Updated issue: **{outcome.key}**\n🔗 Link: {outcome.url}"
                if outcome.transitioned is False:
                    message += f'\n⚠️ Couldn\'t move it to "{outcome.requested_status}"; no matching transition.'
                return message

            key = await self.executor.delete(details.target)
            return f"✅ Deleted issue: **{key}**"
        except IssueNotFound as e:
            return not_found_message(e.target)
        except Exception as e:
            logger.error("Error handling %s operation: %s", intent.kind.value, e)
            return f"❌ Sorry, I encountered an error while {VERBS[intent.kind]} the issue: {e}"

    async def check_connection(self) -> ConnectionReport:
        logger.info("Testing Jira connection...")
        try:
            myself = await self.jira.myself()
            logger.info("Authenticated as: %s %s", myself.get("displayName"), myself.get("emailAddress"))
            project = await self.jira.project()
            logger.info("Project access OK: %s", project.get("name"))
            total = await self.jira.count_issues()
            logger.info("Search access OK, total issues: %s", total)
        except Exception as e:
            logger.error("Jira connection test failed: %s", e)
            return ConnectionReport(success=False, error=str(e))

        return ConnectionReport(
            success=True,
            user=myself.get("displayName"),
            project=project.get("name"),
            total_issues=total,
        )
