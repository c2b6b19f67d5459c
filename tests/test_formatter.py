import asyncio

from jira_assistant.formatter import ResultFormatter, render_issue
from jira_assistant.models import IssueSummary, SearchResult


def test_empty_results_message(llm):
    reply = asyncio.run(ResultFormatter("AAD", llm).format("bugs assigned to nobody", SearchResult()))
    assert reply == 'I couldn\'t find any issues matching "bugs assigned to nobody" in the AAD project.'
    llm.complete.assert_not_awaited()


def test_render_issue_defaults():
    text = render_issue(IssueSummary(key="AAD-1", summary="Login fails", status="To Do", type="Bug"))
    assert text == (
        "AAD-1: Login fails\n"
        "   Type: Bug | Status: To Do | Priority: No Priority | Assignee: Unassigned"
    )


def test_model_summary_is_returned(llm):
    llm.complete.return_value = "You have one open bug."
    result = SearchResult(issues=[IssueSummary(key="AAD-1", summary="Login fails", assignee="Sarah")])

    reply = asyncio.run(ResultFormatter("AAD", llm).format("open bugs", result))

    assert reply == "You have one open bug."
    prompt = llm.complete.await_args.args[0]
    assert '"open bugs"' in prompt
    assert "AAD-1: Login fails" in prompt


def test_model_failure_falls_back_to_listing(llm):
    llm.complete.side_effect = RuntimeError("model down")
    result = SearchResult(issues=[
        IssueSummary(key="AAD-1", summary="Login fails", priority="High"),
        IssueSummary(key="AAD-2", summary="Logout fails"),
    ])

    reply = asyncio.run(ResultFormatter("AAD", llm).format("login", result))

    assert reply.startswith("Found 2 issues:\n\nAAD-1: Login fails")
    assert "AAD-2: Logout fails" in reply
