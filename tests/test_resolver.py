import asyncio

from jira_assistant.errors import JiraError
from jira_assistant.models import JiraUser
from jira_assistant.resolver import EntityResolver, resolve_user


def user(account_id, name, email=""):
    return JiraUser(accountId=account_id, displayName=name, emailAddress=email)


def test_exact_match_beats_earlier_substring_match():
    users = [user("a1", "Jon Lee"), user("a2", "Jon")]
    assert resolve_user("jon", users).account_id == "a2"


def test_substring_match_takes_first_in_order():
    users = [user("a1", "Jon Lee"), user("a2", "Jonathan")]
    assert resolve_user("jon", users).account_id == "a1"


def test_exact_match_on_email_and_account_id():
    users = [user("a1", "Sarah Connor", "sarah@acme.io"), user("xyz", "Mike")]
    assert resolve_user("SARAH@ACME.IO", users).account_id == "a1"
    assert resolve_user("XYZ", users).account_id == "xyz"


def test_substring_match_on_email():
    users = [user("a1", "S. Connor", "sarah.connor@acme.io")]
    assert resolve_user("sarah", users).account_id == "a1"


def test_no_match():
    users = [user("a1", "Sarah Connor")]
    assert resolve_user("mike", users) is None
    assert resolve_user("", users) is None
    assert resolve_user(None, users) is None
    assert resolve_user("sarah", []) is None


def test_issue_key_needs_no_search(settings, make_jira):
    jira = make_jira()
    resolver = EntityResolver(settings, jira)
    assert asyncio.run(resolver.resolve_issue("AAD-42")) == "AAD-42"
    assert jira.calls == []


def test_free_text_searches_summary(settings, make_jira, raw_issue):
    jira = make_jira({("GET", "search"): {"issues": [raw_issue("AAD-7"), raw_issue("AAD-3")]}})
    resolver = EntityResolver(settings, jira)

    assert asyncio.run(resolver.resolve_issue("login bug")) == "AAD-7"
    assert len(jira.calls) == 1
    assert "summary%20~%20%22login%20bug%22" in jira.calls[0][1]
    assert "project%20%3D%20%22AAD%22" in jira.calls[0][1]


def test_free_text_without_hits(settings, make_jira):
    jira = make_jira({("GET", "search"): {"issues": []}})
    assert asyncio.run(EntityResolver(settings, jira).resolve_issue("login bug")) is None


def test_empty_target_is_unresolved(settings, make_jira):
    jira = make_jira()
    assert asyncio.run(EntityResolver(settings, jira).resolve_issue(None)) is None
    assert asyncio.run(EntityResolver(settings, jira).resolve_issue("  ")) is None
    assert jira.calls == []


def test_user_fetch_failure_gives_no_candidates(settings, make_jira):
    jira = make_jira({("GET", "user/assignable/search"): JiraError(403, "Forbidden")})
    assert asyncio.run(EntityResolver(settings, jira).project_users()) == []


def test_failed_summary_search_is_unresolved(settings, make_jira):
    jira = make_jira({("GET", "search"): JiraError(400, "Error in the JQL Query")})
    assert asyncio.run(EntityResolver(settings, jira).resolve_issue("fix [auth")) is None
    assert len(jira.calls) == 1
