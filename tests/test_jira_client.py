import asyncio
from urllib.parse import unquote

from jira_assistant.errors import JiraError


def test_error_message_prefers_error_messages():
    payload = {"errorMessages": ["Issue does not exist"], "errors": {"summary": "required"}}
    assert JiraError.extract_message(payload, "Not Found") == "Issue does not exist"


def test_error_message_falls_back_to_field_errors_then_reason():
    assert JiraError.extract_message({"errorMessages": [], "errors": {"summary": "required"}}, "Bad Request") \
        == '{"summary": "required"}'
    assert JiraError.extract_message({}, "Unauthorized") == "Unauthorized"
    assert JiraError.extract_message(None, None, "connection refused") == "connection refused"


def test_jira_error_carries_status():
    err = JiraError(404, "Issue does not exist")
    assert err.status == 404
    assert str(err) == "Jira API Error (404): Issue does not exist"


def test_search_encodes_jql_and_caps_results(make_jira, raw_issue):
    jira = make_jira({("GET", "search"): {"issues": [raw_issue("AAD-1", "Login fails")], "total": 1}})

    result = asyncio.run(jira.search('project = "AAD" AND status = "In Progress"'))

    method, path, body = jira.calls[0]
    assert method == "GET"
    assert "maxResults=20" in path
    assert "fields=key,summary,status,assignee,priority,issuetype,created,updated,description" in path
    assert unquote(path.split("jql=")[1].split("&")[0]) == 'project = "AAD" AND status = "In Progress"'
    assert [i.key for i in result.issues] == ["AAD-1"]
    assert result.issues[0].assignee is None


def test_issue_types_reads_createmeta(make_jira):
    meta = {"projects": [{"issuetypes": [
        {"id": "10001", "name": "Task", "fields": {"summary": {}, "description": {}}},
        {"id": "10002", "name": "Bug", "fields": {"summary": {}, "assignee": {}, "priority": {}}},
    ]}]}
    jira = make_jira({("GET", "issue/createmeta"): meta})

    types = asyncio.run(jira.issue_types())

    assert jira.calls[0][1] == "issue/createmeta?projectKeys=AAD&expand=projects.issuetypes.fields"
    assert [t.name for t in types] == ["Task", "Bug"]
    assert types[0].supports("description")
    assert not types[0].supports("assignee")
    assert types[1].supports("priority")


def test_issue_types_empty_without_project(make_jira):
    jira = make_jira({("GET", "issue/createmeta"): {"projects": []}})
    assert asyncio.run(jira.issue_types()) == []


def test_assignable_users(make_jira):
    jira = make_jira({("GET", "user/assignable/search"): [
        {"accountId": "a1", "displayName": "Sarah Connor", "emailAddress": "sarah@acme.io"},
        {"accountId": "a2", "displayName": "Mike", "emailAddress": None},
    ]})

    users = asyncio.run(jira.assignable_users())

    assert jira.calls[0][1] == "user/assignable/search?project=AAD&maxResults=50"
    assert users[0].account_id == "a1"
    assert users[1].email_address == ""
