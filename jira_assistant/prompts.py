"""
Prompt templates for the three language-model steps.

Each template is formatted with `str.format`, so literal braces in the
JSON example are doubled.
"""

STATUSES = ("To Do", "In Progress", "Done", "Backlog")
PRIORITIES = ("Highest", "High", "Medium", "Low", "Lowest")
ISSUE_TYPES = ("Story", "Task", "Bug", "Epic")

# Choice lists shown in the intent JSON example; a model echoing one back chose nothing.
DETAIL_PLACEHOLDERS = frozenset({
    "bug|task|story|epic",
    "highest|high|medium|low|lowest",
    "to do|in progress|done",
})

JQL_PROMPT = (
    'You are a Jira Query Language (JQL) expert. Convert the following natural language query '
    'into a proper JQL query for project "{project_key}".\n\n'
    'User Query: "{query}"\n\n'
    "Guidelines:\n"
    '- Use project = "{project_key}" in all queries\n'
    "- Common fields: assignee, reporter, status, priority, type, summary, description, created, updated\n"
    "- Status values: {statuses}\n"
    "- Priority values: {priorities}\n"
    "- Issue types: {issue_types}\n"
    "- For fuzzy matching on names/summaries, use ~ operator or contains\n"
    "- Keep queries focused and relevant\n"
    "- If asking about specific people, use assignee or reporter fields\n"
    '- For date ranges, use created >= "YYYY-MM-DD" format\n\n'
    "Examples:\n"
    '- "bugs assigned to john" → project = "{project_key}" AND assignee ~ "john" AND type = Bug\n'
    '- "high priority tasks" → project = "{project_key}" AND priority = High AND type in (Task, Story)\n'
    '- "what\'s in progress" → project = "{project_key}" AND status = "In Progress"\n\n'
    "Return ONLY the JQL query, no explanations:"
)

INTENT_PROMPT = (
    "Analyze this user query and determine if it's a READ operation (searching/viewing) "
    "or WRITE operation (creating/updating/deleting).\n\n"
    'User Query: "{query}"\n\n'
    "WRITE operations keywords: create, add, make, new, update, edit, modify, change, delete, "
    "remove, close, resolve, assign, move, set status, mark as\n"
    "READ operations keywords: show, find, search, list, what, get, see, display, tell me\n\n"
    "Also extract key information if it's a WRITE operation:\n"
    "- Operation type: CREATE, UPDATE, or DELETE\n"
    "- Issue details: type, summary, description, assignee, priority, status\n"
    "- Target issue: if updating/deleting specific issue\n\n"
    "Respond with ONLY this JSON object:\n"
    "{{\n"
    '  "intent": "READ" or "WRITE",\n'
    '  "operation": "CREATE|UPDATE|DELETE" (only for WRITE),\n'
    '  "details": {{\n'
    '    "type": "Bug|Task|Story|Epic",\n'
    '    "summary": "extracted summary",\n'
    '    "description": "extracted description",\n'
    '    "assignee": "extracted assignee name",\n'
    '    "priority": "Highest|High|Medium|Low|Lowest",\n'
    '    "status": "To Do|In Progress|Done",\n'
    '    "target": "issue key or description for updates/deletes"\n'
    "  }}\n"
    "}}\n"
    "Leave out any detail the user did not mention."
)

SUMMARY_PROMPT = (
    'You are a helpful Jira assistant. The user asked: "{query}"\n\n'
    "Here are the Jira results:\n"
    "{issues}\n\n"
    "Please provide a natural, conversational summary of these results. Be concise but informative. "
    "Group similar items if relevant, highlight important information, and make it easy to read. "
    "If there are many results, summarize the key patterns.\n\n"
    "Format your response in a friendly, professional tone as if you're a team member helping out."
)


def jql_prompt(query: str, project_key: str) -> str:
    return JQL_PROMPT.format(
        query=query,
        project_key=project_key,
        statuses=", ".join(f'"{s}"' for s in STATUSES),
        priorities=", ".join(f'"{p}"' for p in PRIORITIES),
        issue_types=", ".join(ISSUE_TYPES),
    )


def intent_prompt(query: str) -> str:
    return INTENT_PROMPT.format(query=query)


def summary_prompt(query: str, issues: str) -> str:
    return SUMMARY_PROMPT.format(query=query, issues=issues)
