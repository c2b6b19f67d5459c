import pytest

from jira_assistant.cli import build_parser


def test_query_option():
    args = build_parser().parse_args(["--query", "high priority bugs"])
    assert args.query == "high priority bugs"
    assert not args.check


def test_defaults_to_interactive():
    args = build_parser().parse_args([])
    assert args.query is None
    assert args.log_level is None


def test_check_flag():
    assert build_parser().parse_args(["--check"]).check


def test_bare_words_are_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["high", "priority", "bugs"])
