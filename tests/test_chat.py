from jira_assistant.chat import chunk_message, strip_mentions


def test_strip_mentions():
    assert strip_mentions("<@123> show bugs <@!456>  ") == "show bugs"
    assert strip_mentions("<@123>") == ""


def test_short_message_is_one_chunk():
    assert chunk_message("hello") == ["hello"]
    assert chunk_message("x" * 2000) == ["x" * 2000]


def test_long_message_is_split():
    chunks = chunk_message("x" * 4000)
    assert [len(c) for c in chunks] == [1900, 1900, 200]
    assert "".join(chunks) == "x" * 4000
