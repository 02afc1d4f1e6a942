import pytest

from motherduck_mcp import catalog
from motherduck_mcp.errors import UnknownPrompt, UnsupportedResource


def test_single_prompt_listed():
    prompts = catalog.list_prompts()
    assert [p["name"] for p in prompts] == ["duckdb-motherduck-initial-prompt"]


def test_get_prompt_returns_template_verbatim():
    prompt = catalog.get_prompt("duckdb-motherduck-initial-prompt")
    assert len(prompt["messages"]) == 1
    message = prompt["messages"][0]
    assert message["role"] == "user"
    assert message["content"] == {"type": "text", "text": catalog.PROMPT_TEMPLATE}


def test_unknown_prompt():
    with pytest.raises(UnknownPrompt):
        catalog.get_prompt("something-else")


def test_resources_are_empty_and_unreadable():
    assert catalog.list_resources() == []
    for uri in ["file:///tmp/x", "md:my_db", ""]:
        with pytest.raises(UnsupportedResource):
            catalog.read_resource(uri)
