"""Tests for the link target normalizer and the client command dispatcher."""

import pytest
from bs4 import BeautifulSoup

from live_preview.client.dispatcher import CommandDispatcher
from live_preview.client.normalizer import normalize
from live_preview.errors import UnknownCommandError
from live_preview.models.ajax import AjaxResponse, InvokeCommand, ReplaceCommand

PAGE = """
<div class="c-field--name-field-paragraph-body"><p><a href="/a">a</a></p></div>
<div class="c-field--name-field-learning-content"><a href="/b">b</a></div>
<div class="c-field--name-field-tags"><a href="/c">c</a><a href="/d" target="_self">d</a></div>
<div class="c-field--name-body"><a href="/e">e</a></div>
<a href="/f">f</a>
"""


def _targets(soup: BeautifulSoup) -> dict:
    return {a["href"]: a.get("target") for a in soup.find_all("a")}


class TestNormalize:
    def test_only_anchors_in_new_tab_containers(self):
        soup = BeautifulSoup(PAGE, "html.parser")
        normalize(soup)
        assert _targets(soup) == {
            "/a": "_blank",
            "/b": "_blank",
            "/c": "_blank",
            "/d": "_blank",
            "/e": None,
            "/f": None,
        }

    def test_idempotent(self):
        once = normalize(PAGE)
        twice = normalize(once)
        assert once == twice

    def test_scope_limits_changes(self):
        soup = BeautifulSoup(PAGE, "html.parser")
        normalize(soup.select_one(".c-field--name-field-learning-content"))
        targets = _targets(soup)
        assert targets["/b"] == "_blank"
        assert targets["/a"] is None
        assert targets["/c"] is None

    def test_string_in_string_out(self):
        result = normalize('<div class="c-field--name-field-tags"><a href="/t">t</a></div>')
        assert isinstance(result, str)
        assert 'target="_blank"' in result


class TestCommandDispatcher:
    def test_runs_on_load(self):
        dispatcher = CommandDispatcher(PAGE)
        assert _targets(dispatcher.document)["/a"] == "_blank"

    def test_replace_then_invoke(self):
        dispatcher = CommandDispatcher(
            '<main><div class="region">old</div><div class="region">old</div></main>'
        )
        payload = (
            '<div class="region"><div class="c-field--name-field-tags">'
            '<a href="/new">new</a></div></div>'
        )
        response = AjaxResponse()
        response.add_command(ReplaceCommand(selector=".region", payload=payload))
        response.add_command(InvokeCommand(method="set_target_new"))

        dispatcher.apply(response)

        regions = dispatcher.select(".region")
        assert len(regions) == 2
        assert "old" not in dispatcher.html()
        assert all(a["target"] == "_blank" for a in dispatcher.select("a"))

    def test_replace_without_match_is_a_no_op(self):
        dispatcher = CommandDispatcher("<main></main>")
        dispatcher.apply(AjaxResponse(commands=[
            ReplaceCommand(selector=".missing", payload="<p>x</p>"),
        ]))
        assert dispatcher.html() == "<main></main>"

    def test_invoke_on_selector(self):
        dispatcher = CommandDispatcher("<main></main>")
        seen = []
        dispatcher.register_method("record", lambda scope, *args: seen.append((scope.name, args)))
        dispatcher.apply(AjaxResponse(commands=[
            InvokeCommand(selector="main", method="record", args=[1]),
        ]))
        assert seen == [("main", (1,))]

    def test_unknown_method(self):
        dispatcher = CommandDispatcher("<main></main>")
        with pytest.raises(UnknownCommandError):
            dispatcher.apply(AjaxResponse(commands=[InvokeCommand(method="nope")]))
