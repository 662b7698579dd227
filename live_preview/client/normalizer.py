"""
Link-target normalizer: opens links inside preview content in a new tab.

Mirrors the client behaviour shipped in ``static/live_preview.js`` so pages
assembled server-side and patched documents end up in the same state.
"""

from typing import Union

from bs4 import BeautifulSoup, Tag

NEW_TAB_CONTAINERS = (
    ".c-field--name-field-paragraph-body",
    ".c-field--name-field-learning-content",
    ".c-field--name-field-tags",
)


def normalize(scope: Union[Tag, str]) -> Union[Tag, str]:
    """
    Set ``target="_blank"`` on every anchor inside the new-tab containers.

    ``scope`` is a parsed element (modified in place and returned) or a
    markup string (a normalized string is returned). Repeated calls leave
    the same attributes behind.
    """
    if isinstance(scope, str):
        soup = BeautifulSoup(scope, "html.parser")
        normalize(soup)
        return str(soup)

    for container in NEW_TAB_CONTAINERS:
        for anchor in scope.select(f"{container} a"):
            anchor["target"] = "_blank"
    return scope
