"""Render output produced by the view builder and decorated by callers."""

from typing import List

from markupsafe import Markup, escape
from pydantic import BaseModel


CACHE_PERMANENT = -1


class RenderArray(BaseModel):
    """Rendered markup plus the assets, classes and cache policy it carries."""

    markup: str
    libraries: List[str] = []
    classes: List[str] = []
    cache_max_age: int = CACHE_PERMANENT

    def attach_library(self, library: str) -> None:
        if library not in self.libraries:
            self.libraries.append(library)

    def add_class(self, css_class: str) -> None:
        if css_class not in self.classes:
            self.classes.append(css_class)

    def render(self) -> str:
        """Final markup, wrapped in a div when classes were added."""
        if not self.classes:
            return self.markup
        class_attr = escape(" ".join(self.classes))
        return str(Markup('<div class="{}">{}</div>').format(
            class_attr, Markup(self.markup)
        ))
