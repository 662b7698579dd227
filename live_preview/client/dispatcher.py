"""
Command Dispatcher: applies Patch Responses to a document.

Plays the part of the browser side: attach behaviours run when the
document loads and again after every patch, and named methods can be
invoked by ``invoke`` commands.
"""

import logging
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from live_preview.client.normalizer import normalize
from live_preview.errors import UnknownCommandError
from live_preview.models.ajax import AjaxResponse, InvokeCommand, ReplaceCommand

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """
    Holds one document. ``set_target_new`` is registered both as an attach
    behaviour and as an invokable method.
    """

    def __init__(self, markup: str):
        self.document = BeautifulSoup(markup, "html.parser")
        self._behaviors: List[Callable[[Tag], None]] = []
        self._methods: Dict[str, Callable[..., None]] = {}
        self._register_defaults()
        self.attach(self.document)

    def _register_defaults(self) -> None:
        self.register_behavior(normalize)
        self.register_method("set_target_new", normalize)

    def register_behavior(self, behavior: Callable[[Tag], None]) -> None:
        self._behaviors.append(behavior)

    def register_method(self, name: str, method: Callable[..., None]) -> None:
        self._methods[name] = method

    def attach(self, context: Tag) -> None:
        """Run every attach behaviour over ``context``."""
        for behavior in self._behaviors:
            behavior(context)

    def apply(self, response: AjaxResponse) -> None:
        """Apply each command in order."""
        for command in response.commands:
            if isinstance(command, ReplaceCommand):
                self._replace(command)
            elif isinstance(command, InvokeCommand):
                self._invoke(command)
            else:
                raise UnknownCommandError(f"Unsupported command: {command!r}")

    def _replace(self, command: ReplaceCommand) -> None:
        targets = self.document.select(command.selector)
        if not targets:
            logger.debug("No element matches %s, nothing replaced", command.selector)
        for target in targets:
            fragment = BeautifulSoup(command.payload, "html.parser")
            new_nodes = list(fragment.contents)
            for node in new_nodes:
                target.insert_before(node)
            target.decompose()
            for node in new_nodes:
                if isinstance(node, Tag):
                    self.attach(node)

    def _invoke(self, command: InvokeCommand) -> None:
        method = self._methods.get(command.method)
        if method is None:
            raise UnknownCommandError(f"Unknown client method: {command.method}")
        scopes: List[Tag] = (
            self.document.select(command.selector)
            if command.selector else [self.document]
        )
        for scope in scopes:
            method(scope, *command.args)

    def select(self, selector: str) -> List[Tag]:
        return self.document.select(selector)

    def find_one(self, selector: str) -> Optional[Tag]:
        return self.document.select_one(selector)

    def html(self) -> str:
        return str(self.document)
