"""Patch Response: ordered client commands applied without a page reload."""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ReplaceCommand(BaseModel):
    """Replace every element matching ``selector`` with ``payload``."""

    command: Literal["replace"] = "replace"
    selector: str
    payload: str


class InvokeCommand(BaseModel):
    """Call a named client method, on ``selector`` or the whole document."""

    command: Literal["invoke"] = "invoke"
    selector: Optional[str] = None
    method: str
    args: List[Any] = []


AjaxCommand = Union[ReplaceCommand, InvokeCommand]


class AjaxResponse(BaseModel):
    commands: List[AjaxCommand] = Field(default_factory=list)

    def add_command(self, command: AjaxCommand) -> "AjaxResponse":
        self.commands.append(command)
        return self

    def to_json(self) -> List[dict]:
        return [c.model_dump(mode="json") for c in self.commands]
