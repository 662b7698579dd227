"""Resolution context: where the display block is being rendered."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from live_preview.models.entity import Entity


class CreatingContext(BaseModel):
    """The editor is on the "create a new <node_type>" page."""

    kind: Literal["creating"] = "creating"
    node_type: str


class ViewingContext(BaseModel):
    """Any other page; ``entity`` is the page's entity, if it has one."""

    kind: Literal["viewing"] = "viewing"
    entity: Optional[Entity] = None


ResolutionContext = Annotated[
    Union[CreatingContext, ViewingContext], Field(discriminator="kind")
]
