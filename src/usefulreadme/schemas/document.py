"""POD document tree models."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Text(BaseModel):
    """An ordinary paragraph; may contain formatting codes."""

    kind: Literal["text"] = "text"
    content: str


class Verbatim(BaseModel):
    """A verbatim (code) paragraph, leading whitespace preserved."""

    kind: Literal["verbatim"] = "verbatim"
    content: str


class Command(BaseModel):
    """A command paragraph with no structural meaning, e.g. ``=encoding``."""

    kind: Literal["command"] = "command"
    command: str
    content: str = ""


class Heading(BaseModel):
    """A ``=headN`` section owning the nodes that follow it."""

    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    title: str
    children: list[DocumentNode] = Field(default_factory=list)


class ListItem(BaseModel):
    """An ``=item`` entry; ``content`` is the paragraph emitted with it, if any."""

    kind: Literal["item"] = "item"
    marker: str = "*"
    content: str | None = None


class ListBlock(BaseModel):
    """An ``=over``/``=back`` list region."""

    kind: Literal["list"] = "list"
    indent: str = "4"
    children: list[DocumentNode] = Field(default_factory=list)


class Region(BaseModel):
    """A ``=begin``/``=end`` (or ``=for``) region.

    ``is_pod`` is true when the format name was written with a leading colon,
    in which case the children are POD and not raw data.
    """

    kind: Literal["region"] = "region"
    name: str
    is_pod: bool = False
    children: list[DocumentNode] = Field(default_factory=list)


DocumentNode = Annotated[
    Union[Text, Verbatim, Command, Heading, ListItem, ListBlock, Region],
    Field(discriminator="kind"),
]

Heading.model_rebuild()
ListBlock.model_rebuild()
Region.model_rebuild()
