"""
Pydantic schema definitions for the catalog module.

``BookRecord`` mirrors one document of the Open Library search
response, keeping only the fields the results page displays. Field
aliases match the raw JSON keys (``author_name``, ``cover_i`` ...) so
a doc can be validated as-is; unknown keys are ignored.

``BookCard`` is the display projection of a record: every optional
field has already been resolved to its text or placeholder, so the
template only decides which blocks to show.

The search state is a tagged union of four small models. Only
``Loaded`` carries results and only ``Failed`` carries a message, so a
view can never be loading and failed at once, nor hold results next to
an error.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookRecord(BaseModel):
    """A single search hit as returned by ``/search.json``.

    ``title`` and ``key`` become empty strings when missing or null so
    that a sparse doc still renders. The list fields stay ``None`` when
    the catalogue omits them, which is how the card knows to show a
    placeholder or to skip the block entirely. Non-string entries inside
    those lists are dropped and a bare string is treated as a
    one-element list.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    key: str = ""
    author_names: Optional[List[str]] = Field(default=None, alias="author_name")
    first_publish_year: Optional[int] = None
    cover_id: Optional[int] = Field(default=None, alias="cover_i")
    isbn_list: Optional[List[str]] = Field(default=None, alias="isbn")
    subjects: Optional[List[str]] = Field(default=None, alias="subject")

    @field_validator("title", "key", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("author_names", "isbn_list", "subjects", mode="before")
    @classmethod
    def _only_strings(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str)]
        return value


class BookCard(BaseModel):
    """What the results grid shows for one book."""

    model_config = ConfigDict(frozen=True)

    title: str
    detail_url: str
    cover_url: Optional[str] = None
    authors: str
    year: str
    isbn: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"


class Loaded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loaded"] = "loaded"
    results: List[BookRecord] = Field(default_factory=list)


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    message: str


SearchState = Union[Idle, Loading, Loaded, Failed]
