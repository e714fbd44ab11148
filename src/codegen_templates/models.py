import re
from enum import IntFlag
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ReplaceFlags(IntFlag):
    NONE = 0
    REMOVE_IF_NULL = 1


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


class DefineDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    name: str


class ReplaceDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    pattern: str
    variable_name: str
    flags: ReplaceFlags = ReplaceFlags.NONE


class ForeachDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    variable_name: str
    collection_name: str


class InsertDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    variable_name: str


Directive = DefineDirective | ReplaceDirective | ForeachDirective | InsertDirective


# ---------------------------------------------------------------------------
# Regions and markers
# ---------------------------------------------------------------------------


class ForeachRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["foreach"] = "foreach"
    variable_name: str
    collection_name: str


class ReplaceRegion(BaseModel):
    """A replace region and the ranges its pattern matched.

    ``replace_ranges`` holds ``(range_index, replacement_index)`` pairs. The
    loader collects them while the region is open and records the region once
    it closes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["replace"] = "replace"
    variable_name: str
    replace_ranges: tuple[tuple[int, int], ...] = ()


class InsertRegion(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["insert"] = "insert"
    indentation: int
    variable_name: str


Region = Annotated[ForeachRegion | ReplaceRegion | InsertRegion, Field(discriminator="kind")]


class RegionMarker(BaseModel):
    """A flat begin/end event.

    Indices point into the template's ranges and into its running count of
    replace ranges at the moment the marker was recorded. End markers carry
    no region.
    """

    model_config = ConfigDict(frozen=True)

    range_index: int
    replace_range_index: int
    region: Region | None = None

    @classmethod
    def begin(
        cls, range_index: int, replace_range_index: int, region: ForeachRegion | ReplaceRegion | InsertRegion
    ) -> "RegionMarker":
        return cls(range_index=range_index, replace_range_index=replace_range_index, region=region)

    @classmethod
    def end(cls, range_index: int, replace_range_index: int) -> "RegionMarker":
        return cls(range_index=range_index, replace_range_index=replace_range_index)

    @property
    def is_begin(self) -> bool:
        return self.region is not None


# ---------------------------------------------------------------------------
# Text ranges and loaded templates
# ---------------------------------------------------------------------------


class TextRange(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    begin: int
    end: int
    indentation: int | None = None
    starts_new_line: bool = False
    match: re.Match | None = None  # type: ignore[type-arg]

    @property
    def is_replace_match(self) -> bool:
        return self.match is not None

    def __str__(self) -> str:
        if self.is_replace_match:
            return f"Replace match [{self.begin}..{self.end}]"
        return f"Text [{self.begin}..{self.end}]"


class LoadedTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    source_text: str
    region_markers: tuple[RegionMarker, ...]
    ranges: tuple[TextRange, ...]
    replace_range_count: int

    def text_of(self, text_range: TextRange) -> str:
        return self.source_text[text_range.begin : text_range.end]

    def replacement_variables(self) -> list[str]:
        """Return the destination variable of every replace range, by replacement index."""
        variables = [""] * self.replace_range_count
        for marker in self.region_markers:
            if isinstance(marker.region, ReplaceRegion):
                for _, replacement_index in marker.region.replace_ranges:
                    variables[replacement_index] = marker.region.variable_name
        return variables

    def debug_text(self) -> str:
        """Render the template with ``[variable]`` in place of every replace match."""
        variables = self.replacement_variables()
        replacement_index = 0
        parts: list[str] = []
        for text_range in self.ranges:
            if text_range.indentation is not None:
                parts.append(" " * text_range.indentation)
            if text_range.is_replace_match:
                parts.append(f"[{variables[replacement_index]}]")
                replacement_index += 1
            else:
                parts.append(self.text_of(text_range))
            if text_range.starts_new_line:
                parts.append("\n")
        return "".join(parts)


class RegionNode(BaseModel):
    region: Region
    range_begin: int
    range_end: int
    replace_range_begin: int
    replace_range_end: int
    children: list["RegionNode"] = Field(default_factory=list)


RegionNode.model_rebuild()  # necessary for recursive types
