"""Template loading: turns classified lines into ranges and region markers.

A file is either one anonymous template (``load_template``) or a set of named
templates, each enclosed in a ``DEFINE`` region (``load_defined_templates``).
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from codegen_templates.core.directives import parse_directives
from codegen_templates.core.lines import ClassifiedLine, LineKind, classify_lines
from codegen_templates.errors import ValidationError
from codegen_templates.models import (
    DefineDirective,
    Directive,
    ForeachDirective,
    ForeachRegion,
    InsertDirective,
    InsertRegion,
    LoadedTemplate,
    RegionMarker,
    ReplaceDirective,
    ReplaceRegion,
    TextRange,
)

logger = logging.getLogger(__name__)


@dataclass
class _ReplaceFrame:
    pattern: re.Pattern[str]
    directive: ReplaceDirective
    marker_index: int
    replace_ranges: list[tuple[int, int]] = field(default_factory=list)


def load_template(text: str, begin: int = 0, end: int | None = None) -> LoadedTemplate:
    """Load ``text[begin:end]`` as a single anonymous template.

    Raises ``LexError``, ``ParseError`` or ``ValidationError`` on malformed input.
    """
    loader = TemplateLoader(text, begin, end, named_templates=False)
    templates = loader.load()
    assert list(templates) == [""]
    return templates[""]


def load_defined_templates(text: str, begin: int = 0, end: int | None = None) -> dict[str, LoadedTemplate]:
    """Load every ``DEFINE("name")`` region of ``text[begin:end]`` as a named template."""
    loader = TemplateLoader(text, begin, end, named_templates=True)
    templates = loader.load()
    assert "" not in templates
    return templates


class TemplateLoader:
    """Single-use loader; call ``load`` once."""

    def __init__(self, text: str, begin: int = 0, end: int | None = None, *, named_templates: bool) -> None:
        self._text = text
        self._begin = begin
        self._end = len(text) if end is None else end
        self._named_templates = named_templates

        self._ranges: list[TextRange] = []
        self._markers: list[RegionMarker] = []
        self._templates: dict[str, LoadedTemplate] = {}

        self._replace_stack: list[_ReplaceFrame] = []
        self._region_stack: list[Sequence[Directive]] = []
        self._template_name: str | None = None
        self._in_template = False
        self._template_indentation = 0
        self._nesting_level = 0
        self._replace_range_count = 0
        self._in_insert = False
        self._loaded = False

    def load(self) -> dict[str, LoadedTemplate]:
        assert not self._loaded, "TemplateLoader instances are single-use"
        self._loaded = True

        lines = classify_lines(self._text, self._begin, self._end)
        directives_per_line: dict[int, list[Directive]] = {}
        for line_number, line in enumerate(lines):
            if line.kind is not LineKind.REGION_START_WITH_DIRECTIVES:
                continue
            directives = parse_directives(self._text, line_number, line.begin, line.tokens)
            if directives:
                directives_per_line[line_number] = directives

        if not self._named_templates:
            self._begin_template(indentation=0, name="")

        for line_number, line in enumerate(lines):
            is_last_line = line_number == len(lines) - 1

            if line.kind is LineKind.EMPTY:
                if self._in_template and not is_last_line:
                    self._ranges.append(TextRange(begin=line.begin, end=line.end, starts_new_line=True))
            elif line.kind is LineKind.REGULAR:
                self._handle_regular_line(line_number, line, is_last_line)
            elif line.kind is LineKind.REGION_START:
                self._region_stack.append(())
                self._handle_regular_line(line_number, line, is_last_line)
            elif line.kind is LineKind.REGION_START_WITH_DIRECTIVES:
                assert line.indentation != -1
                directives = directives_per_line.get(line_number, [])
                self._region_stack.append(directives)
                for directive in directives:
                    self._enter_directive_region(line.indentation, directive)
                    self._nesting_level += 1
            elif line.kind is LineKind.REGION_END:
                if not self._region_stack:
                    raise ValidationError(line_number, line.indentation, "Unmatched #endregion")
                frame = self._region_stack.pop()
                if not frame:
                    self._handle_regular_line(line_number, line, is_last_line)
                for directive in reversed(frame):
                    self._nesting_level -= 1
                    self._exit_directive_region(directive)
            else:
                raise AssertionError(f"Invalid classified line {line}")

        unclosed = [directive for frame in self._region_stack for directive in frame]
        if unclosed:
            first = unclosed[0]
            raise ValidationError(first.line, first.column, "Region is never closed by #endregion")

        if not self._named_templates:
            self._end_template()

        return self._templates

    # -----------------------------------------------------------------------
    # Regular lines
    # -----------------------------------------------------------------------

    def _handle_regular_line(self, line_number: int, line: ClassifiedLine, is_last_line: bool) -> None:
        if not self._in_template or self._in_insert:
            return

        assert line.indentation != -1
        in_template_indentation = line.indentation - self._template_indentation
        if in_template_indentation < 0:
            raise ValidationError(
                line_number,
                line.indentation,
                "Line indentation is smaller than the defined template regions indentation",
            )

        is_first_range = True
        cursor = line.begin + line.indentation

        while True:
            earliest = self._find_earliest_match(line_number, line, cursor)
            if earliest is None:
                break
            match_begin, match_end, match, replace_ranges = earliest

            if cursor < match_begin:
                self._add_range(
                    TextRange(
                        begin=cursor,
                        end=match_begin,
                        indentation=in_template_indentation if is_first_range else None,
                    )
                )
                is_first_range = False

            replace_ranges.append((len(self._ranges), self._replace_range_count))
            self._replace_range_count += 1
            self._add_range(
                TextRange(
                    begin=match_begin,
                    end=match_end,
                    indentation=in_template_indentation if is_first_range else None,
                    starts_new_line=not is_last_line and match_end == line.end,
                    match=match,
                )
            )
            is_first_range = False
            cursor = match_end

        if cursor >= line.end:
            return

        self._add_range(
            TextRange(
                begin=cursor,
                end=line.end,
                indentation=in_template_indentation if is_first_range else None,
                starts_new_line=not is_last_line,
            )
        )

    def _find_earliest_match(
        self, line_number: int, line: ClassifiedLine, cursor: int
    ) -> tuple[int, int, re.Match[str], list[tuple[int, int]]] | None:
        """Find the earliest pattern match in the rest of the line.

        The rest of the line is searched as a string of its own, so anchors and
        lookbehinds never see text before ``cursor``. Returned offsets are
        absolute.
        """
        remainder = self._text[cursor : line.end]
        earliest: tuple[re.Match[str], list[tuple[int, int]]] | None = None
        # Innermost region first; on equal start positions it keeps the match.
        for frame in reversed(self._replace_stack):
            match = frame.pattern.search(remainder)
            if match is None:
                continue
            if match.end() == match.start():
                raise ValidationError(
                    line_number,
                    cursor + match.start() - line.begin,
                    f"Replace pattern `{frame.directive.pattern}` matched an empty string",
                )
            if earliest is None or match.start() < earliest[0].start():
                earliest = (match, frame.replace_ranges)
        if earliest is None:
            return None
        match, replace_ranges = earliest
        return cursor + match.start(), cursor + match.end(), match, replace_ranges

    def _add_range(self, text_range: TextRange) -> None:
        assert "\n" not in self._text[text_range.begin : text_range.end]
        self._ranges.append(text_range)

    # -----------------------------------------------------------------------
    # Directive regions
    # -----------------------------------------------------------------------

    def _enter_directive_region(self, indentation: int, directive: Directive) -> None:
        expects_define = self._named_templates and self._nesting_level == 0

        if isinstance(directive, DefineDirective):
            if not expects_define:
                raise ValidationError(directive.line, directive.column, "Can't define sub template")
            if not directive.name:
                raise ValidationError(directive.line, directive.column, "Template name cannot be empty")
            if directive.name in self._templates:
                raise ValidationError(
                    directive.line, directive.column, f"Template '{directive.name}' is already defined"
                )
            self._begin_template(indentation, directive.name)
            return

        if expects_define:
            raise ValidationError(directive.line, directive.column, "Expected define directive")

        if self._in_insert:
            raise ValidationError(directive.line, directive.column, "Can't have any regions inside an insert region")

        if isinstance(directive, ForeachDirective):
            self._markers.append(
                RegionMarker.begin(
                    len(self._ranges),
                    self._replace_range_count,
                    ForeachRegion(variable_name=directive.variable_name, collection_name=directive.collection_name),
                )
            )
        elif isinstance(directive, ReplaceDirective):
            pattern = self._compile_pattern(directive)
            self._replace_stack.append(_ReplaceFrame(pattern, directive, len(self._markers)))
            self._markers.append(
                RegionMarker.begin(
                    len(self._ranges),
                    self._replace_range_count,
                    ReplaceRegion(variable_name=directive.variable_name),
                )
            )
        elif isinstance(directive, InsertDirective):
            self._markers.append(
                RegionMarker.begin(
                    len(self._ranges),
                    self._replace_range_count,
                    InsertRegion(indentation=indentation, variable_name=directive.variable_name),
                )
            )
            self._in_insert = True
        else:
            raise AssertionError(f"Unhandled directive {directive!r}")

    def _exit_directive_region(self, directive: Directive) -> None:
        if isinstance(directive, DefineDirective):
            self._end_template()
            return

        if isinstance(directive, ReplaceDirective):
            frame = self._replace_stack.pop()
            assert frame.directive is directive
            begin = self._markers[frame.marker_index]
            self._markers[frame.marker_index] = RegionMarker.begin(
                begin.range_index,
                begin.replace_range_index,
                ReplaceRegion(variable_name=directive.variable_name, replace_ranges=tuple(frame.replace_ranges)),
            )

        self._markers.append(RegionMarker.end(len(self._ranges), self._replace_range_count))

        if isinstance(directive, InsertDirective):
            self._in_insert = False

    @staticmethod
    def _compile_pattern(directive: ReplaceDirective) -> re.Pattern[str]:
        try:
            return re.compile(directive.pattern)
        except re.error as exc:
            raise ValidationError(
                directive.line, directive.column, f"Invalid replace pattern `{directive.pattern}`: {exc}"
            ) from exc

    # -----------------------------------------------------------------------
    # Template bodies
    # -----------------------------------------------------------------------

    def _begin_template(self, indentation: int, name: str) -> None:
        assert not self._in_template
        assert self._nesting_level == 0

        self._in_template = True
        self._template_name = name
        self._template_indentation = indentation
        logger.debug("Begin template %r at indentation %d", name, indentation)

    def _end_template(self) -> None:
        assert self._in_template
        assert self._nesting_level == 0
        assert self._template_name is not None
        assert sum(1 if marker.is_begin else -1 for marker in self._markers) == 0

        template = LoadedTemplate(
            name=self._template_name,
            source_text=self._text,
            region_markers=tuple(self._markers),
            ranges=tuple(self._ranges),
            replace_range_count=self._replace_range_count,
        )
        self._templates[self._template_name] = template
        logger.debug(
            "Loaded template %r: %d ranges, %d region markers, %d replace ranges",
            self._template_name,
            len(template.ranges),
            len(template.region_markers),
            template.replace_range_count,
        )

        self._in_template = False
        self._template_name = None
        self._template_indentation = 0
        self._markers = []
        self._ranges = []
        self._replace_range_count = 0
