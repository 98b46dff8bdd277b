"""Template helpers: text form, canonical keys and symmetry transforms."""

from __future__ import annotations

from typing import List, Sequence

from ..core.exceptions import TemplateError
from ..core.models import Template


BLOCK_MARK = "#"
PLAYABLE_MARK = "."


def blank_template(rows: int, cols: int) -> Template:
    """Open layout of ``rows`` x ``cols`` whose border cells are all blocks."""

    if rows < 1 or cols < 1:
        raise TemplateError(f"Invalid template size {rows}x{cols}")
    return [
        [r in (0, rows - 1) or c in (0, cols - 1) for c in range(cols)]
        for r in range(rows)
    ]


def copy_template(template: Sequence[Sequence[bool]]) -> Template:
    return [list(row) for row in template]


def template_key(template: Sequence[Sequence[bool]]) -> str:
    """Canonical row-major encoding used to deduplicate layouts."""

    return "|".join("".join("1" if is_block else "0" for is_block in row) for row in template)


def parse_template(text: str) -> Template:
    """Parse ``#``/``.`` rows (one per line, blank lines and spaces ignored)."""

    template: Template = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.replace(" ", "").strip()
        if not line:
            continue
        row: List[bool] = []
        for char in line:
            if char == BLOCK_MARK:
                row.append(True)
            elif char == PLAYABLE_MARK:
                row.append(False)
            else:
                raise TemplateError(f"Unexpected marker {char!r} on line {lineno}")
        template.append(row)
    if not template:
        raise TemplateError("Template text is empty")
    return template


def format_template(template: Sequence[Sequence[bool]]) -> str:
    return "\n".join(
        "".join(BLOCK_MARK if is_block else PLAYABLE_MARK for is_block in row)
        for row in template
    )


def mirror_horizontal(template: Sequence[Sequence[bool]]) -> Template:
    return [list(reversed(row)) for row in template]


def mirror_vertical(template: Sequence[Sequence[bool]]) -> Template:
    return [list(row) for row in reversed(template)]


def rotate_180(template: Sequence[Sequence[bool]]) -> Template:
    return mirror_vertical(mirror_horizontal(template))


EASY_5X5_BASE: Template = parse_template(
    """
    #####
    #...#
    #...#
    #...#
    #####
    """
)

EASY_6X6_BASE: Template = parse_template(
    """
    ######
    #..###
    #..###
    #....#
    #....#
    ######
    """
)

MEDIUM_8X8_BASE: Template = parse_template(
    """
    ########
    #..#...#
    #..#...#
    #......#
    ###..###
    #......#
    #...#..#
    ########
    """
)

HARD_15X15_BASE: Template = parse_template(
    """
    ###############
    ##....##...#..#
    #......#......#
    #..#....#....##
    #...#....#....#
    #....#....#...#
    ##....#....#..#
    ###....#....###
    #..#....#....##
    #...#....#....#
    #....#....#...#
    ##....#....#..#
    #......#......#
    #..#...##....##
    ###############
    """
)
