"""Deterministic structural validation for templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from ..core.constants import MAX_RUN_LENGTH, MIN_RUN_LENGTH
from ..core.exceptions import ValidationError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str] = field(default_factory=list)


def playable_segments(line: Sequence[bool]) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, length)`` for each maximal run of playable markers."""

    start = None
    for index, is_block in enumerate(line):
        if is_block:
            if start is not None:
                yield start, index - start
                start = None
        elif start is None:
            start = index
    if start is not None:
        yield start, len(line) - start


class TemplateValidator:
    """Checks that a block/playable layout can host a Kakuro puzzle.

    The generator calls :meth:`is_valid` after every speculative mutation, so
    every check is a single linear pass and nothing is cached between calls.
    """

    def validate(self, template: Sequence[Sequence[bool]]) -> ValidationResult:
        try:
            self._check_shape(template)
            columns = self._columns(template)
            self._check_playable_extents(template, columns)
            self._check_anchor_border(template)
            self._check_segment_lengths(template, "row")
            self._check_segment_lengths(columns, "column")
        except ValidationError as exc:
            LOGGER.debug("Template rejected: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True)

    def is_valid(self, template: Sequence[Sequence[bool]]) -> bool:
        return self.validate(template).ok

    @staticmethod
    def _check_shape(template: Sequence[Sequence[bool]]) -> None:
        if not template or not template[0]:
            raise ValidationError("Template is empty")
        width = len(template[0])
        for r, row in enumerate(template):
            if len(row) != width:
                raise ValidationError(
                    f"Row {r} has {len(row)} cells, expected {width}"
                )

    @staticmethod
    def _columns(template: Sequence[Sequence[bool]]) -> List[List[bool]]:
        return [list(column) for column in zip(*template)]

    @staticmethod
    def _check_playable_extents(
        template: Sequence[Sequence[bool]], columns: Sequence[Sequence[bool]]
    ) -> None:
        # A playable cell whose contiguous extent on either axis is 1 cannot
        # belong to both a horizontal and a vertical run.
        for r, row in enumerate(template):
            for start, length in playable_segments(row):
                if length < MIN_RUN_LENGTH:
                    raise ValidationError(f"Isolated playable cell at ({r},{start}) across")
        for c, column in enumerate(columns):
            for start, length in playable_segments(column):
                if length < MIN_RUN_LENGTH:
                    raise ValidationError(f"Isolated playable cell at ({start},{c}) down")

    @staticmethod
    def _check_anchor_border(template: Sequence[Sequence[bool]]) -> None:
        for c, is_block in enumerate(template[0]):
            if not is_block:
                raise ValidationError(f"Top row cell (0,{c}) must be a block")
        for r, row in enumerate(template):
            if not row[0]:
                raise ValidationError(f"Left column cell ({r},0) must be a block")

    @staticmethod
    def _check_segment_lengths(lines: Sequence[Sequence[bool]], label: str) -> None:
        for index, line in enumerate(lines):
            for start, length in playable_segments(line):
                if not MIN_RUN_LENGTH <= length <= MAX_RUN_LENGTH:
                    raise ValidationError(
                        f"Run of length {length} in {label} {index} starting at {start}"
                    )


_DEFAULT_VALIDATOR = TemplateValidator()


def validate_template(template: Sequence[Sequence[bool]]) -> ValidationResult:
    return _DEFAULT_VALIDATOR.validate(template)


def is_valid_template(template: Sequence[Sequence[bool]]) -> bool:
    """Return True when ``template`` passes every structural rule."""

    return _DEFAULT_VALIDATOR.is_valid(template)
