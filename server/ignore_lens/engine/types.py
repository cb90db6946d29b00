"""Value types shared by the classifier, matcher and evaluator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LineKind(str, Enum):
    BLANK = "blank"
    COMMENT = "comment"
    PATTERN = "pattern"


@dataclass(frozen=True)
class ClassifiedLine:
    """One ignore-file line after escape decoding.

    ``is_negation`` and ``is_directory_anchor`` are only ever true for
    ``LineKind.PATTERN`` lines.
    """

    kind: LineKind
    pattern: str = ""
    is_negation: bool = False
    is_directory_anchor: bool = False
    raw_text: str = ""

    @property
    def is_pattern(self) -> bool:
        return self.kind is LineKind.PATTERN

    @property
    def source_pattern(self) -> str:
        """Pattern text as the matcher echoes it, with ``!`` restored."""

        return f"!{self.pattern}" if self.is_negation else self.pattern


@dataclass(frozen=True)
class MatchResult:
    pattern: str
    matching_paths: tuple[str, ...]
    is_negation: bool

    @property
    def match_count(self) -> int:
        return len(self.matching_paths)


@dataclass
class EvaluationState:
    """Running ignored set for a single evaluation pass."""

    ignored_set: set[str] = field(default_factory=set)
    # each entry ends with a single "/"
    ignored_dir_prefixes: set[str] = field(default_factory=set)

    @property
    def size(self) -> int:
        return len(self.ignored_set)

    def is_under_ignored_dir(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.ignored_dir_prefixes)


@dataclass(frozen=True)
class LineOutcome:
    line_index: int
    pattern: str
    is_negation: bool
    match_count: int
    action_count: int = 0
    no_action_count: int = 0
    blocked_count: int = 0
    set_size_after: int = 0

    @property
    def is_no_match(self) -> bool:
        return self.match_count == 0

    @property
    def is_shadowed(self) -> bool:
        return not self.is_negation and self.match_count > 0 and self.action_count == 0

    @property
    def is_ineffective(self) -> bool:
        """True when the line changed nothing in the ignored set."""

        return self.action_count == 0


@dataclass(frozen=True)
class EvaluationReport:
    outcomes: tuple[LineOutcome, ...]
    state: EvaluationState

    @property
    def total_ignored(self) -> int:
        return self.state.size

    @property
    def total_shadowed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_shadowed)

    @property
    def total_blocked(self) -> int:
        return sum(outcome.blocked_count for outcome in self.outcomes)

    @property
    def no_match_lines(self) -> list[int]:
        return [outcome.line_index for outcome in self.outcomes if outcome.is_no_match]

    def outcome_for_line(self, line_index: int) -> LineOutcome | None:
        for outcome in self.outcomes:
            if outcome.line_index == line_index:
                return outcome
        return None
