"""Rendering of line outcomes as editor-style annotations."""

from __future__ import annotations

from dataclasses import dataclass

from ignore_lens.config import DecorationStyle, Settings
from ignore_lens.engine.types import EvaluationReport, LineOutcome


@dataclass(frozen=True)
class LineDecoration:
    line_index: int
    highlight: bool
    background: bool
    foreground: bool
    label: str | None
    hover: str


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_label(outcome: LineOutcome) -> str:
    """Short inline summary, e.g. ``+2 (1 already ignored), 3 ignored``."""

    if outcome.is_no_match:
        return f"no matches, {outcome.set_size_after} ignored"

    details: list[str] = []
    if outcome.is_negation:
        head = f"-{outcome.action_count}"
        if outcome.no_action_count:
            details.append(f"{outcome.no_action_count} not ignored")
        if outcome.blocked_count:
            details.append(f"{outcome.blocked_count} blocked")
    else:
        head = f"+{outcome.action_count}"
        if outcome.no_action_count:
            details.append(f"{outcome.no_action_count} already ignored")

    if details:
        head += f" ({', '.join(details)})"
    return f"{head}, {outcome.set_size_after} ignored"


def format_hover(outcome: LineOutcome) -> str:
    matched = _plural(outcome.match_count, "path")
    if outcome.is_no_match:
        return "Pattern matches no paths in the workspace."
    if outcome.is_negation:
        lines = [
            f"Matches {matched}.",
            f"Re-included: {outcome.action_count}.",
            f"Not ignored before this line: {outcome.no_action_count}.",
        ]
        if outcome.blocked_count:
            lines.append(
                f"Blocked: {outcome.blocked_count} (a parent directory is excluded, "
                "so Git cannot re-include them)."
            )
    else:
        lines = [
            f"Matches {matched}.",
            f"Newly ignored: {outcome.action_count}.",
            f"Already ignored by earlier lines: {outcome.no_action_count}.",
        ]
        if outcome.is_shadowed:
            lines.append("Every match was already ignored; this line has no effect.")
    lines.append(f"Ignored after this line: {outcome.set_size_after}.")
    return "\n".join(lines)


def _needs_highlight(outcome: LineOutcome) -> bool:
    if outcome.is_negation:
        return outcome.action_count == 0
    return outcome.is_no_match


def build_decorations(report: EvaluationReport, settings: Settings) -> list[LineDecoration]:
    """Decorate every pattern line of ``report``.

    Highlighting marks lines that do nothing: normal patterns without matches
    and negations that re-include no path.
    """

    if not settings.enabled:
        return []

    style = settings.decoration_style
    background = style in (DecorationStyle.BACKGROUND, DecorationStyle.BOTH)
    foreground = style in (DecorationStyle.TEXT, DecorationStyle.BOTH)

    decorations: list[LineDecoration] = []
    for outcome in report.outcomes:
        highlight = style is not DecorationStyle.NONE and _needs_highlight(outcome)
        decorations.append(
            LineDecoration(
                line_index=outcome.line_index,
                highlight=highlight,
                background=highlight and background,
                foreground=highlight and foreground,
                label=format_label(outcome) if settings.show_counts else None,
                hover=format_hover(outcome),
            )
        )
    return decorations
