import logging

from ignore_lens.config import DecorationStyle, Settings
from ignore_lens.engine.pipeline import evaluate_lines
from ignore_lens.engine.types import LineOutcome
from ignore_lens.services.decorations import build_decorations, format_hover, format_label

DOCUMENT = ["dist/", "*.js", "*.tmp", "!dist/a.js", "!b.md"]
CANDIDATES = ["dist/a.js", "dist/b.js", "b.md"]


def decorations_for(**overrides):
    report = evaluate_lines(DOCUMENT, CANDIDATES)
    return {d.line_index: d for d in build_decorations(report, Settings(**overrides))}


def test_label_for_normal_pattern():
    outcome = LineOutcome(
        line_index=0, pattern="*.js", is_negation=False, match_count=3,
        action_count=2, no_action_count=1, set_size_after=3,
    )

    assert format_label(outcome) == "+2 (1 already ignored), 3 ignored"


def test_label_for_blocked_negation():
    outcome = LineOutcome(
        line_index=0, pattern="dist/a.js", is_negation=True, match_count=1,
        blocked_count=1, set_size_after=2,
    )

    assert format_label(outcome) == "-0 (1 blocked), 2 ignored"


def test_label_without_matches():
    outcome = LineOutcome(line_index=0, pattern="*.tmp", is_negation=False, match_count=0)

    assert format_label(outcome) == "no matches, 0 ignored"


def test_hover_explains_blocking():
    outcome = LineOutcome(
        line_index=0, pattern="dist/a.js", is_negation=True, match_count=1,
        blocked_count=1, set_size_after=2,
    )

    hover = format_hover(outcome)

    assert "Matches 1 path." in hover
    assert "parent directory is excluded" in hover


def test_hover_flags_shadowed_pattern():
    outcome = LineOutcome(
        line_index=0, pattern="*.js", is_negation=False, match_count=2,
        no_action_count=2, set_size_after=2,
    )

    assert "no effect" in format_hover(outcome)


def test_highlights_lines_that_do_nothing():
    decorations = decorations_for(decoration_style="background")

    assert decorations[0].highlight is False
    assert decorations[1].highlight is False  # shadowed, but it matches
    assert decorations[2].highlight is True  # no matches
    assert decorations[3].highlight is True  # blocked negation
    assert decorations[4].highlight is True  # b.md was never ignored
    assert decorations[2].background is True
    assert decorations[2].foreground is False


def test_both_style_sets_background_and_foreground():
    decoration = decorations_for(decoration_style="both")[2]

    assert decoration.background is True
    assert decoration.foreground is True


def test_text_style_sets_foreground_only():
    decoration = decorations_for(decoration_style="text")[2]

    assert decoration.background is False
    assert decoration.foreground is True


def test_none_style_keeps_labels_without_highlight():
    decorations = decorations_for(decoration_style="none")

    assert all(d.highlight is False for d in decorations.values())
    assert decorations[0].label == "+2, 2 ignored"


def test_counts_can_be_hidden():
    decorations = decorations_for(show_counts=False)

    assert all(d.label is None for d in decorations.values())
    assert decorations[0].hover


def test_disabled_lens_renders_nothing():
    report = evaluate_lines(DOCUMENT, CANDIDATES)

    assert build_decorations(report, Settings(enabled=False)) == []


def test_unknown_style_falls_back_to_background(caplog):
    with caplog.at_level(logging.WARNING):
        settings = Settings(decoration_style="sparkly")

    assert settings.decoration_style is DecorationStyle.BACKGROUND
    assert "sparkly" in caplog.text
