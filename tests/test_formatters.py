"""Tests for the HTML report formatters."""

from datetime import datetime

import pytest

from workflow.core.answers import AnswerSet
from workflow.core.formatters import (
    create_html_report,
    create_no_reports_page,
    create_not_found_page,
    format_report_content,
    get_category_color,
    get_score_color,
)
from workflow.core.scoring_logic import calculate_scores
from workflow.core.scoring_models import ReadinessCategory


@pytest.mark.parametrize("score,color", [
    (100, "#27ae60"), (80, "#27ae60"),
    (79, "#3498db"), (65, "#3498db"),
    (64, "#f39c12"), (50, "#f39c12"),
    (49, "#e67e22"), (35, "#e67e22"),
    (34, "#e74c3c"), (0, "#e74c3c"),
])
def test_score_colors(score, color):
    assert get_score_color(score) == color


def test_category_colors():
    assert get_category_color(ReadinessCategory.EXIT_READY) == "#27ae60"
    assert get_category_color("NOT READY") == "#e74c3c"
    assert get_category_color("SOMETHING ELSE") == "#95a5a6"


def test_headings_and_lists():
    html = format_report_content(
        "# EXECUTIVE SUMMARY\n"
        "Intro line\n\n"
        "## Strengths\n"
        "- First\n"
        "- Second\n\n"
        "1. Do this\n"
        "2. Then that\n"
    )
    assert "<h2>EXECUTIVE SUMMARY</h2>" in html
    assert "<p>Intro line</p>" in html
    assert "<h3>Strengths</h3>" in html
    assert "<ul><li>First</li><li>Second</li></ul>" in html
    assert "<ol><li>Do this</li><li>Then that</li></ol>" in html


def test_numbered_capitalized_lines_are_section_titles():
    assert format_report_content("3. KEY STRENGTHS TO LEVERAGE") == "<h2>KEY STRENGTHS TO LEVERAGE</h2>"


def test_inline_emphasis():
    html = format_report_content("This is **important** and *notable*.")
    assert html == "<p>This is <strong>important</strong> and <em>notable</em>.</p>"


def test_narrative_text_is_escaped():
    html = format_report_content("Watch <script>alert('x')</script> & more")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&amp; more" in html


def test_empty_narrative():
    assert format_report_content("") == ""


def test_full_report(best_answers):
    result = calculate_scores(best_answers)
    html = create_html_report("# EXECUTIVE SUMMARY\nAll good.", result, datetime(2024, 5, 1, 9, 30))
    assert html.startswith("<!DOCTYPE html>")
    assert "Generated: May 01, 2024 at 09:30" in html
    assert f'<div class="score">{result.overall}</div>' in html
    assert "EXIT READY" in html
    assert "Strategic Position" in html
    assert "<h2>EXECUTIVE SUMMARY</h2>" in html


def test_flags_section_only_when_flags_present(empty_answers):
    plain = calculate_scores(empty_answers)
    assert "Special Considerations" not in create_html_report("text", plain)

    flagged = calculate_scores(AnswerSet.from_mapping({"exit_timeline": "Within 12 months"}))
    html = create_html_report("text", flagged)
    assert "Special Considerations" in html
    assert "Timeline/Readiness Mismatch - Urgent action needed" in html


def test_message_pages():
    assert "Report Not Found" in create_not_found_page()
    assert 'href="/report/latest"' in create_not_found_page()
    assert "No Reports Available" in create_no_reports_page()
