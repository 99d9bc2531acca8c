"""
Pure formatting functions for the HTML exit readiness report.
No I/O: every function takes data and returns an HTML string.
"""

import html
import re
from datetime import datetime
from typing import List, Optional

from workflow.core.scoring_models import SECTIONS, ReadinessCategory, ScoreResult

SCORE_COLORS = [
    (80, "#27ae60"),  # green
    (65, "#3498db"),  # blue
    (50, "#f39c12"),  # orange
    (35, "#e67e22"),  # dark orange
]
LOWEST_SCORE_COLOR = "#e74c3c"

CATEGORY_COLORS = {
    ReadinessCategory.EXIT_READY.value: "#27ae60",
    ReadinessCategory.NEARLY_READY.value: "#3498db",
    ReadinessCategory.PREPARATION_NEEDED.value: "#f39c12",
    ReadinessCategory.SIGNIFICANT_GAPS.value: "#e67e22",
    ReadinessCategory.NOT_READY.value: "#e74c3c",
}
FALLBACK_CATEGORY_COLOR = "#95a5a6"

# Short card titles; the long names live in SECTION_TITLES
SECTION_CARD_TITLES = {
    "owner": "Owner Readiness",
    "business": "Business Performance",
    "strategic": "Strategic Position",
    "organizational": "Organizational",
    "transaction": "Transaction",
}

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<![*\w])\*(?!\s)(.+?)(?<!\s)\*(?![*\w])")
_NUMBERED = re.compile(r"^(\d+)\.\s+(.+)$")
_BULLET = re.compile(r"^[-*]\s+(.+)$")

REPORT_STYLES = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; background-color: #f5f5f5; }
        .container { max-width: 900px; margin: 0 auto; background: white; box-shadow: 0 0 20px rgba(0,0,0,0.1); }
        .header { background: linear-gradient(135deg, #1e3c72 0%, #2a5298 100%); color: white; padding: 40px; text-align: center; }
        .header h1 { font-size: 2.5em; margin-bottom: 10px; }
        .header p { font-size: 1.1em; opacity: 0.9; }
        .header .generated { margin-top: 20px; font-size: 0.9em; opacity: 0.7; }
        .score-section { background: #f8f9fa; padding: 40px; text-align: center; border-bottom: 3px solid #e0e0e0; }
        .overall-score { width: 180px; height: 180px; border-radius: 50%; color: white; display: flex; flex-direction: column; align-items: center; justify-content: center; box-shadow: 0 4px 15px rgba(0,0,0,0.2); margin: 0 auto 20px; }
        .overall-score .score { font-size: 4em; font-weight: bold; line-height: 1; }
        .overall-score .label { font-size: 0.9em; opacity: 0.9; margin-top: 5px; }
        .category { display: inline-block; color: white; padding: 10px 30px; border-radius: 25px; font-weight: bold; font-size: 1.2em; margin-bottom: 30px; }
        .section-scores { display: grid; grid-template-columns: repeat(auto-fit, minmax(150px, 1fr)); gap: 20px; margin-top: 30px; }
        .section-score { background: white; padding: 20px; border-radius: 10px; text-align: center; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .section-score h4 { font-size: 0.9em; color: #666; margin-bottom: 10px; }
        .section-score .score { font-size: 2.5em; font-weight: bold; }
        .content { padding: 40px; }
        .content h2 { color: #1e3c72; margin-top: 40px; margin-bottom: 20px; padding-bottom: 10px; border-bottom: 2px solid #e0e0e0; }
        .content h3 { color: #2a5298; margin-top: 25px; margin-bottom: 15px; }
        .content p { margin-bottom: 15px; color: #555; }
        .content ul, .content ol { margin-left: 30px; margin-bottom: 20px; }
        .content li { margin-bottom: 10px; color: #555; }
        .flags { background: #fff3cd; border: 1px solid #ffeaa7; padding: 20px; border-radius: 8px; margin: 20px 0; text-align: left; }
        .flags h4 { color: #856404; margin-bottom: 10px; }
        .flags ul { margin-left: 20px; }
        .footer { background: #333; color: white; padding: 30px 40px; text-align: center; }
        .footer p { opacity: 0.8; margin-bottom: 5px; }
        @media print {
            body { background: white; }
            .container { box-shadow: none; }
            .header { background: #1e3c72; -webkit-print-color-adjust: exact; print-color-adjust: exact; }
        }
        @media (max-width: 600px) {
            .header h1 { font-size: 2em; }
            .overall-score { width: 150px; height: 150px; }
            .overall-score .score { font-size: 3em; }
            .content { padding: 20px; }
        }
"""

MESSAGE_PAGE_STYLES = """
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; display: flex; justify-content: center; align-items: center; height: 100vh; margin: 0; background-color: #f5f5f5; }
        .message-container { text-align: center; background: white; padding: 60px; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); max-width: 500px; }
        h2 { color: #333; margin-bottom: 20px; }
        p { color: #666; line-height: 1.6; }
        a { color: #3498db; text-decoration: none; }
        a:hover { text-decoration: underline; }
"""


def get_score_color(score: int) -> str:
    for threshold, color in SCORE_COLORS:
        if score >= threshold:
            return color
    return LOWEST_SCORE_COLOR


def get_category_color(category) -> str:
    value = category.value if isinstance(category, ReadinessCategory) else str(category)
    return CATEGORY_COLORS.get(value, FALLBACK_CATEGORY_COLOR)


def _inline(text: str) -> str:
    """Escape one line of narrative text and apply bold/italic markup"""
    escaped = html.escape(text, quote=False)
    escaped = _BOLD.sub(r"<strong>\1</strong>", escaped)
    return _ITALIC.sub(r"<em>\1</em>", escaped)


def format_report_content(content: str) -> str:
    """
    Convert the model's markdown-ish narrative into HTML.

    Handles '#'-style headings, numbered section titles in capitals,
    numbered and bulleted lists, **bold**, *italic* and blank-line
    paragraphs. All text is HTML-escaped before markup is added.
    """
    blocks: List[str] = []
    paragraph: List[str] = []
    list_tag: Optional[str] = None
    list_items: List[str] = []

    def flush_paragraph():
        if paragraph:
            blocks.append(f"<p>{' '.join(paragraph)}</p>")
            paragraph.clear()

    def flush_list():
        nonlocal list_tag
        if list_tag:
            items = "".join(f"<li>{item}</li>" for item in list_items)
            blocks.append(f"<{list_tag}>{items}</{list_tag}>")
            list_items.clear()
            list_tag = None

    def open_list(tag: str):
        nonlocal list_tag
        if list_tag != tag:
            flush_list()
            list_tag = tag

    for raw_line in (content or "").splitlines():
        line = raw_line.strip()

        if not line:
            flush_paragraph()
            flush_list()
            continue

        heading = re.match(r"^(#{1,4})\s+(.+)$", line)
        if heading:
            flush_paragraph()
            flush_list()
            level = min(len(heading.group(1)) + 1, 4)
            blocks.append(f"<h{level}>{_inline(heading.group(2).strip())}</h{level}>")
            continue

        numbered = _NUMBERED.match(line)
        if numbered:
            text = numbered.group(2).strip()
            flush_paragraph()
            if text.upper() == text and any(c.isalpha() for c in text):
                # "1. EXECUTIVE SUMMARY" style section titles
                flush_list()
                blocks.append(f"<h2>{_inline(text)}</h2>")
            else:
                open_list("ol")
                list_items.append(_inline(text))
            continue

        bullet = _BULLET.match(line)
        if bullet:
            flush_paragraph()
            open_list("ul")
            list_items.append(_inline(bullet.group(1).strip()))
            continue

        flush_list()
        paragraph.append(_inline(line))

    flush_paragraph()
    flush_list()
    return "\n".join(blocks)


def format_flags(flags) -> str:
    if not flags:
        return ""
    items = "".join(f"<li>{html.escape(flag)}</li>" for flag in flags)
    return f"""
            <div class="flags">
                <h4>Special Considerations:</h4>
                <ul>{items}</ul>
            </div>"""


def format_section_cards(score_result: ScoreResult) -> str:
    cards = []
    for section in SECTIONS:
        score = getattr(score_result.sections, section)
        cards.append(f"""
                <div class="section-score">
                    <h4>{SECTION_CARD_TITLES[section]}</h4>
                    <div class="score" style="color: {get_score_color(score)};">{score}</div>
                </div>""")
    return "".join(cards)


def create_html_report(
    narrative: str,
    score_result: ScoreResult,
    generated_at: Optional[datetime] = None
) -> str:
    """
    Render the complete standalone HTML report.

    Args:
        narrative: markdown narrative from the language model
        score_result: scores, category and flags to display
        generated_at: timestamp printed in the header (defaults to now)

    Returns:
        HTML document as a string
    """
    generated_at = generated_at or datetime.now()
    timestamp = generated_at.strftime("%B %d, %Y at %H:%M")
    score_color = get_score_color(score_result.overall)
    category_color = get_category_color(score_result.category)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Business Exit Readiness Report</title>
    <style>{REPORT_STYLES}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Business Exit Readiness Report</h1>
            <p>Comprehensive Assessment Results</p>
            <p class="generated">Generated: {timestamp}</p>
        </div>

        <div class="score-section">
            <div class="overall-score" style="background: {score_color};">
                <div class="score">{score_result.overall}</div>
                <div class="label">Overall Score</div>
            </div>

            <div style="margin-bottom: 30px;">
                <div class="category" style="background: {category_color};">{html.escape(score_result.category.value)}</div>
            </div>
{format_flags(score_result.flags)}
            <div class="section-scores">{format_section_cards(score_result)}
            </div>
        </div>

        <div class="content">
{format_report_content(narrative)}
        </div>

        <div class="footer">
            <p><strong>Business Exit Readiness Assessment</strong></p>
            <p>This report is confidential and proprietary.</p>
            <p style="margin-top: 15px; font-size: 0.9em;">Powered by AI-driven analysis and industry benchmarks</p>
        </div>
    </div>
</body>
</html>
"""


def create_message_page(title: str, message: str, link: Optional[str] = None, link_text: str = "") -> str:
    """Small standalone page used for 'not found' style responses"""
    link_html = f'<p><a href="{html.escape(link)}">{html.escape(link_text)}</a></p>' if link else ""
    return f"""<!DOCTYPE html>
<html>
<head>
    <title>{html.escape(title)}</title>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>{MESSAGE_PAGE_STYLES}    </style>
</head>
<body>
    <div class="message-container">
        <h2>{html.escape(title)}</h2>
        <p>{html.escape(message)}</p>
        {link_html}
    </div>
</body>
</html>
"""


def create_not_found_page() -> str:
    return create_message_page(
        "Report Not Found",
        "This report may have expired or doesn't exist.",
        link="/report/latest",
        link_text="View Latest Report",
    )


def create_no_reports_page() -> str:
    return create_message_page(
        "No Reports Available",
        "No reports have been generated yet. Please complete the assessment form first.",
    )


def create_failed_report_page(report_id: str) -> str:
    return create_message_page(
        "Report Not Ready",
        "Your scores were saved but the written report could not be generated. Please try again shortly.",
        link=f"/report/{report_id}",
        link_text="Reload",
    )
