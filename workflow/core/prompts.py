"""
LLM prompts for narrative report generation.
Templates are plain strings filled with str.format.
"""

from typing import Dict, Sequence

from workflow.core.answers import AnswerSet
from workflow.core.scoring_models import Adjustment, ScoreResult

NARRATIVE_SYSTEM_PROMPT = """You are a senior M&A advisor who prepares business exit readiness reports for owners of small and medium businesses.
Write in a professional but accessible tone and avoid jargon where possible.
Be specific and actionable rather than generic, and ground every statement in the scores and answers you are given.
Format the report in markdown: use '# ' headings for the numbered sections, '## ' for subsections, '**bold**' for emphasis and '- ' for bullet points."""

REPORT_SECTIONS = [
    ("EXECUTIVE SUMMARY", [
        "Overall readiness assessment in 2-3 sentences",
        "Top 3 strengths (be specific based on the data)",
        "Top 3 critical gaps (be specific based on the data)",
        "Estimated time to become exit ready",
        "Potential value enhancement opportunity (as a percentage range)",
    ]),
    ("READINESS SCORE ANALYSIS", [
        "Explain what the overall score of {overall} means",
        "Highlight which sections are strongest/weakest",
        "Explain any special flags identified",
    ]),
    ("KEY STRENGTHS TO LEVERAGE", [
        "Based on high-scoring areas, what are the business's main assets?",
        "How can these be emphasized to buyers?",
        "What type of buyers would find these most attractive?",
    ]),
    ("CRITICAL GAPS TO ADDRESS", [
        "What are the most urgent issues to fix?",
        "Prioritize by impact on valuation",
        "Provide specific, actionable recommendations",
    ]),
    ("VALUE ENHANCEMENT OPPORTUNITIES", [
        "List 5-7 specific initiatives to increase business value",
        "Estimate the impact of each (High/Medium/Low)",
        "Suggested timeline for implementation",
        "Quick wins vs. long-term improvements",
    ]),
    ("RECOMMENDED EXIT TIMELINE", [
        "Based on current readiness, when should they target exit?",
        "What milestones should be achieved each quarter?",
        "What market conditions should they watch for?",
    ]),
    ("BUYER LANDSCAPE ANALYSIS", [
        "Most likely buyer types based on business profile",
        "Estimated valuation multiples for this type of business",
        "Key selling points for each buyer type",
    ]),
    ("IMMEDIATE ACTION PLAN (Next 90 Days)", [
        "5 specific actions they should take immediately",
        "Who should be involved",
        "Expected outcomes",
    ]),
    ("PROFESSIONAL TEAM RECOMMENDATIONS", [
        "What advisors they need based on their gaps",
        "When to engage each advisor",
        "Rough budget expectations",
    ]),
]

NARRATIVE_PROMPTS = {
    "report": """Please generate a comprehensive Business Exit Readiness Report based on the following assessment results:

ASSESSMENT SCORES:
- Overall Exit Readiness Score: {overall}/100
- Category: {category}
- Owner Readiness: {owner}/100
- Business Performance: {business}/100
- Strategic Position: {strategic}/100
- Organizational Readiness: {organizational}/100
- Transaction Readiness: {transaction}/100

SPECIAL FLAGS:
{flags}

KEY ASSESSMENT DATA:
{key_answers}

ADJUSTMENTS APPLIED:
Multipliers: {multipliers}
Penalties: {penalties}

Please create a detailed report with the following sections:

{sections}

Focus on insights that are directly relevant to their scores and situation.""",
}

# Answers quoted to the model, in order, with their display labels
KEY_ANSWER_FIELDS = [
    ("exit_timeline", "Exit Timeline"),
    ("emotional_readiness", "Emotional Readiness"),
    ("post_sale_involvement", "Post-Sale Involvement"),
    ("annual_revenue", "Annual Revenue"),
    ("revenue_growth", "Revenue Growth"),
    ("ebitda_margin", "EBITDA Margin"),
    ("customer_concentration", "Customer Concentration"),
    ("competitive_advantages", "Competitive Advantages"),
    ("defensibility", "Defensibility"),
    ("operate_without_owner", "Operate Without Owner"),
    ("management_depth", "Management Depth"),
    ("buyer_type", "Preferred Buyer"),
]


def format_adjustments(adjustments: Sequence[Adjustment]) -> str:
    return ", ".join(f"{a.name} ({a.factor}x)" for a in adjustments) or "None"


def format_key_answers(answers: AnswerSet) -> str:
    lines = []
    for field_name, label in KEY_ANSWER_FIELDS:
        value = answers.get(field_name)
        if field_name == "emotional_readiness":
            shown = f"{value}/10" if value is not None else "Not answered"
        elif isinstance(value, tuple):
            shown = ", ".join(value) if value else "None identified"
        else:
            shown = value or "Not answered"
        lines.append(f"- {label}: {shown}")
    return "\n".join(lines)


def format_report_sections(overall: int) -> str:
    blocks = []
    for number, (title, bullets) in enumerate(REPORT_SECTIONS, start=1):
        lines = [f"{number}. {title}"]
        lines.extend(f"   - {bullet.format(overall=overall)}" for bullet in bullets)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_report_prompt(score_result: ScoreResult, answers: AnswerSet) -> Dict[str, str]:
    """
    Build the system and user prompts for the narrative report.

    Returns:
        Dict with 'system' and 'user' prompt strings
    """
    sections = score_result.sections
    flags = "\n".join(f"- {flag}" for flag in score_result.flags) or "- None"

    user_prompt = NARRATIVE_PROMPTS["report"].format(
        overall=score_result.overall,
        category=score_result.category.value,
        owner=sections.owner,
        business=sections.business,
        strategic=sections.strategic,
        organizational=sections.organizational,
        transaction=sections.transaction,
        flags=flags,
        key_answers=format_key_answers(answers),
        multipliers=format_adjustments(score_result.adjustments.multipliers),
        penalties=format_adjustments(score_result.adjustments.penalties),
        sections=format_report_sections(score_result.overall),
    )
    return {"system": NARRATIVE_SYSTEM_PROMPT, "user": user_prompt}
