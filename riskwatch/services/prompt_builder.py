"""
Prompt construction for article risk classification.

The prompt is a pure function of the article: the same article always
renders to the same text.
"""

from riskwatch.models import AFFECTED_NODES, RISK_TYPES, SEVERITIES, RawArticle

MAX_BODY_CHARS = 3000

_PROMPT_TEMPLATE = """You are a professional risk analyst for Tata Motors. Analyze the following news article and classify its risk.

Title: {title}
Content: {body}

For this article, provide the following fields:
- Risk_Type: {risk_types}
- Severity: {severities}
- Affected_Nodes: List of relevant entities mentioned (e.g., lithium, battery, chip, vendor, EV policy, cybersecurity, production, logistics, competitor)
- Explanation: Short reasoning for your classification (max 100 words)
- Risk_Score: A numerical score from 0 to 10 representing the risk level

Requirements:
- Focus on risks relevant to Tata Motors as an automotive company
- Supply Chain risks: Issues affecting suppliers, materials, logistics, production, cybersecurity
- Strategic risks: Policy changes, market shifts, competitive threats, regulatory changes
- Affected_Nodes should be specific entities from this list: {nodes}
- Risk_Score: High severity = 7-10, Medium = 4-6, Low = 1-3, None = 0-1

Output ONLY a valid JSON object in this exact format:
{{
    "Risk_Type": "{risk_type_choices}",
    "Severity": "{severity_choices}",
    "Affected_Nodes": ["node1", "node2"],
    "Explanation": "Brief explanation",
    "Risk_Score": 0.0
}}"""


def build_body(article: RawArticle) -> str:
    """Joins description and content, truncated to MAX_BODY_CHARS."""
    parts = [article.get("description") or "", article.get("content") or ""]
    body = " ".join(part for part in parts if part)
    return body[:MAX_BODY_CHARS]


def build_prompt(article: RawArticle) -> str:
    """Renders the classification request for a single article."""
    return _PROMPT_TEMPLATE.format(
        title=article.get("title") or "",
        body=build_body(article),
        risk_types=" / ".join(RISK_TYPES),
        severities=" / ".join(SEVERITIES),
        nodes=", ".join(AFFECTED_NODES),
        risk_type_choices="|".join(RISK_TYPES),
        severity_choices="|".join(SEVERITIES),
    )
