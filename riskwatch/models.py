"""
Data models for the Risk Watch application.
"""

from typing import Dict, List, Optional, TypedDict, Union

RISK_TYPES = ("Supply Chain", "Strategic", "None")
SEVERITIES = ("High", "Medium", "Low", "None")

# Controlled vocabulary the model is asked to draw Affected_Nodes from.
AFFECTED_NODES = (
    "chip",
    "battery",
    "vendor",
    "ev_policy",
    "cybersecurity",
    "production",
    "logistics",
    "competitor",
)

UNKNOWN = "Unknown"


class ArticleSource(TypedDict, total=False):
    """NewsAPI source object."""

    id: Optional[str]
    name: Optional[str]


class RawArticle(TypedDict, total=False):
    """Type definition for an incoming news article."""

    title: str
    description: Optional[str]
    content: Optional[str]
    source: Union[ArticleSource, str, None]
    publishedAt: Optional[str]
    url: Optional[str]


# Field names are the wire format the dashboard consumes, hence the casing.
RiskAssessment = TypedDict(
    "RiskAssessment",
    {
        "Risk_Type": str,
        "Severity": str,
        "Affected_Nodes": List[str],
        "Explanation": str,
        "Risk_Score": float,
    },
)

AnalyzedArticle = TypedDict(
    "AnalyzedArticle",
    {
        "Title": str,
        "Source": str,
        "PublishedAt": Optional[str],
        "Url": Optional[str],
        "Risk_Type": str,
        "Severity": str,
        "Affected_Nodes": List[str],
        "Explanation": str,
        "Risk_Score": float,
    },
)


class BatchSummary(TypedDict):
    """Aggregate figures shown on the dashboard."""

    total_articles: int
    high_risk_count: int
    high_risk_pct: float
    avg_risk_score: float
    supply_chain_count: int
    supply_chain_pct: float
    risk_type_distribution: Dict[str, int]
    severity_distribution: Dict[str, int]
