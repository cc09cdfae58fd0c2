"""
Dashboard aggregates over an analyzed batch.
"""

from typing import Any, Dict, List, Sequence

from riskwatch.models import RISK_TYPES, SEVERITIES, AnalyzedArticle, BatchSummary


def _distribution(
    batch: Sequence[AnalyzedArticle], field: str, labels: Sequence[str]
) -> Dict[str, int]:
    counts = {label: 0 for label in labels}
    by_lower = {label.lower(): label for label in labels}
    for article in batch:
        value = article.get(field)
        label = by_lower.get(value.lower()) if isinstance(value, str) else None
        if label:
            counts[label] += 1
    return counts


def _score(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def _pct(count: int, total: int) -> float:
    return round(count * 100.0 / total, 1) if total else 0.0


def summarize(batch: List[AnalyzedArticle]) -> BatchSummary:
    """Computes the headline figures and distributions for a batch."""
    total = len(batch)
    risk_types = _distribution(batch, "Risk_Type", RISK_TYPES)
    severities = _distribution(batch, "Severity", SEVERITIES)
    avg_score = sum(_score(a.get("Risk_Score")) for a in batch) / total if total else 0.0

    return BatchSummary(
        total_articles=total,
        high_risk_count=severities["High"],
        high_risk_pct=_pct(severities["High"], total),
        avg_risk_score=round(avg_score, 1),
        supply_chain_count=risk_types["Supply Chain"],
        supply_chain_pct=_pct(risk_types["Supply Chain"], total),
        risk_type_distribution=risk_types,
        severity_distribution=severities,
    )
