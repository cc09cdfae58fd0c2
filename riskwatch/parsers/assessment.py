"""
Parser for Gemini risk-classification replies.

Parsing is done in two stages so each failure mode can be tested on its own:
extract_json_object() finds the embedded JSON object in free-form text, and
parse_assessment() checks that the decoded object has the expected shape.
Values are passed through as the model produced them; enum membership and
score range are not re-checked here.
"""

import json
import logging
import math
from typing import Any, Dict, List, Tuple

from riskwatch.errors import MalformedResponse
from riskwatch.models import RiskAssessment

logger = logging.getLogger(__name__)

_STRING_FIELDS = ("Risk_Type", "Severity", "Explanation")


def extract_json_object(text: str) -> str:
    """Returns the first balanced {...} substring of text.

    Braces inside JSON string literals are ignored, so commentary before or
    after the object (or a Markdown code fence around it) is tolerated.
    """
    start = text.find("{")
    if start == -1:
        raise MalformedResponse("no JSON object in reply")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]

    raise MalformedResponse("unbalanced JSON object in reply")


def _reject_constant(name: str) -> Any:
    """json.loads hook for NaN, Infinity and -Infinity, which JSON does not allow."""
    raise MalformedResponse(f"non-standard JSON constant {name}")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    # 1e999 decodes to inf without going through parse_constant
    return isinstance(value, float) and math.isfinite(value)


def _check_fields(data: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Returns (field, problem) pairs for every missing or mistyped field."""
    problems = []
    for field in _STRING_FIELDS:
        if field not in data:
            problems.append((field, "missing"))
        elif not isinstance(data[field], str):
            problems.append((field, "not a string"))

    nodes = data.get("Affected_Nodes")
    if "Affected_Nodes" not in data:
        problems.append(("Affected_Nodes", "missing"))
    elif not isinstance(nodes, list) or not all(isinstance(n, str) for n in nodes):
        problems.append(("Affected_Nodes", "not a list of strings"))

    if "Risk_Score" not in data:
        problems.append(("Risk_Score", "missing"))
    elif not _is_number(data["Risk_Score"]):
        problems.append(("Risk_Score", "not a finite number"))
    return problems


def parse_assessment(text: str) -> RiskAssessment:
    """Extracts and validates a RiskAssessment from raw reply text.

    Raises:
        MalformedResponse: no object found, invalid JSON, or wrong shape.
    """
    candidate = extract_json_object(text)
    try:
        data = json.loads(candidate, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponse("reply JSON is not an object")

    problems = _check_fields(data)
    if problems:
        detail = ", ".join(f"{field} {problem}" for field, problem in problems)
        raise MalformedResponse(f"invalid assessment: {detail}")

    # Keys outside the schema are dropped so output records stay flat and fixed.
    return RiskAssessment(
        Risk_Type=data["Risk_Type"],
        Severity=data["Severity"],
        Affected_Nodes=list(data["Affected_Nodes"]),
        Explanation=data["Explanation"],
        Risk_Score=data["Risk_Score"],
    )
