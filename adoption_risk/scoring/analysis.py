# adoption_risk/scoring/analysis.py
"""
Boundary between the generation service and the scoring core.

The service's response is turned into a scored RiskAnalysis here. Anything
that stops us from getting a usable payload surfaces as AnalysisUnavailable;
retrying is left to the caller.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from adoption_risk.errors import AnalysisUnavailable
from adoption_risk.scoring.schemas import RiskAnalysis, RiskRecord

logger = logging.getLogger(__name__)


def extract_json(raw_output: str) -> dict[str, Any]:
    """
    Extract a JSON object from service output, handling common formatting variations.

    Tries multiple extraction strategies:
    1. Direct JSON parse (if output is pure JSON)
    2. Code fence extraction (```json ... ```)
    3. Outermost {...} block

    Truncated JSON is not repaired: a partial analysis would silently drop risks.

    Args:
        raw_output: Raw text from the service

    Returns:
        Parsed JSON dictionary

    Raises:
        ValueError: If no JSON object found
    """
    # Strategy 1: Direct parse
    try:
        parsed = json.loads(raw_output.strip())
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    # Strategy 2: Code fence (```json ... ```)
    fence_match = re.search(
        r"```(?:json)?\s*\n(.*?)\n```", raw_output, re.DOTALL | re.IGNORECASE
    )
    if fence_match:
        try:
            parsed = json.loads(fence_match.group(1).strip())
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

    # Strategy 3: First { to last }
    json_match = re.search(r"\{.*\}", raw_output, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(0))
        except json.JSONDecodeError:
            pass

    preview = raw_output[:200].replace("\n", "\\n")
    raise ValueError(
        f"Could not extract a JSON object from output ({len(raw_output)} chars). "
        f"Preview: {preview}"
    )


def parse_risk_analysis(payload: str | bytes | dict | None) -> RiskAnalysis:
    """
    Validate and score a generation-service response.

    Args:
        payload: Raw response text or an already-decoded dict

    Returns:
        RiskAnalysis with RPN and risk level derived for every record

    Raises:
        AnalysisUnavailable: If the payload is empty, not JSON, or not an object
    """
    if payload is None:
        raise AnalysisUnavailable("Risk analysis service returned no response")

    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")

    if isinstance(payload, str):
        if not payload.strip():
            raise AnalysisUnavailable("Risk analysis service returned an empty response")
        try:
            payload = extract_json(payload)
        except ValueError as e:
            raise AnalysisUnavailable(f"Risk analysis response is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise AnalysisUnavailable(
            f"Risk analysis response must be a JSON object, got {type(payload).__name__}"
        )

    try:
        analysis = RiskAnalysis.model_validate(payload)
    except ValidationError as e:
        raise AnalysisUnavailable(f"Risk analysis response failed validation: {e}") from e

    logger.info(
        f"Parsed risk analysis: {len(analysis.risk_categories)} categories, "
        f"{len(analysis.all_risks())} risks"
    )
    return analysis


def load_risk_analysis(path: str | Path) -> RiskAnalysis:
    """
    Load a saved generation-service response from disk.

    Raises:
        AnalysisUnavailable: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AnalysisUnavailable(f"Cannot read risk analysis from {path}: {e}") from e
    return parse_risk_analysis(text)


def score_risk_record(data: dict) -> dict:
    """
    Annotate a raw risk record dict with `rpn` and `risk_level`.

    Any rpn/risk_level already present is discarded and re-derived from the
    raw scores, so running this on its own output gives the same values.
    """
    record = RiskRecord.model_validate(data)
    return record.model_dump(mode="json")
