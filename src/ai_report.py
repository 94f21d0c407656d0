# -*- coding: utf-8 -*-
"""
ai_report.py – Natural-language summary of analysis results
===========================================================

Hands the per-sample :class:`AnalysisResult` records, as JSON, to a Gemini
model together with a fixed rheologist prompt and returns the text it writes.
Purely a consumer: nothing here feeds back into curve generation or analysis.

Public API
----------
- `build_report_prompt()` – the prompt text for a list of results.
- `generate_report()` – call the text-generation service.

Failures come back as `ReportError`; a missing credential or client library
as its subclass `ReportConfigError`, so callers can show either to the user.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Iterable, List

from sample_analysis import AnalysisResult

__all__ = [
    "ReportError",
    "ReportConfigError",
    "build_report_prompt",
    "generate_report",
]

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------------
# Constants & defaults
# ----------------------------------------------------------------------------

DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
EMPTY_RESPONSE = "No response generated."

_PROMPT_TEMPLATE = """\
You are an expert Rheologist and Biopharmaceutical Scientist.
Analyze the following synthetic viscosity analysis data for protein solutions:

{results_json}

Metrics Explanation:
- "flowBehaviorIndex" (n): <1 implies shear thinning, =1 Newtonian.
- "clusterLengthScale": A toy metric derived from relaxation time and shear thinning degree. Higher = potential large clusters/aggregates.

Task:
1. Summarize the rheological behavior of each sample.
2. Identify which sample shows the highest risk of protein instability or clustering.
3. Provide a brief recommendation for formulation development (e.g., "Add excipients to Sample C").

Keep it concise (under 200 words) and scientific.
"""


class ReportError(RuntimeError):
    """The summary could not be produced."""


class ReportConfigError(ReportError):
    """Credential or client library missing."""

# ----------------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------------

def _resolve_api_key(api_key: str | None) -> str:
    if api_key:
        return api_key
    for var in API_KEY_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    raise ReportConfigError(
        "Please provide a valid Gemini API key "
        f"(--api-key or one of {', '.join(API_KEY_ENV_VARS)})."
    )


def _default_client(api_key: str):
    try:
        from google import genai
    except ImportError as ex:
        raise ReportConfigError(
            "The google-genai package is required for reports "
            "(pip install 'viscometry-toolkit[report]')."
        ) from ex
    return genai.Client(api_key=api_key)

# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------

def build_report_prompt(results: Iterable[AnalysisResult]) -> str:
    """Return the fixed prompt with *results* embedded as indented JSON."""
    records: List[dict] = [r.to_dict() for r in results]
    return _PROMPT_TEMPLATE.format(results_json=json.dumps(records, indent=2))


def generate_report(
    results: Iterable[AnalysisResult],
    *,
    api_key: str | None = None,
    model: str = DEFAULT_MODEL,
    client=None,
) -> str:
    """Ask the text-generation service for a summary of *results*.

    Parameters
    ----------
    results : iterable of AnalysisResult
        Per-sample analysis output.
    api_key : str, optional
        Credential; falls back to ``GEMINI_API_KEY`` then ``API_KEY``.
        Ignored when *client* is given.
    model : str
        Model name passed to ``models.generate_content``.
    client : object, optional
        Anything exposing ``models.generate_content(model=..., contents=...)``;
        a ``google.genai.Client`` is built when omitted.
    """
    prompt = build_report_prompt(results)
    if client is None:
        client = _default_client(_resolve_api_key(api_key))

    try:
        response = client.models.generate_content(model=model, contents=prompt)
    except Exception as ex:
        logger.warning(f"[ai_report] generation failed: {ex}")
        raise ReportError(str(ex) or "Failed to generate report.") from ex

    return getattr(response, "text", None) or EMPTY_RESPONSE
