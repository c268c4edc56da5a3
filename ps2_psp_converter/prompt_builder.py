"""
Builds the request payload sent to Perplexity for the conversion plan.
"""
from .prompts import CONVERSION_PLAN_PROMPT

SCAN_REPORT_START = "--- SCAN REPORT START ---"
SCAN_REPORT_END = "--- SCAN REPORT END ---"


def build_plan_prompt(scan_report: str) -> str:
    """Wraps the scan report in the fixed conversion-planning instructions."""
    return CONVERSION_PLAN_PROMPT.format(scan_report=scan_report)
