"""
LangGraph state — the dict that flows through the three pipeline nodes.

Each field is owned by one node:
  raw_input, draft_artifact  → caller (graph input)
  category                   → classify
  mandates                   → select_mandates
  report                     → validate
"""

from typing import Tuple, TypedDict

from .schemas import ComplianceReport, Mandate


class ComplianceGraphState(TypedDict, total=False):
    raw_input: str
    draft_artifact: str
    category: str
    mandates: Tuple[Mandate, ...]
    report: ComplianceReport
