"""
LangGraph state machine — classify → select_mandates → validate.

Nodes close over an immutable RuleTables value and return partial state
updates that LangGraph merges. The graph is compiled without a
checkpointer, so nothing survives between invocations.
"""

from __future__ import annotations

import logging
from typing import Any

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from mandate_compliance.models.schemas import RuleTables
from mandate_compliance.models.state import ComplianceGraphState
from mandate_compliance.rules.classifier import classify
from mandate_compliance.rules.compliance_validator import ComplianceValidator
from mandate_compliance.rules.mandate_selector import select_mandates

logger = logging.getLogger(__name__)

CLASSIFY = "classify"
SELECT_MANDATES = "select_mandates"
VALIDATE = "validate"


def build_graph(tables: RuleTables, validator: ComplianceValidator) -> CompiledStateGraph:
    """
    Construct and compile the three-stage pipeline.
    Returns a compiled graph ready to invoke.
    """

    def classify_node(state: ComplianceGraphState) -> dict[str, Any]:
        return {"category": classify(state["raw_input"], tables.classification_rules)}

    def select_node(state: ComplianceGraphState) -> dict[str, Any]:
        # The request text doubles as the feature description
        mandates = select_mandates(state["category"], state["raw_input"], tables.mandates)
        return {"mandates": mandates}

    def validate_node(state: ComplianceGraphState) -> dict[str, Any]:
        return {"report": validator.validate(state["draft_artifact"], state["mandates"])}

    graph = StateGraph(ComplianceGraphState)

    graph.add_node(CLASSIFY, classify_node)
    graph.add_node(SELECT_MANDATES, select_node)
    graph.add_node(VALIDATE, validate_node)

    graph.set_entry_point(CLASSIFY)
    graph.add_edge(CLASSIFY, SELECT_MANDATES)
    graph.add_edge(SELECT_MANDATES, VALIDATE)
    graph.add_edge(VALIDATE, END)

    logger.debug("[Graph] Compiled classify → select_mandates → validate")
    return graph.compile()
