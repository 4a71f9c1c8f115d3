"""Orchestration — LangGraph pipeline and its process() entry point."""

from mandate_compliance.orchestration.graph import build_graph
from mandate_compliance.orchestration.pipeline import CompliancePipeline, get_pipeline, process

__all__ = ["build_graph", "CompliancePipeline", "get_pipeline", "process"]
