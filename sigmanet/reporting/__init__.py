"""Reporting utilities for SigmaNet."""

from .artifacts import json_ready, write_evaluation, write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "json_ready", "write_evaluation", "write_manifest", "write_summary"]
