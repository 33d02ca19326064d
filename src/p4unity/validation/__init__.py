"""Changelist content validation."""

from p4unity.validation.gate import run_gate, validate_report
from p4unity.validation.types import FileRecord, Verdict, Violation

__all__ = ["FileRecord", "Verdict", "Violation", "run_gate", "validate_report"]
