"""Changelist validation gate.

Runs one describe report through bypass detection, record parsing, policy
filtering, classification and the pairing passes, producing a Verdict. Any
structural problem raises instead; a partial verdict could let a bad submit
through.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from p4unity.config import AppConfig
from p4unity.errors import EmptyReportError
from p4unity.logs import log_event
from p4unity.validation.classify import classify_records
from p4unity.validation.pairing import PairingValidator
from p4unity.validation.parser import parse_record, split_report
from p4unity.validation.policy import PolicyFilter
from p4unity.validation.types import ChangelistReport, ExistenceOracle, Verdict


def has_bypass(header: Sequence[str], keyphrase: str) -> bool:
    """True when any header line after the summary line contains the keyphrase."""
    if not keyphrase:
        return False
    return any(keyphrase in line for line in header[1:])


def validate_report(
    report: ChangelistReport,
    config: AppConfig,
    oracle: ExistenceOracle,
    logger: logging.Logger,
) -> Verdict:
    """Validate an already split changelist report.

    Raises:
        EmptyReportError: If the header or file-record block is empty
        ReportShapeError: If a file record cannot be parsed
        RemoteLookupError: If a depot existence check fails
    """
    log_event(
        logger,
        "filtering",
        header_lines=len(report.header),
        file_count=len(report.records),
    )

    if not report.header:
        raise EmptyReportError("p4 describe output is empty")

    if has_bypass(report.header, config.bypass_keyphrase):
        log_event(logger, "bypassed")
        return Verdict(allowed=True, bypassed=True)

    if not report.records:
        raise EmptyReportError("changelist has no file records?")

    records = [parse_record(line) for line in report.records]
    for index, record in enumerate(records):
        log_event(
            logger,
            "Candidate",
            index=index,
            path=record.path,
            revision=record.revision,
            operation=record.operation,
        )

    kept = PolicyFilter(config.path_whitelist, logger).apply(records)
    classification = classify_records(kept, logger)
    violations = PairingValidator(oracle, logger).validate(classification)

    verdict = Verdict(allowed=not violations, violations=violations)
    log_event(logger, "verdict", allowed=verdict.allowed, violations=len(violations))
    return verdict


def run_gate(
    raw_report: str,
    config: AppConfig,
    oracle: ExistenceOracle,
    logger: logging.Logger,
    changelist: int | None = None,
) -> Verdict:
    """Validate raw `p4 -s describe -s` output.

    Args:
        raw_report: Full describe output, `-s` tagged
        config: Loaded configuration
        oracle: Depot existence check for partners missing from the changelist
        logger: Sink for trace events
        changelist: Changelist number, used only in error messages

    Returns:
        Verdict with allowed flag and every violation found

    Raises:
        ChangelistNotFoundError: If p4 reports the changelist does not exist
        EmptyReportError: If the header or file-record block is empty
        ReportShapeError: If a file record cannot be parsed
        RemoteLookupError: If a depot existence check fails
    """
    report = split_report(raw_report, changelist)
    return validate_report(report, config, oracle, logger)
