"""Perforce command-line integration."""

from p4unity.p4.client import P4Client, connection_from_config
from p4unity.p4.exec import ExecError, ExecResult, P4Connection, run_p4

__all__ = ["ExecError", "ExecResult", "P4Client", "P4Connection", "connection_from_config", "run_p4"]
