"""Checks package for healthy-sdk.

Provides the check capabilities and the bundled file, TCP and HTTP probes.
"""
from __future__ import annotations

from healthy.checks.base import Check, CheckFunc, MetadataCheck, check_func
from healthy.checks.file import FileCheck
from healthy.checks.http import HTTPCheck
from healthy.checks.tcp import TCPCheck, split_address

__all__ = [
    "Check",
    "MetadataCheck",
    "CheckFunc",
    "check_func",
    "FileCheck",
    "TCPCheck",
    "split_address",
    "HTTPCheck",
]
