# SPDX-FileCopyrightText: 2025 censorcheck contributors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe-and-classify engine: executor, classifier, per-domain checker and aggregator."""

from .classifier import classify
from .engine import ScanEngine
from .executor import ProbeExecutor, ProbeResponse
from .orchestrator import CheckState, DomainChecker

__all__ = ["CheckState", "DomainChecker", "ProbeExecutor", "ProbeResponse", "ScanEngine", "classify"]
