"""Scan engine — runs one strategy and collects its findings."""

from __future__ import annotations

import logging
import time

from report_todo.scanner.models import ScanResult
from report_todo.scanner.rules import ClassificationRules
from report_todo.scanner.strategies import ScanStrategy

logger = logging.getLogger(__name__)


class ScanEngine:
    """Runs a scan strategy against a set of classification rules."""

    def __init__(self, rules: ClassificationRules) -> None:
        self._rules = rules

    @property
    def rules(self) -> ClassificationRules:
        return self._rules

    def scan(self, strategy: ScanStrategy) -> ScanResult:
        """Run ``strategy`` and return its findings in file/row order.

        Tree scans finish files in no particular order, so findings are
        sorted before they leave the engine.
        """
        start = time.time()
        result = ScanResult(root=str(strategy.root), mode=strategy.mode)

        findings = strategy.run(self._rules)
        result.findings = sorted(findings, key=lambda f: f.sort_key())
        result.duration = time.time() - start

        logger.debug(
            "%s scan of %s: %d tracked, %d untracked in %.2fs",
            strategy.mode.value,
            result.root,
            result.tracked_count,
            result.untracked_count,
            result.duration,
        )
        return result
