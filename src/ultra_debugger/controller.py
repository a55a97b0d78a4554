"""Debug controller: orchestrates detection, simulated execution and remediation.

Example:
    >>> controller = DebugController(load_config(save_report=False))
    >>> report = asyncio.run(controller.debug_one("app.js"))
    >>> report.summary.code_health
    87
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_CONFIG, DebuggerConfig
from .detection import DetectorEngine, EslintEngine
from .exceptions import FileAccessError, LinterUnavailableError, PipelineError, UltraDebuggerError
from .execution import ExecutionHarness
from .file_ops import FileSystemIO
from .logging_config import get_logger
from .models import (
    AnalysisResult,
    BatchReport,
    BatchSummary,
    DebugReport,
    FileErrorRecord,
    FileOutcome,
    HealthSummary,
    RemediationResult,
)
from .remediation import RemediationEngine

logger = get_logger(__name__)

PathLike = Union[str, Path]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _sub_score(count: int, weight: int) -> int:
    return min(100, max(0, 100 - weight * count))


def calculate_code_health(issues: int, warnings: int, execution_errors: int) -> int:
    """0-100 health score: the rounded mean of three penalty sub-scores.

    Issues cost 10 points, warnings 5 and execution errors 20, each against
    its own 100-point sub-score floored at 0.
    """
    scores = (
        _sub_score(issues, 10),
        _sub_score(warnings, 5),
        _sub_score(execution_errors, 20),
    )
    return _round_half_up(sum(scores) / len(scores))


def summarize_batch(files: list[FileOutcome]) -> BatchSummary:
    reports = [f for f in files if isinstance(f, DebugReport)]
    health = (
        _round_half_up(sum(r.summary.code_health for r in reports) / len(reports))
        if reports
        else 0
    )
    return BatchSummary(
        total_files=len(files),
        successful=len(reports),
        failed=len(files) - len(reports),
        total_issues=sum(len(r.analysis.issues) for r in reports),
        total_warnings=sum(len(r.analysis.warnings) for r in reports),
        total_execution_errors=sum(len(r.execution.execution_errors) for r in reports),
        total_fixes=sum(len(r.remediation.fixes_applied) for r in reports),
        code_health=health,
    )


def fixed_code_name(path: PathLike) -> str:
    """``app.js`` -> ``app.fixed.js``."""
    path = Path(path)
    return f"{path.stem}.fixed{path.suffix}"


class DebugController:
    """Runs the debugging pipeline for one file or a batch.

    Collaborators default to the builtin implementations configured from
    ``config``; tests inject their own.

    Args:
        config: Run configuration
        detector: Builtin detector engine
        harness: Simulated execution harness
        remediator: Remediation engine
        linter: External lint engine, tried before ``detector`` when present.
            Created from config when ``config.use_external_linter`` is set.
        io: File reader/writer
    """

    def __init__(
        self,
        config: Optional[DebuggerConfig] = None,
        detector: Optional[DetectorEngine] = None,
        harness: Optional[ExecutionHarness] = None,
        remediator: Optional[RemediationEngine] = None,
        linter: Optional[EslintEngine] = None,
        io: Optional[FileSystemIO] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        cfg = self.config

        self.detector = detector or DetectorEngine(
            complexity_line_limit=cfg.complexity_line_limit,
            snippet_length=cfg.snippet_length,
        )
        self.harness = harness or ExecutionHarness(
            pass_probability=cfg.pass_probability,
            max_execution_delay=cfg.max_execution_delay,
            suite_delay=cfg.suite_delay,
            memory_sample_limit=cfg.memory_sample_limit,
            memory_sample_interval=cfg.memory_sample_interval,
        )
        self.remediator = remediator or RemediationEngine()
        if linter is None and cfg.use_external_linter:
            linter = EslintEngine(cfg.linter_command, timeout_seconds=cfg.linter_timeout_seconds)
        self.linter = linter
        self.io = io or FileSystemIO(
            max_bytes=cfg.max_file_size_bytes, timeout_seconds=cfg.timeout_seconds
        )

    # -- single file --

    async def debug_one(self, path: PathLike) -> DebugReport:
        """Debug one file and persist its outputs when configured.

        Raises:
            FileAccessError: If the source cannot be read or an output cannot
                be written
            PipelineError: If detection or remediation fails unexpectedly
        """
        report = await self._debug(Path(path))

        out = self.config.output_path
        if self.config.save_report:
            self.save_report(report, out / self.config.report_name)
        if self.config.save_fixed_code:
            self.save_fixed_code(report, out / self.config.fixed_name)

        logger.info(f"Debug process completed for {report.file_name}")
        return report

    async def _debug(self, path: Path) -> DebugReport:
        logger.info(f"Starting debug process for {path}")
        source = self.io.read_text(path)
        file_name = path.name

        logger.info("Running static code analysis...")
        analysis = self._stage("detection", self._analyze, source, file_name)

        logger.info("Running simulated execution...")
        try:
            execution = await self.harness.run(source, file_name)
        except Exception as e:
            raise PipelineError("execution", str(e)) from e

        logger.info("Applying automatic fixes...")
        remediation: RemediationResult = self._stage(
            "remediation", self.remediator.fix, source, analysis.issues, analysis.warnings
        )

        health = calculate_code_health(
            len(analysis.issues), len(analysis.warnings), len(execution.execution_errors)
        )
        return DebugReport(
            file_name=file_name,
            file_path=str(path),
            analysis=analysis,
            execution=execution,
            remediation=remediation,
            summary=HealthSummary.build(analysis, execution, remediation, health),
        )

    def _stage(self, stage: str, func, *args):
        try:
            return func(*args)
        except UltraDebuggerError:
            raise
        except Exception as e:
            raise PipelineError(stage, f"{type(e).__name__}: {e}") from e

    def _analyze(self, source: str, file_name: str) -> AnalysisResult:
        if self.linter is not None:
            try:
                return self.linter.analyze(source, file_name)
            except LinterUnavailableError as e:
                logger.warning(f"{e}; falling back to builtin detectors")
        return self.detector.analyze(source, file_name)

    # -- batch --

    async def debug_many(self, paths: Iterable[PathLike]) -> BatchReport:
        """Debug each path in order. Always returns one entry per path."""
        paths = [Path(p) for p in paths]
        logger.info(f"Starting debug process for {len(paths)} files")

        files: list[FileOutcome] = []
        for path in paths:
            try:
                files.append(await self._debug(path))
            except FileAccessError as e:
                logger.error(str(e))
                files.append(FileErrorRecord(str(path), str(e), error_kind="io"))
            except PipelineError as e:
                logger.exception(f"Debugging {path} failed")
                files.append(FileErrorRecord(str(path), str(e), error_kind="pipeline"))

        batch = BatchReport(files=files, summary=summarize_batch(files))

        out = self.config.output_path
        if self.config.save_report:
            self.save_report(batch, out / self.config.multi_report_name)
        if self.config.save_fixed_code:
            for report in batch.reports:
                self.save_fixed_code(report, out / fixed_code_name(report.file_name))

        return batch

    # -- persistence --

    def save_report(self, report: Union[DebugReport, BatchReport], path: PathLike) -> None:
        self.io.write_text(path, json.dumps(report.to_dict(), indent=2))
        logger.info(f"Report saved to {path}")

    def save_fixed_code(self, report: DebugReport, path: PathLike) -> None:
        self.io.write_text(path, report.remediation.fixed_code)
        logger.info(f"Fixed code saved to {path}")
