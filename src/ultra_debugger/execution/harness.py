"""Simulated execution harness.

The harness never interprets the analyzed source. It scans the text against a
deny-list, then fabricates plausible telemetry: start/complete markers, a
fixed battery of synthetic suites whose pass/fail status is drawn at random,
and host memory samples. The suite results are synthetic signal and say
nothing about whether the code is correct.
"""

from __future__ import annotations

import asyncio
import random
import traceback
from typing import Callable, Optional

from ..logging_config import get_logger
from ..models import ExecutionError, ExecutionTelemetry, MemorySample, TelemetryEvent
from .battery import TEST_BATTERY, SyntheticSuite
from .memory import MemorySampler, process_memory
from .safety import find_violation

logger = get_logger(__name__)


def _error_entry(exc: BaseException) -> ExecutionError:
    return ExecutionError(
        "execution_error",
        str(exc) or type(exc).__name__,
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


class ExecutionHarness:
    """Produces synthetic execution telemetry for one source text per call.

    Args:
        pass_probability: Chance that a synthetic suite reports "passed"
        rng: Random source for delays and suite outcomes (inject a seeded
            ``random.Random`` to pin results)
        max_execution_delay: Upper bound of the simulated run delay (seconds)
        suite_delay: Simulated duration of each suite (seconds)
        memory_sample_limit: Samples taken before the sampler stops itself
        memory_sample_interval: Seconds between samples
        memory_probe: Callable returning one MemorySample
        battery: Suites to simulate
    """

    def __init__(
        self,
        pass_probability: float = 0.9,
        rng: Optional[random.Random] = None,
        max_execution_delay: float = 1.0,
        suite_delay: float = 0.05,
        memory_sample_limit: int = 10,
        memory_sample_interval: float = 0.1,
        memory_probe: Callable[[], MemorySample] = process_memory,
        battery: tuple[SyntheticSuite, ...] = TEST_BATTERY,
    ):
        if not 0.0 <= pass_probability <= 1.0:
            raise ValueError("pass_probability must be between 0.0 and 1.0")
        self.pass_probability = pass_probability
        self.rng = rng or random.Random()
        self.max_execution_delay = max_execution_delay
        self.suite_delay = suite_delay
        self.memory_sample_limit = memory_sample_limit
        self.memory_sample_interval = memory_sample_interval
        self.memory_probe = memory_probe
        self.battery = battery

    async def run(self, source: str, file_name: str) -> ExecutionTelemetry:
        """Simulate a run of ``source``. Never raises; errors become telemetry."""
        telemetry = ExecutionTelemetry(file_name=file_name)
        sampler = MemorySampler(
            limit=self.memory_sample_limit,
            interval=self.memory_sample_interval,
            probe=self.memory_probe,
        )

        try:
            violation = find_violation(source)
            if violation is not None:
                logger.warning("%s: %s", file_name, violation.message)
                telemetry.execution_errors.append(
                    ExecutionError("execution_error", violation.message, violation.detail)
                )
                return telemetry

            sampler.start()
            await self._simulate_execution(telemetry)
            await self._run_battery(telemetry)
        except Exception as e:
            logger.debug("Simulated execution of %s failed", file_name, exc_info=True)
            telemetry.execution_errors.append(_error_entry(e))
        finally:
            # the sampler never outlives the run
            try:
                await sampler.stop()
            except Exception as e:
                telemetry.execution_errors.append(_error_entry(e))
            telemetry.memory_usage = list(sampler.samples)

        return telemetry

    async def _simulate_execution(self, telemetry: ExecutionTelemetry) -> None:
        telemetry.test_results.append(
            TelemetryEvent("execution_start", message="Code execution started")
        )
        await asyncio.sleep(self.rng.random() * self.max_execution_delay)
        telemetry.test_results.append(
            TelemetryEvent("execution_complete", message="Code execution completed")
        )

    async def _run_battery(self, telemetry: ExecutionTelemetry) -> None:
        for suite in self.battery:
            telemetry.test_results.append(
                TelemetryEvent("test_suite_start", name=suite.name, description=suite.description)
            )
            await asyncio.sleep(self.suite_delay)
            status = "passed" if self.rng.random() < self.pass_probability else "failed"
            telemetry.test_results.append(
                TelemetryEvent("test_suite_complete", name=suite.name, status=status)
            )
