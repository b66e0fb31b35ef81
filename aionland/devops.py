"""Build jobs, CI pipelines, deployments and heuristic build predictions."""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

log = logging.getLogger(__name__)

MAX_JOBS = 256
MAX_PIPELINES = 64
MAX_STAGES = 16
MAX_PIPELINE_NAME = 127
MAX_STAGE_NAME = 63
MAX_STAGE_COMMAND = 511
DEFAULT_STAGE_TIMEOUT = 300
DEFAULT_PROJECT_PATH = "/home/user/aion-os"
DEFAULT_BUILD_TIME_MS = 10000.0
BASE_FAILURE_RATE = 0.05
RECENT_WINDOW = 10
HEALTH_CHECK_SUCCESS_PERCENT = 90
TEST_SUCCESS_PERCENT = 90

TEST_NAMES = (
    "test_memory_allocation",
    "test_memory_alignment",
    "test_process_creation",
    "test_scheduler",
    "test_vfs_open",
    "test_vfs_read_write",
    "test_tcp_socket",
    "test_udp_socket",
    "test_nlp_tokenization",
    "test_ai_prediction",
    "test_code_completion",
    "test_object_detection",
)

_RULE = "========================================\n"


class BuildStatus(Enum):
    """Lifecycle state of a build job."""

    QUEUED = auto()
    IN_PROGRESS = auto()
    SUCCESS = auto()
    FAILED = auto()
    CANCELLED = auto()


class DeployStrategy(Enum):
    """How a new version replaces the running one."""

    ROLLING = "Rolling"
    BLUE_GREEN = "Blue-Green"
    CANARY = "Canary"


class DeploymentError(Exception):
    """Raised when a deployment fails its health check."""

    def __init__(self, message: str, rolled_back: bool = False):
        super().__init__(message)
        self.rolled_back = rolled_back


@dataclass
class TestResult:
    """Outcome of one unit test."""

    __test__ = False

    test_name: str
    passed: bool
    execution_time_us: int = 0
    error_message: str = ""
    stack_trace: str = ""


@dataclass
class BuildConfig:
    """Options for a build."""

    project_path: str = ""
    build_command: str = ""
    test_command: str = ""
    enable_optimizations: bool = False
    enable_debug_symbols: bool = False
    enable_warnings_as_errors: bool = False
    num_build_threads: int = 1
    ai_optimize_build_order: bool = False
    ai_predict_failures: bool = False
    ai_cache_results: bool = False


@dataclass
class BuildJob:
    """A queued or finished build with its log, test results and predictions."""

    job_id: int
    status: BuildStatus = BuildStatus.QUEUED
    project_path: str = DEFAULT_PROJECT_PATH
    commit_hash: str = ""
    branch: str = ""
    author: str = ""
    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: int = 0
    tests_run: int = 0
    tests_passed: int = 0
    tests_failed: int = 0
    test_results: list[TestResult] = field(default_factory=list)
    build_log: str = ""
    predicted_success_probability: float = 0.0
    predicted_build_time_ms: float = 0.0
    artifact_path: str = ""
    artifact_size: int = 0


@dataclass
class PipelineStage:
    """One step of a CI pipeline."""

    name: str
    command: str
    allow_failure: bool = False
    timeout_seconds: int = DEFAULT_STAGE_TIMEOUT


@dataclass
class Pipeline:
    """A named sequence of CI stages with triggers and run statistics."""

    name: str
    stages: list[PipelineStage] = field(default_factory=list)
    on_push: bool = False
    on_pull_request: bool = False
    on_schedule: bool = False
    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    success_rate: float = 0.0

    def add_stage(self, name: str, command: str) -> PipelineStage:
        """Append a stage; names and commands are truncated to their limits."""
        if len(self.stages) >= MAX_STAGES:
            raise ValueError(f"a pipeline has at most {MAX_STAGES} stages")
        stage = PipelineStage(name[:MAX_STAGE_NAME], command[:MAX_STAGE_COMMAND])
        self.stages.append(stage)
        log.info("[DevOps] Added stage '%s' to pipeline '%s'", stage.name, self.name)
        return stage


@dataclass
class DeploymentConfig:
    """Where and how to deploy, and how to check the result."""

    environment: str = "dev"
    target_host: str = "localhost"
    target_port: int = 80
    strategy: DeployStrategy = DeployStrategy.ROLLING
    health_check_url: str = ""
    health_check_interval_seconds: int = 1
    health_check_retries: int = 3
    auto_rollback_on_failure: bool = False
    previous_version: str = ""


@dataclass
class DevOpsMetrics:
    """Running build, coverage, quality and prediction figures."""

    avg_build_time_ms: int = 0
    avg_test_time_ms: int = 0
    code_coverage_percent: float = 0.0
    total_lines: int = 0
    covered_lines: int = 0
    bugs_found: int = 0
    security_issues: int = 0
    code_smells: int = 0
    predicted_failure_rate: float = 0.0
    predicted_next_build_time_ms: int = 0


class DevOpsEngine:
    """Runs build jobs and deployments and keeps their history and metrics.

    ``rng`` supplies ``randrange``, ``clock`` returns wall time in seconds and
    ``sleeper`` waits for a number of seconds; all three may be replaced.
    """

    def __init__(self, rng: random.Random | None = None,
                 clock: Callable[[], float] | None = None,
                 sleeper: Callable[[float], None] | None = None):
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock if clock is not None else time.time
        self._sleep = sleeper if sleeper is not None else time.sleep
        self._lock = threading.Lock()
        self.jobs: list[BuildJob] = []
        self.pipelines: list[Pipeline] = []
        self.metrics = DevOpsMetrics()
        log.info("[DevOps] AI-powered DevOps engine initialized")

    def create_build_job(self, config: BuildConfig) -> BuildJob:
        """Queue a new job, predicting its success probability and build time."""
        with self._lock:
            if len(self.jobs) >= MAX_JOBS:
                raise RuntimeError(f"at most {MAX_JOBS} build jobs are kept")
            job = BuildJob(
                job_id=len(self.jobs) + 1,
                project_path=config.project_path or DEFAULT_PROJECT_PATH,
                start_time=self._clock(),
            )
            job.predicted_success_probability = 1.0 - self.predict_failure_probability()
            job.predicted_build_time_ms = self.predict_build_time(config)
            self.jobs.append(job)
        log.info("[DevOps] Created build job #%d", job.job_id)
        log.info("[DevOps]   Predicted success: %.1f%%",
                 job.predicted_success_probability * 100)
        log.info("[DevOps]   Predicted time: %.1f seconds",
                 job.predicted_build_time_ms / 1000.0)
        return job

    def start_build(self, job: BuildJob) -> BuildJob:
        """Run the build steps and tests, fill in the log and set the final status."""
        log.info("[DevOps] Starting build job #%d", job.job_id)
        job.status = BuildStatus.IN_PROGRESS
        job.start_time = self._clock()

        parts = [
            _RULE,
            "AION OS Build System - AI-Powered\n",
            _RULE,
            f"Build Job: #{job.job_id}\n",
            f"Time: {time.ctime(job.start_time)}\n",
            _RULE,
            "\n",
            "[1/5] Analyzing dependencies...\n",
            "  ✓ Found 42 source files\n",
            "  ✓ Resolved 15 dependencies\n",
            "  AI: Optimized build order for 23% faster compilation\n\n",
            "[2/5] Compiling source files...\n",
            "  [CC] kernel/core/kernel.c\n",
            "  [CC] kernel/memory/memory.c\n",
            "  [CC] kernel/process/process.c\n",
            "  ... (39 more files)\n",
            "  ✓ Compilation complete (8.2s)\n\n",
            "[3/5] Running AI code analysis...\n",
            "  AI: Detected 0 memory leaks\n",
            "  AI: Detected 2 potential null pointer dereferences (warnings)\n",
            "  AI: Code quality score: 94/100\n\n",
            "[4/5] Running unit tests...\n",
        ]

        results = self.run_tests(job.project_path)
        job.test_results = results
        job.tests_run = len(results)
        job.tests_passed = sum(1 for r in results if r.passed)
        job.tests_failed = job.tests_run - job.tests_passed
        for result in results:
            if result.passed:
                parts.append(
                    f"  ✓ {result.test_name} ({result.execution_time_us / 1000.0:.2f} ms)\n")
            else:
                parts.append(f"  ✗ {result.test_name} - {result.error_message}\n")
        parts.append(
            f"\n  Tests: {job.tests_passed} passed, {job.tests_failed} failed, "
            f"{job.tests_run} total\n\n")

        parts += [
            "[5/5] Creating artifacts...\n",
            "  ✓ Created aion-kernel.bin (1.8 MB)\n",
            "  ✓ Created aion-os.iso (128 MB)\n\n",
        ]

        if job.tests_failed == 0:
            job.status = BuildStatus.SUCCESS
            parts += [_RULE, "BUILD SUCCESS\n", _RULE]
            self.metrics.total_lines += 15000
            self.metrics.covered_lines += 14200
        else:
            job.status = BuildStatus.FAILED
            parts += [_RULE, "BUILD FAILED\n", _RULE]

        job.end_time = self._clock()
        job.duration_ms = max(0, int((job.end_time - job.start_time) * 1000))
        parts.append(f"Total time: {job.duration_ms / 1000.0:.2f} seconds\n")
        job.build_log = "".join(parts)

        self.metrics.avg_build_time_ms = (
            self.metrics.avg_build_time_ms * 7 + job.duration_ms) // 8

        log.info("[DevOps] Build job #%d %s in %.2f seconds", job.job_id,
                 "SUCCEEDED" if job.status == BuildStatus.SUCCESS else "FAILED",
                 job.duration_ms / 1000.0)
        return job

    def run_tests(self, project_path: str) -> list[TestResult]:
        """Run the unit test set; each test passes with a 90% chance."""
        log.info("[DevOps] Running unit tests in %s", project_path)
        results = []
        for name in TEST_NAMES:
            start = self._clock()
            passed = self._rng.randrange(100) < TEST_SUCCESS_PERCENT
            end = self._clock()
            result = TestResult(name, passed, max(0, int((end - start) * 1_000_000)))
            if not passed:
                result.error_message = f"Assertion failed at line {self._rng.randrange(500)}"
            results.append(result)
        log.info("[DevOps] Executed %d tests", len(results))
        return results

    def predict_build_time(self, config: BuildConfig) -> float:
        """Predict build time in milliseconds from the historical average."""
        if self.metrics.avg_build_time_ms > 0:
            return float(self.metrics.avg_build_time_ms)
        return DEFAULT_BUILD_TIME_MS

    def predict_failure_probability(self) -> float:
        """Base failure rate raised by the share of failures among the last 10 jobs."""
        rate = BASE_FAILURE_RATE
        recent = self.jobs[-RECENT_WINDOW:]
        if recent:
            failures = sum(1 for job in recent if job.status == BuildStatus.FAILED)
            rate += failures / len(recent) * 0.2
        return rate

    def suggest_optimizations(self, project_path: str) -> list[str]:
        """Suggest ways to speed up builds and improve test coverage."""
        log.info("[DevOps AI] Analyzing project for optimization opportunities...")
        suggestions = [
            "Enable link-time optimization (LTO) to reduce binary size by ~15%",
            "Use ccache to speed up recompilation by ~40%",
            "Parallelize tests across 4 cores to reduce test time by ~60%",
            "Enable incremental compilation to speed up rebuilds by ~80%",
            "Use precompiled headers for common includes to save ~2.3 seconds per file",
        ]
        if self.metrics.code_coverage_percent < 80.0:
            suggestions.append("Increase test coverage from 70% to 80% to catch more bugs")
        log.info("[DevOps AI] Generated %d optimization suggestions", len(suggestions))
        return suggestions

    def create_pipeline(self, name: str) -> Pipeline:
        """Create and register a pipeline; the name is truncated to 127 characters."""
        pipeline = Pipeline(name[:MAX_PIPELINE_NAME])
        with self._lock:
            if len(self.pipelines) >= MAX_PIPELINES:
                raise RuntimeError(f"at most {MAX_PIPELINES} pipelines are kept")
            self.pipelines.append(pipeline)
        log.info("[DevOps] Created pipeline: %s", pipeline.name)
        return pipeline

    def deploy(self, config: DeploymentConfig, artifact_path: str) -> None:
        """Deploy an artifact and verify it; raise DeploymentError if it is unhealthy."""
        log.info("[DevOps] Deploying %s to %s environment...", artifact_path, config.environment)
        log.info("[DevOps]   Target: %s:%d", config.target_host, config.target_port)
        log.info("[DevOps]   Strategy: %s", config.strategy.value)
        for step, pause in (("[1/4] Uploading artifact...", 1.0),
                            ("[2/4] Stopping old version...", 0.5),
                            ("[3/4] Starting new version...", 1.0),
                            ("[4/4] Running health checks...", 0.5)):
            log.info("[DevOps]   %s", step)
            self._sleep(pause)

        if self.health_check(config):
            log.info("[DevOps] ✓ Deployment successful!")
            return

        log.info("[DevOps] ✗ Deployment failed health check")
        rolled_back = False
        if config.auto_rollback_on_failure:
            log.info("[DevOps]   Initiating automatic rollback to %s...",
                     config.previous_version or "previous version")
            rolled_back = True
        raise DeploymentError("Deployment failed health check", rolled_back=rolled_back)

    def health_check(self, config: DeploymentConfig) -> bool:
        """Probe the service up to the configured number of times."""
        log.info("[DevOps] Checking health of %s...", config.health_check_url)
        for attempt in range(1, config.health_check_retries + 1):
            if self._rng.randrange(100) < HEALTH_CHECK_SUCCESS_PERCENT:
                log.info("[DevOps]   Attempt %d/%d... ✓ Healthy",
                         attempt, config.health_check_retries)
                return True
            log.info("[DevOps]   Attempt %d/%d... ✗ Failed",
                     attempt, config.health_check_retries)
            self._sleep(config.health_check_interval_seconds)
        return False

    def render_report(self) -> str:
        """Return the DevOps report as Markdown text."""
        metrics = self.metrics
        total = len(self.jobs)
        successful = sum(1 for job in self.jobs if job.status == BuildStatus.SUCCESS)
        success_rate = successful / total * 100 if total else 0.0
        coverage = (metrics.covered_lines / metrics.total_lines * 100
                    if metrics.total_lines else 0.0)
        return (
            "# AION OS - AI DevOps Report\n\n"
            f"Generated: {time.ctime(self._clock())}\n\n"
            "## Build Statistics\n\n"
            f"- Total builds: {total}\n"
            f"- Average build time: {metrics.avg_build_time_ms / 1000.0:.2f} seconds\n"
            f"- Success rate: {success_rate:.1f}%\n\n"
            "## Test Coverage\n\n"
            f"- Total lines: {metrics.total_lines}\n"
            f"- Covered lines: {metrics.covered_lines}\n"
            f"- Coverage: {coverage:.1f}%\n\n"
            "## Code Quality\n\n"
            f"- Bugs found: {metrics.bugs_found}\n"
            f"- Security issues: {metrics.security_issues}\n"
            f"- Code smells: {metrics.code_smells}\n\n"
            "## AI Predictions\n\n"
            f"- Predicted failure rate: {metrics.predicted_failure_rate * 100:.1f}%\n"
            "- Predicted next build time: "
            f"{metrics.predicted_next_build_time_ms / 1000.0:.2f} seconds\n"
        )

    def generate_report(self, output_file: str | Path) -> None:
        """Write the report to a file."""
        Path(output_file).write_text(self.render_report(), encoding="utf-8")
        log.info("[DevOps] Report generated: %s", output_file)