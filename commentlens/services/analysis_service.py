# commentlens/services/analysis_service.py
"""
Analysis Service
Drives one analysis run from a raw video URL to a persisted report

Steps advance strictly in order; the first failure ends the run with a
single user-facing message. Nothing is retried or compensated: a credit
spent in the deduct step stays spent whatever happens afterwards.
"""

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Set

from commentlens.app.config import get_config
from commentlens.domain.interfaces import (
    Navigate,
    PersistenceGateway,
    ReportGenerator,
    VideoDataGateway,
)
from commentlens.domain.models import AnalysisReport, UserProfile
from commentlens.services.exceptions import (
    InsufficientCreditsError,
    ServiceError,
    ValidationError,
)
from commentlens.utils.validators import extract_video_id, filter_valid_comments

logger = logging.getLogger(__name__)

NO_COMMENTS_MESSAGE = (
    "No comments found for this video. The video may have comments disabled."
)
NO_VALID_COMMENTS_MESSAGE = (
    "No valid comment data found. Comment data may be malformed."
)


class AnalysisStep(IntEnum):
    VALIDATE = 0
    EXTRACT_ID = 1
    DEDUCT_CREDIT = 2
    FETCH_DATA = 3
    VALIDATE_COMMENTS = 4
    GENERATE_REPORT = 5
    PERSIST = 6
    COMPLETE = 7


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = {RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED}


@dataclass
class AnalysisRun:
    """Observable state of one pipeline run"""

    user_id: str
    video_url: str
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    step: AnalysisStep = AnalysisStep.VALIDATE
    status: RunStatus = RunStatus.PENDING
    error: Optional[str] = None
    error_type: Optional[str] = None
    video_id: Optional[str] = None
    video_title: Optional[str] = None
    report_id: Optional[str] = None
    redirect_to: Optional[str] = None
    navigated_to: Optional[str] = None
    cancelled: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def progress(self) -> float:
        """Fraction of steps completed, 0.0 to 1.0"""
        return round(int(self.step) / int(AnalysisStep.COMPLETE), 3)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "user_id": self.user_id,
            "video_url": self.video_url,
            "video_id": self.video_id,
            "video_title": self.video_title,
            "step": int(self.step),
            "step_name": self.step.name.lower(),
            "status": self.status.value,
            "progress": self.progress,
            "error": self.error,
            "error_type": self.error_type,
            "report_id": self.report_id,
            "redirect_to": self.redirect_to,
            "navigated_to": self.navigated_to,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class _StepFailed(Exception):
    """Internal signal carrying the user-facing message of a failed step"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


# ============================================================================
# Run Registry
# ============================================================================


class AnalysisRunRegistry:
    """
    In-memory index of runs for status polling

    Holds at most ``max_runs`` entries: once full, the oldest finished runs
    are evicted on insert. Unfinished runs are never evicted.
    """

    def __init__(self, max_runs: int = 500):
        self.max_runs = max_runs
        self._runs: Dict[str, AnalysisRun] = {}
        self._lock = threading.Lock()

    def add(self, run: AnalysisRun) -> AnalysisRun:
        with self._lock:
            self._runs[run.run_id] = run
            self._prune()
        return run

    def _prune(self) -> None:
        overflow = len(self._runs) - self.max_runs
        if overflow <= 0:
            return
        finished = sorted(
            (r for r in self._runs.values() if r.finished),
            key=lambda r: r.finished_at or r.created_at,
        )
        for stale in finished[:overflow]:
            del self._runs[stale.run_id]
        logger.debug(f"🧹 Evicted {min(overflow, len(finished))} finished runs")

    def get(self, run_id: str) -> Optional[AnalysisRun]:
        with self._lock:
            return self._runs.get(run_id)

    def for_user(self, user_id: str) -> List[AnalysisRun]:
        with self._lock:
            runs = [r for r in self._runs.values() if r.user_id == user_id]
        return sorted(runs, key=lambda r: r.created_at, reverse=True)

    def __len__(self) -> int:
        return len(self._runs)


# ============================================================================
# Orchestrator
# ============================================================================


class AnalysisOrchestrator:
    """
    Pipeline controller

    Gateways are injected so tests can substitute mocks. ``navigate`` is
    called with the report route after a successful run (delayed) and with
    the dashboard route on cancellation.
    """

    def __init__(
        self,
        video_gateway: VideoDataGateway,
        report_generator: ReportGenerator,
        persistence: PersistenceGateway,
        navigate: Optional[Navigate] = None,
        registry: Optional[AnalysisRunRegistry] = None,
        config=None,
    ):
        self.config = config or get_config()
        self.video_gateway = video_gateway
        self.report_generator = report_generator
        self.persistence = persistence
        self.navigate = navigate
        self.registry = registry or AnalysisRunRegistry(
            max_runs=self.config.analysis.run_retention
        )

        self.max_comments = self.config.analysis.max_comments
        self.navigation_delay = self.config.analysis.navigation_delay_seconds
        self.embed_comments = self.config.analysis.embed_comments
        self.report_route = self.config.api.report_route
        self.dashboard_route = self.config.api.dashboard_route

        self._tasks: Set[asyncio.Task] = set()

    # ========================================================================
    # Public API
    # ========================================================================

    def create_run(self, url: str, user_id: str) -> AnalysisRun:
        return self.registry.add(AnalysisRun(user_id=user_id, video_url=url or ""))

    def start(self, url: str, profile: Optional[UserProfile], user_id: str) -> AnalysisRun:
        """Register a run and execute it in the background"""
        run = self.create_run(url, user_id)
        task = asyncio.get_running_loop().create_task(self.run(url, profile, run=run))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return run

    async def run(
        self,
        url: str,
        profile: Optional[UserProfile],
        run: Optional[AnalysisRun] = None,
    ) -> AnalysisRun:
        """
        Execute the pipeline once

        Never raises for step failures; inspect ``run.status`` and
        ``run.error`` instead.
        """
        if run is None:
            run = self.create_run(url, profile.uid if profile else "")
        if run.cancelled:
            logger.info(f"Run {run.run_id} cancelled before it started")
            return run
        run.status = RunStatus.RUNNING

        try:
            await self._execute(run, url, profile)
        except _StepFailed as failure:
            self._fail(run, failure)

        return run

    def cancel(self, run: AnalysisRun) -> bool:
        """
        Stop a run from progressing and navigate back to the dashboard

        Work already done (a deducted credit, in-flight requests) is kept.
        """
        if run.finished:
            logger.info(f"Run {run.run_id} already {run.status.value}, nothing to cancel")
            return False

        run.cancelled = True
        run.status = RunStatus.CANCELLED
        run.finished_at = datetime.utcnow()
        run.redirect_to = self.dashboard_route
        logger.warning(f"🛑 Analysis {run.run_id} cancelled at step {run.step.name}")
        self._navigate(run, self.dashboard_route)
        return True

    async def wait_all(self) -> None:
        """Await every background run started by this orchestrator"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ========================================================================
    # Steps
    # ========================================================================

    async def _execute(
        self, run: AnalysisRun, url: str, profile: Optional[UserProfile]
    ) -> None:
        # Step 0: preconditions
        if not self._advance(run, AnalysisStep.VALIDATE):
            return
        if not url:
            raise _StepFailed(
                "Please provide a YouTube video URL",
                ValidationError("Please provide a YouTube video URL", field="url"),
            )
        if profile is None:
            raise _StepFailed(
                "User profile not loaded",
                ValidationError("User profile not loaded", field="profile"),
            )
        if profile.credits < 1:
            error = InsufficientCreditsError(profile.uid, profile.credits)
            raise _StepFailed(error.message, error)

        # Step 1: extract the video id
        if not self._advance(run, AnalysisStep.EXTRACT_ID):
            return
        video_id = extract_video_id(url)
        if not video_id:
            raise _StepFailed(
                "Invalid YouTube URL", ValidationError("Invalid YouTube URL", field="url")
            )
        run.video_id = video_id

        # Step 2: spend the credit
        if not self._advance(run, AnalysisStep.DEDUCT_CREDIT):
            return
        try:
            deducted = await self.persistence.deduct_credit(profile.uid)
        except Exception as e:
            raise _StepFailed(f"Error deducting credit: {e}", e) from e
        if not deducted:
            raise _StepFailed(
                "Failed to deduct credit", InsufficientCreditsError(profile.uid)
            )

        # Step 3: details and comments, fetched concurrently
        if not self._advance(run, AnalysisStep.FETCH_DATA):
            return
        try:
            data = await self.video_gateway.fetch_analysis_data(
                video_id, self.max_comments
            )
        except Exception as e:
            raise _StepFailed(f"Error fetching video data: {e}", e) from e
        run.video_title = data.video_details.title

        # Step 4: drop malformed comments
        if not self._advance(run, AnalysisStep.VALIDATE_COMMENTS):
            return
        if not data.comments:
            raise _StepFailed(NO_COMMENTS_MESSAGE)
        valid_comments, removed = filter_valid_comments(data.comments)
        if not valid_comments:
            raise _StepFailed(NO_VALID_COMMENTS_MESSAGE)
        logger.info(
            f"💬 {len(valid_comments)} comments ready for analysis ({removed} removed)"
        )

        # Step 5: generate
        if not self._advance(run, AnalysisStep.GENERATE_REPORT):
            return
        details = data.video_details
        try:
            report = await self.report_generator.generate(
                details.title, details.description, valid_comments
            )
        except Exception as e:
            raise _StepFailed(f"Error analyzing comments: {e}", e) from e

        # Step 6: persist
        if not self._advance(run, AnalysisStep.PERSIST):
            return
        report_data = self._report_document(report, valid_comments)
        try:
            report_id = await self.persistence.save_report(
                profile.uid, video_id, details.title, url, report_data
            )
        except Exception as e:
            raise _StepFailed(f"Error saving report: {e}", e) from e
        run.report_id = report_id

        # Step 7: done, redirect after a short pause
        if not self._advance(run, AnalysisStep.COMPLETE):
            return
        run.status = RunStatus.COMPLETED
        run.finished_at = datetime.utcnow()
        run.redirect_to = self.report_route.format(report_id=report_id)
        logger.info(
            f"✅ Analysis {run.run_id} complete, report {report_id}; "
            f"navigating in {self.navigation_delay}s"
        )
        asyncio.get_running_loop().call_later(
            self.navigation_delay, self._navigate, run, run.redirect_to
        )

    # ========================================================================
    # Helpers
    # ========================================================================

    def _advance(self, run: AnalysisRun, step: AnalysisStep) -> bool:
        """Move to ``step``; False once the run has been cancelled"""
        if run.cancelled:
            logger.info(f"Run {run.run_id} cancelled, not entering {step.name}")
            return False
        run.step = step
        logger.info(f"➡️  Analysis {run.run_id} step {int(step)}: {step.name}")
        return True

    def _fail(self, run: AnalysisRun, failure: _StepFailed) -> None:
        if run.cancelled:
            logger.info(f"Ignoring failure of cancelled run {run.run_id}: {failure.message}")
            return
        run.status = RunStatus.FAILED
        run.error = failure.message
        run.finished_at = datetime.utcnow()
        if isinstance(failure.cause, ServiceError):
            run.error_type = type(failure.cause).__name__
        elif failure.cause is not None:
            run.error_type = "ServiceError"
        else:
            run.error_type = "ValidationError"
        logger.error(
            f"❌ Analysis {run.run_id} failed at step {int(run.step)} "
            f"({run.step.name}): {failure.message}"
        )

    def _navigate(self, run: AnalysisRun, route: str) -> None:
        if run.cancelled and route != self.dashboard_route:
            return
        run.navigated_to = route
        if self.navigate is not None:
            self.navigate(route)

    def _report_document(
        self, report: Any, comments: List[Any]
    ) -> Dict[str, Any]:
        if isinstance(report, AnalysisReport):
            document = report.to_document()
        else:
            document = dict(report)
        if self.embed_comments:
            document["comments"] = [
                c.model_dump(by_alias=True) if hasattr(c, "model_dump") else dict(c)
                for c in comments
            ]
        return document
