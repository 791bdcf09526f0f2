"""
Job processor with a per-job circuit breaker.

Conversion failures never halt a batch: validation, routing and collaborator
errors are counted against the job, which is retried in place until it
reaches max_failures and is abandoned. Mode and re-entrancy errors abort the
whole call.
"""

import structlog

from fee_distributor.core.exceptions import (
    CollaboratorError,
    DistributorValidationError,
    FeeDistributorException,
    InvalidAmountError,
    ReentrancyError,
    RoutingError,
)
from fee_distributor.core.types import BatchResult, EventType, JobType, ProcessingJob
from .balance_tracker import BalanceTracker
from .context import PipelineContext
from .conversion_router import ConversionRouter
from .distribution_gate import DistributionGate
from .job_queue import PriorityJobQueue


logger = structlog.get_logger(__name__)

# Errors that count as a failed attempt of a single job
JOB_FAILURES = (DistributorValidationError, RoutingError, CollaboratorError)


class JobProcessor:
    """Drains the priority queue through the conversion router."""

    def __init__(
        self,
        ctx: PipelineContext,
        queue: PriorityJobQueue,
        router: ConversionRouter,
        tracker: BalanceTracker,
        gate: DistributionGate,
    ):
        self.ctx = ctx
        self.queue = queue
        self.router = router
        self.tracker = tracker
        self.gate = gate
        self.logger = logger.bind(service="job_processor")

    def process(self, requested_successes: int) -> BatchResult:
        if requested_successes <= 0:
            raise InvalidAmountError(
                "Requested job count must be positive",
                {"requested": requested_successes}
            )

        target = min(requested_successes, self.ctx.settings.max_jobs_per_batch)
        result = BatchResult(requested=requested_successes, target=target)

        while result.succeeded < target and len(self.queue) > 0:
            job = self.queue.peek()
            result.attempted += 1
            try:
                consumed = self._execute(job)
            except JOB_FAILURES as e:
                self._record_failure(job, e, result)
                self.ctx.guard.checkpoint(self.ctx.state)
                continue

            self.queue.remove(job)
            self.tracker.release(job.asset, job.amount)
            self.tracker.consume(job.asset, consumed)
            self.ctx.state.total_jobs_processed += 1
            result.succeeded += 1
            self.ctx.emit(
                EventType.JOB_PROCESSED,
                token=job.asset,
                amount=job.amount,
                job_type=job.job_type.value,
            )
            # A later abort must not undo a conversion that already happened
            self.ctx.guard.checkpoint(self.ctx.state)

        if result.succeeded > 0:
            result.distributed = self._auto_distribute()

        self.logger.info(
            "Batch processed",
            target=target,
            attempted=result.attempted,
            succeeded=result.succeeded,
            failed=result.failed,
            abandoned=result.abandoned,
            distributed=result.distributed,
            queue_length=len(self.queue)
        )
        return result

    def _execute(self, job: ProcessingJob) -> int:
        """Convert the job's amount, capped by holdings; returns the amount consumed."""
        if job.job_type is JobType.REWARD_ASSET:
            return 0

        holdings = self.ctx.holdings(job.asset)
        amount = min(job.amount, holdings)
        if amount == 0:
            raise InvalidAmountError(
                f"No holdings left for queued {job.asset}",
                {"asset": job.asset, "job_amount": job.amount}
            )
        self.router.convert(job.asset, amount)
        return amount

    def _record_failure(self, job: ProcessingJob, error: FeeDistributorException, result: BatchResult) -> None:
        state = self.ctx.state
        job.failure_count += 1
        state.failure_count += 1
        state.total_jobs_failed += 1
        result.failed += 1
        result.errors.append(f"{job.asset}: {error.code}")
        # Part of the job may have moved funds before failing
        self.ctx.clamp_snapshot(job.asset)

        if job.failure_count >= self.ctx.settings.max_failures:
            self.queue.remove(job)
            self.tracker.release(job.asset, job.amount)
            result.abandoned += 1
            self.ctx.emit(
                EventType.JOB_ABANDONED,
                token=job.asset,
                amount=job.amount,
                failures=job.failure_count,
                reason=error.code,
            )
            self.logger.warning(
                "Job abandoned",
                asset=job.asset,
                amount=job.amount,
                failures=job.failure_count,
                error=error.message
            )
        else:
            self.ctx.emit(
                EventType.JOB_FAILED,
                token=job.asset,
                amount=job.amount,
                failures=job.failure_count,
                reason=error.code,
            )
            self.logger.info(
                "Job attempt failed, will retry",
                asset=job.asset,
                failures=job.failure_count,
                error=error.message
            )

    def _auto_distribute(self) -> int:
        """Opportunistic payout after a productive batch; never fails the batch."""
        if not self.ctx.settings.auto_distribute or not self.gate.can_distribute():
            return 0
        try:
            return self.gate.distribute()
        except ReentrancyError:
            raise
        except FeeDistributorException as e:
            self.logger.warning("Auto-distribution skipped", error=e.message, code=e.code)
            return 0
