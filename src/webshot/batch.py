from __future__ import annotations

import logging

from webshot.comparison.compare import compare_files
from webshot.config import ComparisonJob, ComparisonPlan
from webshot.errors import (
    ConfigurationError,
    DiffImageWriteError,
    DimensionMismatchError,
    EmptyImageError,
    ImageLoadError,
    WebshotError,
)
from webshot.report import BatchReport, JobOutcome, summarize

logger = logging.getLogger(__name__)

ERROR_REASONS: dict[type[WebshotError], str] = {
    ConfigurationError: "invalid_configuration",
    ImageLoadError: "image_load_failed",
    DimensionMismatchError: "dimension_mismatch",
    EmptyImageError: "empty_image",
    DiffImageWriteError: "diff_write_failed",
}


def _reason_for(error: WebshotError) -> str:
    for error_type, reason in ERROR_REASONS.items():
        if isinstance(error, error_type):
            return reason
    return "comparison_failed"


def run_job(plan: ComparisonPlan, job: ComparisonJob) -> JobOutcome:
    baseline = plan.resolve(job.baseline)
    actual = plan.resolve(job.actual)
    try:
        options = plan.effective_config(job).to_options(plan.base_dir)
        result = compare_files(baseline, actual, options)
    except WebshotError as e:
        logger.warning(
            "Comparison job failed",
            extra={"job": job.name, "baseline": str(baseline), "actual": str(actual)},
            exc_info=True,
        )
        return JobOutcome(
            name=job.name,
            status="errored",
            baseline=str(baseline),
            actual=str(actual),
            reason=_reason_for(e),
            error=str(e),
        )

    return JobOutcome(
        name=job.name,
        status="similar" if result.similar else "different",
        baseline=str(baseline),
        actual=str(actual),
        result=result,
    )


def run_plan(plan: ComparisonPlan) -> BatchReport:
    logger.info("Running comparison plan", extra={"comparisons": len(plan.comparisons)})
    outcomes = [run_job(plan, job) for job in plan.comparisons]
    report = summarize(outcomes)
    logger.info(
        "Comparison plan finished",
        extra={
            "total": report.summary.total,
            "similar": report.summary.similar,
            "different": report.summary.different,
            "errored": report.summary.errored,
        },
    )
    return report
