from __future__ import annotations

from typing import Literal

import orjson
from pydantic import BaseModel

from webshot.comparison.types import ComparisonResult


class JobOutcome(BaseModel):
    name: str
    status: Literal["similar", "different", "errored"]
    baseline: str
    actual: str
    result: ComparisonResult | None = None
    reason: str | None = None
    error: str | None = None


class BatchSummary(BaseModel):
    total: int
    similar: int
    different: int
    errored: int


class BatchReport(BaseModel):
    summary: BatchSummary
    jobs: list[JobOutcome]

    @property
    def passed(self) -> bool:
        return self.summary.total == self.summary.similar


def summarize(jobs: list[JobOutcome]) -> BatchReport:
    return BatchReport(
        summary=BatchSummary(
            total=len(jobs),
            similar=sum(1 for j in jobs if j.status == "similar"),
            different=sum(1 for j in jobs if j.status == "different"),
            errored=sum(1 for j in jobs if j.status == "errored"),
        ),
        jobs=jobs,
    )


def to_json(model: BaseModel) -> str:
    return orjson.dumps(model.model_dump(mode="json"), option=orjson.OPT_INDENT_2).decode()


def format_comparison_result(result: ComparisonResult) -> str:
    lines = [
        "Image Comparison Results",
        "========================",
        "",
        f"Algorithm: {result.algorithm.display_name}",
        f"Threshold: {result.threshold:.2f}",
        f"Similarity: {result.similarity:.4f} ({result.similarity * 100:.2f}%)",
        f"Similar: {'YES' if result.similar else 'NO'}",
    ]
    ratio = result.different_ratio
    if result.different_pixels is not None and ratio is not None:
        lines.append(
            f"Different pixels: {result.different_pixels}/{result.total_pixels} "
            f"({ratio * 100:.2f}%)"
        )
    lines.append(f"Total pixels: {result.total_pixels}")
    if result.diff_image_path is not None:
        lines.append(f"Difference image: {result.diff_image_path}")
    return "\n".join(lines) + "\n"


def format_batch_report(report: BatchReport) -> str:
    summary = report.summary
    lines = [
        "Batch Comparison Results",
        "========================",
        "",
    ]
    for job in report.jobs:
        if job.result is not None:
            detail = f"similarity {job.result.similarity:.4f} ({job.result.algorithm.display_name})"
        else:
            detail = job.reason or "unknown"
        lines.append(f"[{job.status.upper()}] {job.name}: {detail}")
        if job.error:
            lines.append(f"    {job.error}")
    lines.append("")
    lines.append(
        f"Total: {summary.total}, similar: {summary.similar}, "
        f"different: {summary.different}, errored: {summary.errored}"
    )
    return "\n".join(lines) + "\n"
