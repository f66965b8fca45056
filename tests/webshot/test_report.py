from __future__ import annotations

from pathlib import Path

import orjson

from webshot.comparison.types import ComparisonAlgorithm, ComparisonResult
from webshot.report import (
    JobOutcome,
    format_batch_report,
    format_comparison_result,
    summarize,
    to_json,
)


def _result(**kwargs) -> ComparisonResult:
    fields = {
        "similar": False,
        "similarity": 0.75,
        "different_pixels": 25,
        "total_pixels": 100,
        "algorithm": ComparisonAlgorithm.PIXEL_DIFF,
        "threshold": 0.1,
    }
    fields.update(kwargs)
    return ComparisonResult(**fields)


class TestFormatComparisonResult:
    def test_pixel_diff_report(self):
        text = format_comparison_result(_result(diff_image_path=Path("diff.png")))
        assert text == (
            "Image Comparison Results\n"
            "========================\n"
            "\n"
            "Algorithm: PixelDiff\n"
            "Threshold: 0.10\n"
            "Similarity: 0.7500 (75.00%)\n"
            "Similar: NO\n"
            "Different pixels: 25/100 (25.00%)\n"
            "Total pixels: 100\n"
            "Difference image: diff.png\n"
        )

    def test_other_algorithms_omit_pixel_count(self):
        text = format_comparison_result(
            _result(
                similar=True,
                similarity=1.0,
                different_pixels=None,
                algorithm=ComparisonAlgorithm.SSIM,
            )
        )
        assert "Algorithm: SSIM" in text
        assert "Similar: YES" in text
        assert "Different pixels" not in text
        assert "Difference image" not in text


class TestJson:
    def test_result_round_trips_through_json(self):
        data = orjson.loads(to_json(_result()))
        assert data["algorithm"] == "pixel-diff"
        assert data["different_pixels"] == 25
        assert data["diff_image_path"] is None


class TestBatchReport:
    def test_summary_counts(self):
        jobs = [
            JobOutcome(
                name="a", status="similar", baseline="a1", actual="a2", result=_result(similar=True)
            ),
            JobOutcome(name="b", status="different", baseline="b1", actual="b2", result=_result()),
            JobOutcome(
                name="c",
                status="errored",
                baseline="c1",
                actual="c2",
                reason="dimension_mismatch",
                error="Image dimensions don't match: 1x1 vs 2x1",
            ),
        ]
        report = summarize(jobs)
        assert report.summary.total == 3
        assert report.summary.similar == 1
        assert report.summary.different == 1
        assert report.summary.errored == 1
        assert report.passed is False

        text = format_batch_report(report)
        assert "[SIMILAR] a: similarity 0.7500 (PixelDiff)" in text
        assert "[ERRORED] c: dimension_mismatch" in text
        assert "Total: 3, similar: 1, different: 1, errored: 1" in text

    def test_all_similar_passes(self):
        report = summarize(
            [
                JobOutcome(
                    name="a",
                    status="similar",
                    baseline="a1",
                    actual="a2",
                    result=_result(similar=True),
                )
            ]
        )
        assert report.passed is True
