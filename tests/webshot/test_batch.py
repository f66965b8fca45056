from __future__ import annotations

from pathlib import Path

from PIL import Image

from webshot.batch import run_plan
from webshot.config import ComparisonConfig, ComparisonJob, ComparisonPlan


def _write(path: Path, size: tuple[int, int], color: tuple[int, int, int]) -> Path:
    Image.new("RGB", size, color).save(path)
    return path


class TestRunPlan:
    def test_statuses_and_reasons(self, tmp_path):
        _write(tmp_path / "red.png", (10, 10), (255, 0, 0))
        _write(tmp_path / "red_copy.png", (10, 10), (255, 0, 0))
        _write(tmp_path / "green.png", (10, 10), (0, 255, 0))
        _write(tmp_path / "wide.png", (20, 10), (255, 0, 0))

        plan = ComparisonPlan(
            base_dir=tmp_path,
            comparisons=[
                ComparisonJob(name="same", baseline=Path("red.png"), actual=Path("red_copy.png")),
                ComparisonJob(name="changed", baseline=Path("red.png"), actual=Path("green.png")),
                ComparisonJob(name="resized", baseline=Path("red.png"), actual=Path("wide.png")),
                ComparisonJob(name="missing", baseline=Path("red.png"), actual=Path("nope.png")),
                ComparisonJob(
                    name="bad-config",
                    baseline=Path("red.png"),
                    actual=Path("red_copy.png"),
                    comparison=ComparisonConfig(threshold=3.0),
                ),
            ],
        )

        report = run_plan(plan)

        by_name = {job.name: job for job in report.jobs}
        assert by_name["same"].status == "similar"
        assert by_name["changed"].status == "different"
        assert by_name["changed"].result is not None
        assert by_name["changed"].result.different_pixels == 100
        assert by_name["resized"].status == "errored"
        assert by_name["resized"].reason == "dimension_mismatch"
        assert by_name["missing"].reason == "image_load_failed"
        assert by_name["bad-config"].reason == "invalid_configuration"
        assert by_name["same"].baseline == str(tmp_path / "red.png")

        assert report.summary.total == 5
        assert report.summary.similar == 1
        assert report.summary.different == 1
        assert report.summary.errored == 3
        assert report.passed is False

    def test_per_job_diff_images(self, tmp_path):
        _write(tmp_path / "red.png", (4, 4), (255, 0, 0))
        _write(tmp_path / "green.png", (4, 4), (0, 255, 0))
        plan = ComparisonPlan(
            base_dir=tmp_path,
            comparisons=[
                ComparisonJob(
                    name="home",
                    baseline=Path("red.png"),
                    actual=Path("green.png"),
                    comparison=ComparisonConfig(
                        generate_diff=True, diff_output_path=Path("home-diff.png")
                    ),
                )
            ],
        )

        report = run_plan(plan)

        result = report.jobs[0].result
        assert result is not None
        assert result.diff_image_path == tmp_path / "home-diff.png"
        assert (tmp_path / "home-diff.png").exists()

    def test_oversized_image_does_not_stop_the_run(self, tmp_path, monkeypatch):
        _write(tmp_path / "big.png", (10, 10), (255, 0, 0))
        _write(tmp_path / "small.png", (2, 2), (255, 0, 0))
        _write(tmp_path / "small_copy.png", (2, 2), (255, 0, 0))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        plan = ComparisonPlan(
            base_dir=tmp_path,
            comparisons=[
                ComparisonJob(name="big", baseline=Path("big.png"), actual=Path("big.png")),
                ComparisonJob(
                    name="small", baseline=Path("small.png"), actual=Path("small_copy.png")
                ),
            ],
        )

        report = run_plan(plan)

        big, small = report.jobs
        assert big.status == "errored"
        assert big.reason == "image_load_failed"
        assert small.status == "similar"
        assert report.summary.errored == 1
        assert report.summary.similar == 1

    def test_empty_plan_passes(self):
        report = run_plan(ComparisonPlan())
        assert report.summary.total == 0
        assert report.passed is True
