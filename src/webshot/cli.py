from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from webshot.batch import run_plan
from webshot.comparison.compare import compare_files
from webshot.comparison.types import ComparisonAlgorithm, ComparisonOptions
from webshot.config import ComparisonConfig, load_comparison_config, load_plan, parse_rgb_color
from webshot.errors import ConfigurationError, DiffImageWriteError, OutputWriteError, WebshotError
from webshot.report import format_batch_report, format_comparison_result, to_json

logger = logging.getLogger(__name__)

EXIT_SIMILAR = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webshot", description="Compare rendered images for visual regressions."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser(
        "compare", aliases=["diff"], help="compare two images for differences"
    )
    compare.add_argument("image1", type=Path, help="first image to compare")
    compare.add_argument("image2", type=Path, help="second image to compare")
    compare.add_argument("-o", "--output", type=Path, help="write results to this file")
    compare.add_argument(
        "-c",
        "--config",
        type=Path,
        help="YAML or JSON comparison settings; command line options take precedence",
    )
    compare.add_argument(
        "-a", "--algorithm", help="pixel-diff, ssim, mse or psnr (default: pixel-diff)"
    )
    compare.add_argument(
        "-t",
        "--threshold",
        type=float,
        help="tolerated dissimilarity, 0.0-1.0 (default: 0.1)",
    )
    compare.add_argument(
        "--diff-image", action="store_true", help="generate an image highlighting differences"
    )
    compare.add_argument("--diff-path", type=Path, help="path for the difference image")
    compare.add_argument(
        "--ignore-antialiasing", action="store_true", help="tolerate anti-aliasing differences"
    )
    compare.add_argument("--diff-color", help="highlight color as R,G,B (default: 255,0,0)")
    compare.add_argument("--format", choices=("text", "json"), default="text")
    compare.set_defaults(handler=_run_compare)

    batch = subparsers.add_parser("batch", help="run the comparisons listed in a plan file")
    batch.add_argument("plan", type=Path, help="YAML or JSON comparison plan")
    batch.add_argument("-o", "--output", type=Path, help="write results to this file")
    batch.add_argument("--format", choices=("text", "json"), default="text")
    batch.set_defaults(handler=_run_batch)

    return parser


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        return
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(output, str(e)) from e
    logger.info("Results saved", extra={"output": str(output)})


def _load_settings(args: argparse.Namespace) -> ComparisonConfig:
    if args.config is None:
        config = ComparisonConfig()
    else:
        config = load_comparison_config(args.config)
        if config.diff_output_path is not None and not config.diff_output_path.is_absolute():
            config = config.model_copy(
                update={"diff_output_path": args.config.parent / config.diff_output_path}
            )

    overrides: dict[str, object] = {}
    if args.algorithm is not None:
        overrides["algorithm"] = args.algorithm
    if args.threshold is not None:
        overrides["threshold"] = args.threshold
    if args.diff_image:
        overrides["generate_diff"] = True
    if args.diff_path is not None:
        overrides["diff_output_path"] = args.diff_path
    if args.ignore_antialiasing:
        overrides["ignore_antialiasing"] = True
    if args.diff_color is not None:
        overrides["diff_color"] = args.diff_color
    return config.model_copy(update=overrides)


def _run_compare(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    if settings.generate_diff and settings.diff_output_path is None:
        raise ConfigurationError("Diff path must be specified when --diff-image is used")

    options = ComparisonOptions(
        algorithm=ComparisonAlgorithm.parse(settings.algorithm),
        threshold=settings.threshold,
        generate_diff_image=settings.generate_diff,
        diff_output_path=settings.diff_output_path if settings.generate_diff else None,
        ignore_antialiasing=settings.ignore_antialiasing,
        diff_color=parse_rgb_color(settings.diff_color),
    )
    options.validate()
    if options.diff_output_path is not None:
        try:
            options.diff_output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DiffImageWriteError(options.diff_output_path, str(e)) from e

    result = compare_files(args.image1, args.image2, options)

    if args.format == "json":
        _emit(to_json(result), args.output)
    else:
        _emit(format_comparison_result(result), args.output)

    if result.similar:
        logger.info("Images are similar (similarity: %.2f%%)", result.similarity * 100)
        return EXIT_SIMILAR
    logger.info("Images are different (similarity: %.2f%%)", result.similarity * 100)
    return EXIT_DIFFERENT


def _run_batch(args: argparse.Namespace) -> int:
    report = run_plan(load_plan(args.plan))

    if args.format == "json":
        _emit(to_json(report), args.output)
    else:
        _emit(format_batch_report(report), args.output)

    return EXIT_SIMILAR if report.passed else EXIT_DIFFERENT


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    try:
        return args.handler(args)
    except WebshotError as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
