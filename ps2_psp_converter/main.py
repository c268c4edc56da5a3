"""
Command-line entry point for the PS2 → PSP converter.

Orchestrates the process of:
1. Parsing arguments and loading configuration.
2. Setting up logging.
3. Running the conversion pipeline (connectivity check, folder scan,
   Perplexity plan request, PSP skeleton generation).
4. Funneling any failure into a single crash report and exit code.

Usage::

    ps2-to-psp --source-folder path/to/extracted_game --output psp_project
    python -m ps2_psp_converter --source-folder path/to/extracted_game
"""
import argparse
import asyncio
import logging
import os
from typing import Callable, List, Optional

from .config_loader import build_pipeline_config, load_config
from .crash_reporter import report_fatal_error
from .logger_setup import setup_logging
from .pipeline import ConversionPipeline, PipelineOutcome

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scan an extracted PS2 game folder and generate a PSP project skeleton "
                    "from a Perplexity conversion plan."
    )
    parser.add_argument(
        "--source-folder", "--ps2-folder",
        dest="source_folder",
        type=str,
        required=True,
        help="Path to the extracted PS2 game folder."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output folder where the PSP project will be generated (default: output)."
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Perplexity API key (overrides the PERPLEXITY_API_KEY env var)."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional YAML configuration file overriding the packaged defaults."
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=os.environ.get("PS2PSP_LOGLEVEL"),
        help="Logging verbosity (default from config or env PS2PSP_LOGLEVEL)."
    )
    return parser


def run_guarded(action: Callable[[], PipelineOutcome]) -> int:
    """
    Runs `action` behind the process-wide error boundary.

    A FAILED outcome or any uncaught exception is reported exactly once
    through the crash reporter.

    Returns:
        The process exit code.
    """
    try:
        outcome = action()
    except Exception as e:
        report_fatal_error(e)
        return EXIT_FATAL

    if not outcome.succeeded:
        report_fatal_error(outcome.error)
        return EXIT_FATAL
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Primary CLI entry point. Returns an exit code."""
    args = build_parser().parse_args(argv)

    def _convert() -> PipelineOutcome:
        config = load_config(args.config)
        setup_logging(config, level_override=args.log_level)
        pipeline_config = build_pipeline_config(args.source_folder, args.output, args.api_key, config)
        logger.info(f"Source folder: {pipeline_config.source_root} | output folder: {pipeline_config.output_root}")

        outcome = asyncio.run(ConversionPipeline(pipeline_config, config).run())
        if outcome.succeeded:
            logger.info(f"Pipeline completed. Check the output folder: {pipeline_config.output_root}")
        return outcome

    return run_guarded(_convert)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
