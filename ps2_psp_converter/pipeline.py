"""
Pipeline orchestration for the PS2 → PSP converter.

The run is a linear state machine:

    VALIDATE_CONFIG -> CHECK_CONNECTIVITY -> SCAN -> REQUEST_PLAN
        -> GENERATE_SKELETON -> DONE

Each transition needs the previous step to succeed. The first exception
moves the run to FAILED, carrying the original error; nothing is retried
or resumed. Artifacts flow forward in an immutable PipelineContext.
"""
import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .config_loader import PipelineConfig
from .exceptions import ApiKeyError, SourceFolderError
from .perplexity_client import check_ready, request_plan
from .prompt_builder import build_plan_prompt
from .scanner import DEFAULT_MAX_ENTRIES, scan_folder
from .skeleton_generator import generate_project, write_summary

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    VALIDATE_CONFIG = "validate_config"
    CHECK_CONNECTIVITY = "check_connectivity"
    SCAN = "scan"
    REQUEST_PLAN = "request_plan"
    GENERATE_SKELETON = "generate_skeleton"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


@dataclass(frozen=True)
class PipelineContext:
    """Artifacts produced so far; each step returns a new instance."""
    ready: Optional[bool] = None
    scan_report: Optional[str] = None
    plan: Optional[str] = None


@dataclass(frozen=True)
class PipelineOutcome:
    """Terminal result of a run."""
    state: PipelineState
    context: PipelineContext = field(default_factory=PipelineContext)
    error: Optional[BaseException] = None
    failed_at: Optional[PipelineState] = None

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.DONE


def validate_pipeline_config(config: PipelineConfig) -> None:
    """
    Checks the run's inputs before any network or filesystem writes.

    Raises:
        ApiKeyError: If no API key was provided.
        SourceFolderError: If the source folder is missing or not a directory.
    """
    if not config.api_key:
        raise ApiKeyError("Perplexity API key is required. Use --api-key or PERPLEXITY_API_KEY.")
    if not config.source_root.is_dir():
        raise SourceFolderError(
            f"PS2 folder does not exist or is not a directory: {config.source_root}"
        )


class ConversionPipeline:
    """Runs one conversion from a PS2 folder to a PSP project skeleton."""

    def __init__(self, config: PipelineConfig, settings: Dict[str, Any]):
        """
        Args:
            config: Paths and API key for this run.
            settings: The loaded application configuration dictionary.
        """
        self.config = config
        self.settings = settings

    async def advance(self, state: PipelineState,
                      context: PipelineContext) -> Tuple[PipelineState, PipelineContext]:
        """
        Executes the step for `state` and returns the next state with the updated context.

        Exceptions raised by the step propagate unchanged; `run` turns them into FAILED.
        """
        if state is PipelineState.VALIDATE_CONFIG:
            validate_pipeline_config(self.config)
            return PipelineState.CHECK_CONNECTIVITY, context

        if state is PipelineState.CHECK_CONNECTIVITY:
            logger.info("Checking Perplexity API connectivity...")
            ready = await check_ready(self.config.api_key, self.settings)
            if ready:
                logger.info("Perplexity API connection OK.")
            else:
                logger.warning("Perplexity API responded but did not confirm READY. Continuing anyway.")
            logger.info("Starting PS2 -> PSP pipeline...")
            return PipelineState.SCAN, dataclasses.replace(context, ready=ready)

        if state is PipelineState.SCAN:
            logger.info("[1/4] Scanning PS2 folder...")
            max_entries = self.settings.get('scan', {}).get('max_entries', DEFAULT_MAX_ENTRIES)
            scan_report = scan_folder(str(self.config.source_root), max_entries=max_entries)
            return PipelineState.REQUEST_PLAN, dataclasses.replace(context, scan_report=scan_report)

        if state is PipelineState.REQUEST_PLAN:
            logger.info("[2/4] Querying Perplexity for conversion plan...")
            prompt = build_plan_prompt(context.scan_report)
            plan = await request_plan(self.config.api_key, prompt, self.settings)
            return PipelineState.GENERATE_SKELETON, dataclasses.replace(context, plan=plan)

        if state is PipelineState.GENERATE_SKELETON:
            output_config = self.settings.get('output', {})
            logger.info("[3/4] Generating PSP project skeleton...")
            generate_project(self.config.output_root, context.plan, output_config)
            logger.info("[4/4] Writing summary report...")
            write_summary(self.config.output_root, context.plan, output_config)
            return PipelineState.DONE, context

        raise ValueError(f"No transition out of terminal state {state.name}")

    async def run(self) -> PipelineOutcome:
        """Drives the state machine from VALIDATE_CONFIG to DONE or FAILED."""
        state = PipelineState.VALIDATE_CONFIG
        context = PipelineContext()
        while not state.is_terminal:
            try:
                state, context = await self.advance(state, context)
            except Exception as e:
                logger.error(f"Pipeline failed during {state.name}: {e}")
                return PipelineOutcome(state=PipelineState.FAILED, context=context,
                                       error=e, failed_at=state)
        return PipelineOutcome(state=state, context=context)
