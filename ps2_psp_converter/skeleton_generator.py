"""
Writes the PSP project skeleton for a conversion plan.

The generator never parses the plan: the README embeds it verbatim and
the stub entry point is the same for every game.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import FileWriteError

logger = logging.getLogger(__name__)

PLAN_START = "--- PLAN START ---"
PLAN_END = "--- PLAN END ---"

README_TEMPLATE = (
    "# Generated PSP Project (Skeleton)\n\n"
    "This folder is an *incomplete* PSP-oriented project skeleton generated from a PS2 game scan.\n\n"
    "The following high-level plan was used when generating this skeleton:\n\n"
    f"{PLAN_START}\n{{plan}}\n{PLAN_END}\n"
)

MAIN_STUB = (
    "// Stub main file for PSP homebrew project.\n"
    "// Integrate with your chosen PSP SDK / toolchain.\n"
    "\n"
    "int main(int argc, char *argv[]) {\n"
    "    // TODO: Implement game loop using the generated design document.\n"
    "    return 0;\n"
    "}\n"
)

DEFAULT_OUTPUT_NAMES = {
    'readme_name': 'README.psp.md',
    'summary_name': 'conversion-summary.txt',
    'stub_name': 'main.c',
}


def _name(output_config: Optional[Dict[str, Any]], key: str) -> str:
    return (output_config or {}).get(key) or DEFAULT_OUTPUT_NAMES[key]


def _write_text(path: Path, content: str) -> None:
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise FileWriteError(f"Failed to write {path}: {e}") from e
    logger.info(f"Wrote {path}")


def generate_project(output_root: Union[str, Path], plan: str,
                     output_config: Optional[Dict[str, Any]] = None) -> None:
    """
    Creates the skeleton folders and writes the README and stub source file.

    Existing files with the same names are overwritten.

    Args:
        output_root: Folder receiving the skeleton; created if missing.
        plan: Conversion plan text, embedded verbatim in the README.
        output_config: The 'output' config section (file names).

    Raises:
        FileWriteError: If a folder or file cannot be created.
    """
    output_root = Path(output_root)
    src_dir = output_root / "src"
    assets_dir = output_root / "assets"

    for directory in (output_root, src_dir, assets_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {directory}: {e}")
            raise FileWriteError(f"Failed to create directory {directory}: {e}") from e

    _write_text(output_root / _name(output_config, 'readme_name'), README_TEMPLATE.format(plan=plan))
    _write_text(src_dir / _name(output_config, 'stub_name'), MAIN_STUB)


def write_summary(output_root: Union[str, Path], plan: str,
                  output_config: Optional[Dict[str, Any]] = None) -> Path:
    """Writes the plan alone as the plain-text conversion summary."""
    summary_path = Path(output_root) / _name(output_config, 'summary_name')
    _write_text(summary_path, plan)
    return summary_path
