# devscript/pipeline/runner.py
"""
One full compile-and-manifest pass.

parse -> aggregate -> hydrate -> build -> generate -> apply. Each stage is
fully materialized before the next starts. Provider and script-loading
errors propagate to the caller; per-reference and per-file problems are
isolated inside their stages.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from devscript.context.hydrator import hydrate
from devscript.llm.base import TextGenerator, is_error_response
from devscript.manifest.writer import FileWriteResult, apply_changes
from devscript.prompts.builder import build_prompt
from devscript.script.aggregator import aggregate, load_scripts
from devscript.script.types import MasterSpec

if TYPE_CHECKING:
    from devscript.config.schema import HydrationConfig

logger = logging.getLogger(__name__)

# Rough heuristic: 4 characters per token
CHARS_PER_TOKEN = 4
HIGH_TOKEN_LOAD = 30_000


def estimate_tokens(text: str) -> int:
    return -(-len(text) // CHARS_PER_TOKEN)


@dataclass
class PipelineResult:
    """Everything one run produced."""

    spec: MasterSpec
    prompt: str
    response: str = ""
    results: list[FileWriteResult] = field(default_factory=list)
    saved_to: Path | None = None
    dry_run: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def error_response(self) -> bool:
        """True when the provider answered with an error marker."""
        return is_error_response(self.response)

    @property
    def token_estimate(self) -> int:
        return estimate_tokens(self.prompt)

    def summary(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed"


def save_response(response: str, base_dir: Path) -> Path:
    """Write the raw response to dev-output-<timestamp>.md in base_dir."""
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    path = base_dir / f"dev-output-{stamp}.md"
    path.write_text(response, encoding="utf-8")
    logger.info(f"Saved full response to {path}")
    return path


async def compile_prompt(
    script_paths: list[Path],
    base_dir: Path,
    hydration: "HydrationConfig | None" = None,
) -> tuple[MasterSpec, str]:
    """
    Parse, aggregate, hydrate and build. No provider call.

    Returns:
        (master_spec, prompt)

    Raises:
        ScriptLoadError: If a script file cannot be read
    """
    spec = aggregate(load_scripts(script_paths))
    context = await hydrate(
        spec.context_references,
        base_dir,
        extra_suffixes=hydration.extra_extensions if hydration else (),
        extra_skip_dirs=hydration.extra_ignored_dirs if hydration else (),
    )
    prompt = build_prompt(spec, context)

    tokens = estimate_tokens(prompt)
    if tokens > HIGH_TOKEN_LOAD:
        logger.warning(f"High prompt load: ~{tokens:,} tokens ({len(prompt):,} chars)")
    else:
        logger.info(f"Prompt ready: ~{tokens:,} tokens ({len(prompt):,} chars)")
    return spec, prompt


async def run_pipeline(
    script_paths: list[Path],
    generator: TextGenerator | None,
    base_dir: str | Path | None = None,
    *,
    hydration: "HydrationConfig | None" = None,
    save: bool = False,
    dry_run: bool = False,
) -> PipelineResult:
    """
    Execute one pipeline pass.

    Args:
        script_paths: Script files in aggregation order
        generator:    Provider backend (may be None only for dry runs)
        base_dir:     Working directory for references and writes (default: cwd)
        hydration:    Extra hydration settings
        save:         Also save the raw response as markdown
        dry_run:      Stop after building the prompt

    Returns:
        PipelineResult with per-file results and summary counts

    Raises:
        ScriptLoadError: Unreadable script
        ProviderError:   Transport/authentication failure in the provider call
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    spec, prompt = await compile_prompt(script_paths, base, hydration)

    if dry_run:
        return PipelineResult(spec=spec, prompt=prompt, dry_run=True)
    if generator is None:
        raise ValueError("A generator is required unless dry_run=True")

    response = await generator.generate_response(prompt)
    if is_error_response(response):
        logger.warning(f"Provider {generator.provider_name} returned an error: {response}")

    results = apply_changes(response, base)

    saved_to = None
    if save:
        try:
            saved_to = save_response(response, base)
        except OSError as e:
            logger.error(f"Failed to save response to {base}: {e}")

    result = PipelineResult(
        spec=spec, prompt=prompt, response=response, results=results, saved_to=saved_to
    )
    logger.info(f"Run complete: {result.summary()}")
    return result
