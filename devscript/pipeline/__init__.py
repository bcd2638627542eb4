# devscript/pipeline/__init__.py
"""Single-pass pipeline orchestration."""

from .runner import PipelineResult, compile_prompt, estimate_tokens, run_pipeline, save_response

__all__ = ["PipelineResult", "compile_prompt", "estimate_tokens", "run_pipeline", "save_response"]
