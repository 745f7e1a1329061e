"""Convenience entrypoint with predefined generator settings for debugging.

Usage in a Python console (Jupyter-style)::

    import debug_main
    state = debug_main.prepare_state(mode="expert", seed=7)
    debug_main.step_template(state)
    debug_main.step_transform(state)
    debug_main.step_anchors(state)
    debug_main.step_walls(state)
    debug_main.build_layout(state)
    debug_main.step_verify(state)
    result = debug_main.build_result(state)

Call :func:`run_debug` for a one-liner, or execute the functions above one by
one to inspect intermediate state.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict

from connex.core.models import Layout
from connex.engine.generator import (
    AttemptRecord,
    GenerationFailure,
    GeneratorConfig,
    LayoutGenerator,
    LayoutResult,
)
from connex.utils.logger import configure_logging
from connex.utils.pretty import pretty_print_layout, print_layout_stats

DEFAULT_DEBUG_ARGS: Dict[str, Any] = {
    "mode": "expert",
    "seed": None,
    "template": None,         # template name, None keeps the preset's choice
    "quick_budget_ms": 250,
    "confirm_budget_ms": 4000,
    "log_level": logging.INFO,
    # "cols": None,
    # "rows": None,
    # "anchor_count": None,
    # "wall_pct": None,
}

def build_generator(threads: bool = False, **overrides: Any) -> LayoutGenerator:
    args = {**DEFAULT_DEBUG_ARGS, **overrides}
    configure_logging(args.pop("log_level"), threads=threads)
    mode = str(args.pop("mode"))
    config_kwargs = {key: value for key, value in args.items() if value is not None}
    return LayoutGenerator(GeneratorConfig.from_preset(mode, **config_kwargs))


def prepare_state(**overrides: Any) -> Dict[str, Any]:
    """Return a mutable state dictionary used by the step helpers."""

    generator = build_generator(**overrides)
    attempt_seed = generator.rng.randrange(2**32)
    return {
        "config": generator.config,
        "generator": generator,
        "seed": attempt_seed,
        "rng": random.Random(attempt_seed),
        "template": None,
        "path": [],
        "transform": None,
        "anchors": [],
        "walls": frozenset(),
        "layout": None,
        "quick": None,
        "confirm": None,
    }


def step_template(state: Dict[str, Any]):
    state["template"], state["path"] = state["generator"].template_path(state["rng"])
    return state["path"]


def step_transform(state: Dict[str, Any]):
    state["path"], state["transform"] = state["generator"].transform_path(
        state["path"], state["rng"]
    )
    return state["path"]


def step_anchors(state: Dict[str, Any]):
    state["anchors"] = state["generator"].anchors_for(state["path"], state["rng"])
    return state["anchors"]


def step_walls(state: Dict[str, Any]):
    state["walls"] = state["generator"].walls_for(state["path"], state["rng"])
    return state["walls"]


def build_layout(state: Dict[str, Any]) -> Layout:
    state["layout"] = state["generator"].assemble_layout(state["anchors"], state["walls"])
    return state["layout"]


def step_verify(state: Dict[str, Any]) -> bool:
    config: GeneratorConfig = state["config"]
    verifier = state["generator"].verifier
    state["quick"] = verifier(state["layout"], config.quick_budget_ms)
    if not state["quick"].found:
        return False
    state["confirm"] = verifier(state["layout"], config.confirm_budget_ms)
    return state["confirm"].found


def build_result(state: Dict[str, Any], attempt_no: int = 1) -> LayoutResult:
    confirm = state["confirm"]
    return LayoutResult(
        layout=state["layout"],
        template=state["template"],
        attempts=attempt_no,
        seed=state["seed"],
        transform=state["transform"],
        solution=confirm.trail if confirm else (),
    )


def report_record(record: AttemptRecord) -> None:
    """Print one finished attempt; accepted layouts are left to the final stats."""

    label = f"Attempt {record.attempt} (seed {record.seed}): {record.stage.value}"
    if record.message:
        label += f" - {record.message}"
    if record.candidate is None or record.accepted:
        print(label)
        return
    pretty_print_layout(record.candidate.layout, label=label)


def run_debug(**overrides: Any) -> LayoutResult:
    """Generate a layout, printing every attempt as it finishes."""

    max_runs = int(overrides.pop("max_runs", 15))
    parallel_runs = int(overrides.pop("parallel_runs", 1))
    generator = build_generator(parallel_runs > 1, max_attempts=max_runs, **overrides)
    outcome = generator.generate_parallel(parallel_runs, on_record=report_record)
    if isinstance(outcome, GenerationFailure):
        raise outcome.to_exception()
    print_layout_stats(outcome)
    return outcome


def main() -> None:  # pragma: no cover - manual helper
    result = run_debug()
    print(f"Seed: {result.seed}")
    print(f"Solution length: {len(result.solution)} cells")


if __name__ == "__main__":
    main()
