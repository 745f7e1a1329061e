"""CLI entrypoint for the numbered-checkpoint path puzzle generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from connex.core.constants import (
    DEFAULT_CONFIRM_BUDGET_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_QUICK_BUDGET_MS,
    PRESETS,
    TemplateKind,
)
from connex.core.exceptions import InvalidConfigError
from connex.core.models import Layout
from connex.engine.generator import GenerationFailure, GeneratorConfig, LayoutGenerator
from connex.engine.solver import solve_layout
from connex.engine.verifier import search_layout
from connex.utils.logger import configure_logging
from connex.utils.pretty import pretty_print_layout, print_layout_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate numbered-checkpoint path puzzles",
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=list(PRESETS),
        default="standard",
        help="Difficulty preset; explicit flags below override its fields",
    )
    parser.add_argument("--cols", type=int, help="Grid width in cells")
    parser.add_argument("--rows", type=int, help="Grid height in cells")
    parser.add_argument("--anchors", type=int, help="Number of checkpoints (K)")
    parser.add_argument("--min-gap", type=int, help="Preferred path distance between checkpoints")
    parser.add_argument("--wall-pct", type=float, help="Probability of walling each eligible edge")
    parser.add_argument(
        "--template",
        type=str,
        choices=[kind.value for kind in TemplateKind],
        help="Path template (default: the preset's, else weighted random)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Candidate layouts to try before giving up",
    )
    parser.add_argument(
        "--quick-budget-ms",
        type=float,
        default=DEFAULT_QUICK_BUDGET_MS,
        help="Search budget of the quick solvability check",
    )
    parser.add_argument(
        "--confirm-budget-ms",
        type=float,
        default=DEFAULT_CONFIRM_BUDGET_MS,
        help="Search budget of the confirmation pass",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Run attempts on this many threads; the first accepted layout wins",
    )
    parser.add_argument(
        "--solution",
        action="store_true",
        help="Include an exact CP-SAT solution trail in the output",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Print the layout as ASCII to stderr",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--verify",
        type=Path,
        metavar="FILE",
        help="Check a saved layout JSON for solvability instead of generating",
    )
    parser.add_argument(
        "--budget-ms",
        type=float,
        default=DEFAULT_CONFIRM_BUDGET_MS,
        help="Search budget used with --verify",
    )
    return parser


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    overrides: Dict[str, Any] = {
        "seed": args.seed,
        "max_attempts": args.max_attempts,
        "quick_budget_ms": args.quick_budget_ms,
        "confirm_budget_ms": args.confirm_budget_ms,
    }
    optional_fields = {
        "cols": args.cols,
        "rows": args.rows,
        "anchor_count": args.anchors,
        "min_gap": args.min_gap,
        "wall_pct": args.wall_pct,
        "template": args.template,
    }
    for field_name, value in optional_fields.items():
        if value is not None:
            overrides[field_name] = value
    return GeneratorConfig.from_preset(args.mode, **overrides)


def load_layout(path: Path) -> Layout:
    """Read a layout saved by this CLI, either bare or wrapped in a payload."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if "layout" in data:
        data = data["layout"]
    return Layout.from_jsonable(data)


def trail_to_jsonable(trail) -> list:
    return [[cell.x, cell.y] for cell in trail]


def verify_payload(args: argparse.Namespace) -> Dict[str, Any]:
    layout = load_layout(args.verify)
    outcome = search_layout(layout, args.budget_ms)
    payload: Dict[str, Any] = {
        "solvable": outcome.found,
        "timed_out": outcome.timed_out,
        "expanded": outcome.expanded,
        "elapsed_ms": round(outcome.elapsed_ms, 1),
        "trail": trail_to_jsonable(outcome.trail),
    }
    if args.pretty:
        pretty_print_layout(layout, outcome.trail or None, stream=sys.stderr)
    return payload


def generate_payload(args: argparse.Namespace, config: GeneratorConfig) -> Dict[str, Any]:
    generator = LayoutGenerator(config)
    if args.workers > 1:
        result = generator.generate_parallel(args.workers)
    else:
        result = generator.generate()

    preset = PRESETS[args.mode]
    if isinstance(result, GenerationFailure):
        return {
            "ok": False,
            "mode": preset.key,
            "attempts": result.attempts,
            "reason": result.reason,
        }

    payload: Dict[str, Any] = {
        "ok": True,
        "mode": preset.key,
        "label": preset.label,
        "target_ms": preset.target_ms,
        "template": result.template.value,
        "transform": result.transform.describe() if result.transform else None,
        "attempts": result.attempts,
        "seed": result.seed,
        "layout": result.layout.to_jsonable(),
    }
    if args.solution:
        trail: Optional[list] = solve_layout(result.layout)
        payload["solution"] = trail_to_jsonable(trail) if trail else None
    if args.pretty:
        print_layout_stats(result, stream=sys.stderr)
    return payload


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level, threads=args.workers > 1)

    if args.workers < 1:
        parser.error("--workers must be at least 1")

    if args.verify is not None:
        payload = verify_payload(args)
    else:
        try:
            config = build_config(args)
            config.validate()
        except InvalidConfigError as exc:
            parser.error(str(exc))
        payload = generate_payload(args, config)

    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
