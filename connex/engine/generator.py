"""Layout generation orchestration.

Each attempt builds a fresh candidate (template path, transform, anchors,
walls) and runs the verifier twice:
  1. Quick check: a short budget that discards hopeless candidates cheaply.
  2. Confirmation: a much larger budget guarding against the quick pass being
     cut short by its deadline.
A candidate is accepted only when both passes find a winning trail.
"""

from __future__ import annotations

import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, FrozenSet, Iterator, List, Optional, Tuple, Union

from ..core.constants import (
    DEFAULT_CONFIRM_BUDGET_MS,
    DEFAULT_DFS_ATTEMPTS,
    DEFAULT_DFS_TIME_LIMIT_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_QUICK_BUDGET_MS,
    PRESETS,
    TemplateKind,
)
from ..core.exceptions import (
    ConnexError,
    GenerationExhausted,
    InvalidConfigError,
    LayoutValidationError,
    TemplateGenerationError,
)
from ..core.models import Anchor, Cell, Layout, Wall
from ..utils.logger import get_logger
from .anchors import place_anchors
from .templates import build_template_path, choose_template, resolve_template, serpentine
from .transforms import TransformSpec, random_transform
from .validator import LayoutValidator, check_path, check_wall_safety
from .verifier import SearchOutcome, search_layout
from .walls import build_shortcut_walls


LOGGER = get_logger(__name__)

Verifier = Callable[..., SearchOutcome]


@dataclass
class GeneratorConfig:
    cols: int = 6
    rows: int = 6
    anchor_count: int = 12
    min_gap: int = 3
    wall_pct: float = 0.04
    template: Optional[str] = None
    apply_transforms: bool = True
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    quick_budget_ms: float = DEFAULT_QUICK_BUDGET_MS
    confirm_budget_ms: float = DEFAULT_CONFIRM_BUDGET_MS
    dfs_attempts: int = DEFAULT_DFS_ATTEMPTS
    dfs_time_limit_ms: float = DEFAULT_DFS_TIME_LIMIT_MS

    @classmethod
    def from_preset(cls, key: str, **overrides) -> "GeneratorConfig":
        try:
            preset = PRESETS[key]
        except KeyError as exc:
            raise InvalidConfigError(
                f"Unknown preset '{key}'. Available: {', '.join(PRESETS)}"
            ) from exc
        config = cls(
            cols=preset.cols,
            rows=preset.rows,
            anchor_count=preset.anchor_count,
            min_gap=preset.min_gap,
            wall_pct=preset.wall_pct,
            template=preset.template.value if preset.template else None,
            apply_transforms=preset.apply_transforms,
        )
        return replace(config, **overrides)

    def validate(self) -> None:
        if self.cols <= 0 or self.rows <= 0:
            raise InvalidConfigError(f"Grid must be at least 1x1, got {self.cols}x{self.rows}")
        if self.anchor_count < 1:
            raise InvalidConfigError(f"Need at least one checkpoint, got {self.anchor_count}")
        if self.anchor_count > self.cols * self.rows:
            raise InvalidConfigError(
                f"{self.anchor_count} checkpoints do not fit on {self.cols}x{self.rows} cells"
            )
        if self.min_gap < 0:
            raise InvalidConfigError(f"min_gap must be >= 0, got {self.min_gap}")
        if not 0.0 <= self.wall_pct <= 1.0:
            raise InvalidConfigError(f"wall_pct must be within [0, 1], got {self.wall_pct}")
        if self.max_attempts < 1:
            raise InvalidConfigError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.quick_budget_ms <= 0 or self.confirm_budget_ms <= 0:
            raise InvalidConfigError("Verification budgets must be positive")


class AttemptStage(str, Enum):
    REJECTED = "rejected"
    QUICK_FAILED = "quick_failed"
    CONFIRM_FAILED = "confirm_failed"
    CANCELLED = "cancelled"
    ACCEPTED = "accepted"


@dataclass
class Candidate:
    layout: Layout
    path: List[Cell]
    template: TemplateKind
    transform: Optional[TransformSpec] = None


@dataclass
class AttemptRecord:
    attempt: int
    seed: int
    stage: AttemptStage
    elapsed_ms: float
    candidate: Optional[Candidate] = None
    quick: Optional[SearchOutcome] = None
    confirm: Optional[SearchOutcome] = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.stage == AttemptStage.ACCEPTED


@dataclass
class LayoutResult:
    layout: Layout
    template: TemplateKind
    attempts: int
    seed: int
    transform: Optional[TransformSpec] = None
    solution: tuple = ()
    ok: bool = True


@dataclass
class GenerationFailure:
    attempts: int
    reason: str
    ok: bool = False

    def to_exception(self) -> GenerationExhausted:
        return GenerationExhausted(f"{self.reason} after {self.attempts} attempts")


class LayoutGenerator:
    """High-level orchestrator: candidate construction then two-phase verification."""

    def __init__(
        self,
        config: GeneratorConfig,
        verifier: Optional[Verifier] = None,
        validator: Optional[LayoutValidator] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        config.validate()
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.verifier = verifier or search_layout
        self.validator = validator or LayoutValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate(
        self, on_record: Optional[Callable[[AttemptRecord], None]] = None
    ) -> Union[LayoutResult, GenerationFailure]:
        attempts = 0
        for record in self.iter_attempts():
            attempts = record.attempt
            if on_record is not None:
                on_record(record)
            if record.accepted:
                return self.result_from(record)
        LOGGER.warning("Unable to generate a solvable layout after %s attempts", attempts)
        return GenerationFailure(attempts=attempts, reason="No confirmed-solvable layout")

    def generate_or_raise(self) -> LayoutResult:
        outcome = self.generate()
        if isinstance(outcome, GenerationFailure):
            raise outcome.to_exception()
        return outcome

    def iter_attempts(self) -> Iterator[AttemptRecord]:
        """Run attempts one by one, handing control back after each.

        Stops after the first accepted record or once ``max_attempts`` is used.
        """

        for attempt in range(1, self.config.max_attempts + 1):
            LOGGER.info("Generation attempt %s/%s", attempt, self.config.max_attempts)
            record = self.run_attempt(attempt, self.rng.randrange(2**32))
            yield record
            if record.accepted:
                return

    def generate_parallel(
        self,
        workers: int = 4,
        on_record: Optional[Callable[[AttemptRecord], None]] = None,
    ) -> Union[LayoutResult, GenerationFailure]:
        """Run independent attempts on a thread pool; the first accepted one wins.

        ``on_record`` sees every finished attempt in completion order.
        """

        if workers <= 1:
            return self.generate(on_record)
        cancel = threading.Event()
        seeds = [self.rng.randrange(2**32) for _ in range(self.config.max_attempts)]
        finished = 0
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.run_attempt, attempt, seed, cancel): attempt
                for attempt, seed in enumerate(seeds, start=1)
            }
            for future in as_completed(futures):
                record = future.result()
                finished += 1
                if on_record is not None:
                    on_record(record)
                if record.accepted:
                    cancel.set()
                    for pending in futures:
                        pending.cancel()
                    LOGGER.info(
                        "Generation succeeded on attempt %s/%s (seed %s)",
                        record.attempt,
                        self.config.max_attempts,
                        record.seed,
                    )
                    return self.result_from(record)
        LOGGER.warning("Unable to generate a solvable layout after %s attempts", finished)
        return GenerationFailure(attempts=finished, reason="No confirmed-solvable layout")

    # ------------------------------------------------------------------
    # Attempts
    # ------------------------------------------------------------------
    def run_attempt(
        self, attempt: int, seed: int, cancel_event: Optional[threading.Event] = None
    ) -> AttemptRecord:
        started = time.monotonic()

        def record(stage: AttemptStage, **kwargs) -> AttemptRecord:
            elapsed = (time.monotonic() - started) * 1000.0
            return AttemptRecord(attempt=attempt, seed=seed, stage=stage, elapsed_ms=elapsed, **kwargs)

        if cancel_event is not None and cancel_event.is_set():
            return record(AttemptStage.CANCELLED)

        rng = random.Random(seed)
        try:
            candidate = self.build_candidate(rng)
        except LayoutValidationError as exc:
            LOGGER.warning("Attempt %s: candidate rejected: %s", attempt, exc)
            return record(AttemptStage.REJECTED, message=str(exc))

        quick = self.verifier(candidate.layout, self.config.quick_budget_ms, cancel_event=cancel_event)
        if not quick.found:
            LOGGER.debug(
                "Attempt %s: quick check failed (%s, %s nodes)",
                attempt,
                "timeout" if quick.timed_out else "exhausted",
                quick.expanded,
            )
            return record(AttemptStage.QUICK_FAILED, candidate=candidate, quick=quick)

        confirm = self.verifier(candidate.layout, self.config.confirm_budget_ms, cancel_event=cancel_event)
        if not confirm.found:
            LOGGER.info("Attempt %s: confirmation pass failed", attempt)
            return record(AttemptStage.CONFIRM_FAILED, candidate=candidate, quick=quick, confirm=confirm)

        LOGGER.info(
            "Attempt %s accepted (%s template, %s)",
            attempt,
            candidate.template.value,
            candidate.transform.describe() if candidate.transform else "untransformed",
        )
        return record(AttemptStage.ACCEPTED, candidate=candidate, quick=quick, confirm=confirm)

    def build_candidate(self, rng: random.Random) -> Candidate:
        """Template, transform, anchors and walls; raises on a broken invariant."""

        kind, path = self.template_path(rng)
        path, transform = self.transform_path(path, rng)
        anchors = self.anchors_for(path, rng)
        walls = self.walls_for(path, rng)
        layout = self.assemble_layout(anchors, walls)
        LOGGER.debug(
            "Candidate built from %s template: start=%s goal=%s walls=%s",
            kind.value,
            layout.start,
            layout.goal,
            len(walls),
        )
        return Candidate(layout=layout, path=path, template=kind, transform=transform)

    # ------------------------------------------------------------------
    # Candidate stages
    # ------------------------------------------------------------------
    def template_path(self, rng: random.Random) -> Tuple[TemplateKind, List[Cell]]:
        """Pick and run a template; a failed DFS falls back to serpentine."""

        cfg = self.config
        kind = resolve_template(cfg.template)
        if kind == TemplateKind.AUTO:
            kind = choose_template(rng)
        try:
            path = build_template_path(
                kind,
                cfg.cols,
                cfg.rows,
                rng,
                dfs_attempts=cfg.dfs_attempts,
                dfs_time_limit_ms=cfg.dfs_time_limit_ms,
            )
        except TemplateGenerationError as exc:
            LOGGER.warning("%s; using serpentine for this attempt", exc)
            kind = TemplateKind.SERPENTINE
            path = serpentine(cfg.cols, cfg.rows)
        return kind, path

    def transform_path(
        self, path: List[Cell], rng: random.Random
    ) -> Tuple[List[Cell], Optional[TransformSpec]]:
        cfg = self.config
        transform: Optional[TransformSpec] = None
        if cfg.apply_transforms:
            path, transform = random_transform(path, cfg.cols, cfg.rows, rng)
        check_path(path, cfg.cols, cfg.rows)
        return path, transform

    def anchors_for(self, path: List[Cell], rng: random.Random) -> List[Anchor]:
        return place_anchors(path, self.config.anchor_count, self.config.min_gap, rng)

    def walls_for(self, path: List[Cell], rng: random.Random) -> FrozenSet[Wall]:
        cfg = self.config
        walls = build_shortcut_walls(path, cfg.cols, cfg.rows, cfg.wall_pct, rng)
        check_wall_safety(path, walls)
        return walls

    def assemble_layout(self, anchors: List[Anchor], walls: FrozenSet[Wall]) -> Layout:
        layout = Layout.from_parts(self.config.cols, self.config.rows, anchors, walls)
        validation = self.validator.validate(layout)
        if not validation.ok:
            raise LayoutValidationError(f"Layout validation failed: {validation.messages}")
        return layout

    def result_from(self, record: AttemptRecord) -> LayoutResult:
        if not record.accepted or record.candidate is None or record.confirm is None:
            raise ConnexError(f"Attempt {record.attempt} was not accepted ({record.stage.value})")
        return LayoutResult(
            layout=record.candidate.layout,
            template=record.candidate.template,
            attempts=record.attempt,
            seed=record.seed,
            transform=record.candidate.transform,
            solution=record.confirm.trail,
        )


def generate_layout(
    config: GeneratorConfig, rng: Optional[random.Random] = None
) -> Union[LayoutResult, GenerationFailure]:
    return LayoutGenerator(config, rng=rng).generate()
