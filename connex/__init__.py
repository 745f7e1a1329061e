"""Numbered-checkpoint path puzzle generator.

This package exposes the public API surface via:

- ``connex.engine.generator.LayoutGenerator``: orchestrates candidate construction and verification.
- ``connex.engine.verifier.verify_solvable``: deadline-bounded solvability proof.
- ``connex.engine.session.PuzzleSession``: movement rules and win evaluation for players.
"""

from .engine.generator import (
    GenerationFailure,
    GeneratorConfig,
    LayoutGenerator,
    LayoutResult,
    generate_layout,
)
from .engine.session import PuzzleSession, evaluate_trail
from .engine.verifier import search_layout, verify_solvable

__all__ = [
    "GenerationFailure",
    "GeneratorConfig",
    "LayoutGenerator",
    "LayoutResult",
    "PuzzleSession",
    "evaluate_trail",
    "generate_layout",
    "search_layout",
    "verify_solvable",
]

__version__ = "0.1.0"
