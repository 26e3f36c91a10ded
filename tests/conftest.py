"""Shared fixtures for the jigsaw engine tests."""

from typing import Callable, List

import numpy as np
import pytest

from jigsaw_engine import AssemblyEngine, Settings


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Canvas 800x600 with a 400x300 puzzle, so a 2x2 grid has 200x150 cells."""
    return Settings(
        CANVAS_WIDTH=800,
        CANVAS_HEIGHT=600,
        PUZZLE_WIDTH=400,
        PUZZLE_HEIGHT=300,
        TAB_SIZE=20.0,
        JITTER=4.0,
        SNAP_THRESHOLD=16.0,
        SNAP_POLICY="first",
        DEFAULT_DIFFICULTY="easy",
    )


@pytest.fixture
def completions() -> List[str]:
    return []


@pytest.fixture
def make_engine(settings: Settings, clock: FakeClock, completions: List[str]) -> Callable[..., AssemblyEngine]:
    """Factory for an engine with a fixed seed, scatter generator and fake clock."""

    def factory(rows: int = 2, cols: int = 2, **overrides: object) -> AssemblyEngine:
        engine_settings = settings.model_copy(update=overrides) if overrides else settings
        engine = AssemblyEngine(
            settings=engine_settings,
            on_complete=completions.append,
            clock=clock,
            rng=np.random.default_rng(7),
            seed=42,
        )
        engine.set_difficulty(rows, cols)
        return engine

    return factory


@pytest.fixture
def playing_engine(make_engine: Callable[..., AssemblyEngine]) -> AssemblyEngine:
    """A started 2x2 puzzle."""
    engine = make_engine()
    engine.start_game()
    return engine

