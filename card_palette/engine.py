# card_palette/engine.py
from __future__ import annotations

"""
Selection state machine.

PaletteEngine owns one SelectionState and serialises every transition behind
a lock. Analysis runs on an executor; its result is committed only if it
carries the current generation, so a slow analysis of an older image can
never overwrite the palette of a newer one.

Transitions:
  image_changed(ref)              new generation, analyzing, rotation 0
  analysis_completed(gen, pal)    commit if gen is current, else discard
  regenerate()                    next palette entry as background, auto on
  toggle_auto()                   flip auto mode; entering resets rotation
  set_manual_color(which, colour) edit one side of the pair, auto off

Quick start:
  with PaletteEngine() as engine:
      engine.load_image("cover.png").result()
      print(engine.view().pair)
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Hashable, Literal, Optional, Sequence

from .analysis import analyze_image
from .colour_select import DEFAULT_PAIR, select_theme
from .config import DEFAULT_CONFIG, AnalysisConfig
from .core_types import ColorPair, ColourLike, HexStr, Palette, normalise_hex
from .image_io import ImageSource
from .utils import debug_log, key_value_pairs_to_string, warn

Side = Literal["background", "foreground"]
SIDES = ("background", "foreground")


@dataclass(frozen=True)
class SelectionState:
    palette: Palette = ()
    rotation_index: int = 0
    auto_mode: bool = True
    generation: int = 0
    analyzing: bool = False
    pair: ColorPair = DEFAULT_PAIR
    image_ref: Optional[Hashable] = None


@dataclass(frozen=True)
class EngineView:
    """What the UI layer reads after each action."""

    palette: Palette
    pair: ColorPair
    auto_mode: bool
    can_regenerate: bool
    generation: int
    analyzing: bool
    rotation_index: int


class PaletteEngine:
    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        executor: Optional[Executor] = None,
        workers: int = 1,
        debug: bool = False,
    ) -> None:
        self.config = config
        self.workers = max(1, int(workers))
        self.debug = debug
        self._lock = threading.Lock()
        self._state = SelectionState()
        self._executor = executor
        self._owns_executor = executor is None

    # Reading

    @property
    def state(self) -> SelectionState:
        with self._lock:
            return self._state

    def view(self) -> EngineView:
        with self._lock:
            s = self._state
        return EngineView(
            palette=s.palette,
            pair=s.pair,
            auto_mode=s.auto_mode,
            can_regenerate=bool(s.palette),
            generation=s.generation,
            analyzing=s.analyzing,
            rotation_index=s.rotation_index,
        )

    # Transitions (call with the lock held)

    def _auto_pair(self, palette: Sequence[HexStr], rotation_index: int) -> ColorPair:
        return select_theme(palette, rotation_index, self.config.contrast_threshold)

    def _commit(self, event: str, **changes: Any) -> SelectionState:
        self._state = replace(self._state, **changes)
        if self.debug:
            s = self._state
            debug_log(
                f"[engine] {event} "
                + key_value_pairs_to_string(
                    [
                        ("Gen", s.generation),
                        ("Auto", s.auto_mode),
                        ("Rotation", s.rotation_index),
                        ("Palette", len(s.palette)),
                        ("Pair", f"{s.pair.background}/{s.pair.foreground}"),
                    ]
                )
            )
        return self._state

    def image_changed(self, image_ref: Optional[Hashable] = None) -> int:
        """
        Start a new generation and return it. None means the image was
        cleared: the empty palette is committed at once.
        """
        with self._lock:
            s = self._state
            generation = s.generation + 1
            if image_ref is None:
                pair = self._auto_pair((), 0) if s.auto_mode else s.pair
                self._commit(
                    "image cleared",
                    generation=generation,
                    analyzing=False,
                    palette=(),
                    rotation_index=0,
                    pair=pair,
                    image_ref=None,
                )
                return generation
            # the old palette stays visible until the new analysis lands
            pair = self._auto_pair(s.palette, 0) if s.auto_mode else s.pair
            self._commit(
                "image changed",
                generation=generation,
                analyzing=True,
                rotation_index=0,
                pair=pair,
                image_ref=image_ref,
            )
            return generation

    def analysis_completed(self, generation: int, palette: Sequence[HexStr]) -> bool:
        """
        Commit a palette for generation. Returns False (and changes nothing)
        when generation is stale or its result was already committed.
        """
        committed: Palette = tuple(normalise_hex(c) for c in palette)
        with self._lock:
            s = self._state
            if generation != s.generation or not s.analyzing:
                if self.debug:
                    debug_log(
                        f"[engine] discarded result for gen {generation} (current {s.generation})"
                    )
                return False
            pair = self._auto_pair(committed, 0) if s.auto_mode else s.pair
            self._commit(
                "analysis completed",
                palette=committed,
                rotation_index=0,
                analyzing=False,
                pair=pair,
            )
            return True

    def regenerate(self) -> bool:
        """Advance to the next background. No-op (False) on an empty palette."""
        with self._lock:
            s = self._state
            if not s.palette:
                return False
            rotation = (s.rotation_index + 1) % len(s.palette)
            self._commit(
                "regenerate",
                auto_mode=True,
                rotation_index=rotation,
                pair=self._auto_pair(s.palette, rotation),
            )
            return True

    def toggle_auto(self) -> bool:
        """Flip auto mode and return the new value. Leaving auto freezes the pair."""
        with self._lock:
            s = self._state
            if s.auto_mode:
                self._commit("auto off", auto_mode=False)
                return False
            self._commit(
                "auto on",
                auto_mode=True,
                rotation_index=0,
                pair=self._auto_pair(s.palette, 0),
            )
            return True

    def set_manual_color(self, which: Side, colour: ColourLike) -> ColorPair:
        """
        Overwrite one side of the pair. Issued in auto mode it first leaves
        auto mode; palette and rotation are kept for a later toggle back.
        """
        if which not in SIDES:
            raise ValueError(f"which must be one of {SIDES}, got {which!r}")
        with self._lock:
            s = self._state
            pair = s.pair.with_side(which, colour)
            self._commit(f"manual {which}", auto_mode=False, pair=pair)
            return pair

    # Async analysis

    def _get_executor(self) -> Executor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=2, thread_name_prefix="card-palette"
                )
            return self._executor

    def _analyze_and_commit(self, generation: int, source: ImageSource) -> bool:
        try:
            palette = analyze_image(source, self.config, self.workers, self.debug)
        except Exception as e:
            warn(f"colour analysis failed for gen {generation}: {type(e).__name__}: {e}")
            palette = ()
        return self.analysis_completed(generation, palette)

    def load_image(
        self, source: Optional[ImageSource], image_ref: Optional[Hashable] = None
    ) -> "Future[bool]":
        """
        image_changed + background analysis. The future resolves to True when
        this generation's palette was committed, False when it was superseded.
        """
        if source is None:
            self.image_changed(None)
            done: "Future[bool]" = Future()
            done.set_result(True)
            return done
        ref = image_ref if image_ref is not None else _default_ref(source)
        generation = self.image_changed(ref)
        return self._get_executor().submit(self._analyze_and_commit, generation, source)

    # Lifetime

    def close(self) -> None:
        """Shut down an engine-owned executor; an injected one is left running."""
        if not self._owns_executor:
            return
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "PaletteEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _default_ref(source: ImageSource) -> Hashable:
    """Something loggable and hashable that identifies the source."""
    try:
        hash(source)
        return source  # type: ignore[return-value]
    except TypeError:
        return f"{type(source).__name__}@{id(source):x}"


__all__ = [
    "Side",
    "SelectionState",
    "EngineView",
    "PaletteEngine",
]
