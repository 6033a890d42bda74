import logging
import time
from collections.abc import Sequence
from enum import Enum

from span_diff.errors import DiffCancelledError, DiffDepthError, NotReadyError
from span_diff.match_state import MatchState, MatchStateCache, MatchStatus
from span_diff.report import assemble_report
from span_diff.spans import EditSpan, MatchSpan


logger = logging.getLogger(__name__)


class MatchLevel(Enum):
    """
    How thoroughly a range is scanned for its best match.

    FAST_IMPERFECT skips past every match it sees, MEDIUM skips past a match
    only when it becomes the new best, SLOW_PERFECT looks at every index.
    All three produce a complete edit script; they differ in which matches
    get picked and how much work that takes.
    """

    FAST_IMPERFECT = 'fast'
    MEDIUM = 'medium'
    SLOW_PERFECT = 'slow'


class DiffRun:
    """Outcome of one engine pass: the match spans plus what is needed to report on them."""

    def __init__(self, source_length: int, destination_length: int, level: MatchLevel) -> None:
        self.source_length = source_length
        self.destination_length = destination_length
        self.level = level
        self.matches: list[MatchSpan] = []
        self.cache: MatchStateCache | None = None
        self.elapsed: float | None = None

    @property
    def completed(self) -> bool:
        return self.elapsed is not None

    def report(self) -> list[EditSpan]:
        if not self.completed:
            raise NotReadyError("Diff run has not completed; no report is available.")
        return assemble_report(self.matches, self.destination_length, self.source_length)

    def __repr__(self) -> str:
        state = f"{self.elapsed:.4f}s" if self.completed else "pending"
        return (f"DiffRun(source={self.source_length}, destination={self.destination_length}, "
                f"level={self.level.name}, matches={len(self.matches)}, {state})")


class DiffEngine:
    """
    Heuristic longest-common-span diff between two sequences.

    The destination range is searched for its longest run shared with the
    source. That run splits both sequences in two, and the parts before and
    after it are searched the same way until no shared element is left.
    Longest-match results are memoized per destination index so revisited
    ranges do not scan the source again.

    Sequences only need `len()` and integer indexing with elements
    comparable by `==`.
    """

    def __init__(
        self,
        level: MatchLevel = MatchLevel.SLOW_PERFECT,
        max_depth: int | None = None,
        cancel_event=None,
    ) -> None:
        """
        Args:
            level: Default scan thoroughness for `process_diff`.
            max_depth: Deepest allowed range nesting; None means unlimited.
            cancel_event: Object with `is_set()` (e.g. threading.Event); the run
                raises DiffCancelledError once it is set.
        """
        self.level = level
        self.max_depth = max_depth
        self.cancel_event = cancel_event
        self.run: DiffRun | None = None
        self._source: Sequence | None = None
        self._dest: Sequence | None = None
        self._cache: MatchStateCache | None = None

    def process_diff(self, source: Sequence, destination: Sequence, level: MatchLevel | None = None) -> float:
        """Computes the match spans of `source` -> `destination`. Returns elapsed seconds."""
        level = level or self.level
        start_time = time.perf_counter()

        source_count = len(source)
        dest_count = len(destination)
        run = DiffRun(source_count, dest_count, level)
        self.run = None
        self._source = source
        self._dest = destination

        if dest_count > 0 and source_count > 0:
            self._cache = MatchStateCache.sized(dest_count)
            run.cache = self._cache
            try:
                self._process_range(run, 0, dest_count - 1, 0, source_count - 1)
            finally:
                self._source = self._dest = self._cache = None

        run.elapsed = time.perf_counter() - start_time
        self.run = run
        if run.cache is not None:
            logger.debug(f"Diff {source_count} -> {dest_count} ({level.name}): {len(run.matches)} matches, "
                         f"cache hits={run.cache.hits} misses={run.cache.misses}, {run.elapsed:.4f}s")
        return run.elapsed

    def diff_report(self) -> list[EditSpan]:
        """Returns the edit script of the last completed `process_diff`."""
        if self.run is None:
            raise NotReadyError("process_diff() must complete before diff_report() is called.")
        return self.run.report()

    def _match_length(self, dest_index: int, source_index: int, max_length: int) -> int:
        """Number of consecutive equal elements starting at the two indexes, up to max_length."""
        dest = self._dest
        source = self._source
        count = 0
        while count < max_length and dest[dest_index + count] == source[source_index + count]:
            count += 1
        return count

    def _longest_source_match(
        self,
        state: MatchState,
        dest_index: int,
        dest_end: int,
        source_start: int,
        source_end: int,
    ) -> None:
        """Finds the longest source run matching the destination at dest_index and memoizes it."""
        max_dest_length = dest_end - dest_index + 1
        best_length = 0
        best_index = -1

        source_index = source_start
        while source_index <= source_end:
            max_length = min(max_dest_length, source_end - source_index + 1)
            if max_length <= best_length:
                # No chance to find a longer one any more
                break
            cur_length = self._match_length(dest_index, source_index, max_length)
            if cur_length > best_length:
                best_index = source_index
                best_length = cur_length
            # Jump over the run
            source_index += max(cur_length, 1)

        if best_index == -1:
            self._cache.record_no_match(state, source_start, source_end, max_dest_length)
        else:
            self._cache.record_match(state, best_index, best_length, source_start, source_end, max_dest_length)

    def _best_match(
        self,
        level: MatchLevel,
        dest_start: int,
        dest_end: int,
        source_start: int,
        source_end: int,
    ) -> MatchSpan | None:
        """Picks the match that splits this range, according to `level`."""
        best_dest = -1
        best_length = 0
        best_state = None

        dest_index = dest_start
        while dest_index <= dest_end:
            max_possible_length = dest_end - dest_index + 1
            if max_possible_length <= best_length:
                # We won't find a longer one even if we looked
                break

            state = self._cache.get(dest_index)
            if not self._cache.is_valid_for(state, source_start, source_end, max_possible_length):
                self._longest_source_match(state, dest_index, dest_end, source_start, source_end)

            if state.status is MatchStatus.MATCHED:
                improved = state.length > best_length
                if improved:
                    best_dest = dest_index
                    best_length = state.length
                    best_state = state
                if level is MatchLevel.FAST_IMPERFECT or (level is MatchLevel.MEDIUM and improved):
                    dest_index += state.length - 1
            dest_index += 1

        if best_state is None:
            return None
        return MatchSpan(best_dest, best_state.source_index, best_length)

    def _process_range(self, run: DiffRun, dest_start: int, dest_end: int, source_start: int, source_end: int) -> None:
        """
        Partitions the inclusive ranges around their best match, then handles the
        parts before and after it. Uses an explicit worklist instead of recursion.
        """
        pending = [(dest_start, dest_end, source_start, source_end, 0)]
        while pending:
            if self.cancel_event is not None and self.cancel_event.is_set():
                logger.warning(f"Diff cancelled after {len(run.matches)} matches")
                raise DiffCancelledError("Diff run was cancelled.")

            dest_start, dest_end, source_start, source_end, depth = pending.pop()
            if self.max_depth is not None and depth > self.max_depth:
                logger.warning(f"Diff exceeded maximum depth {self.max_depth} at destination {dest_start}..{dest_end}")
                raise DiffDepthError(f"Range partitioning exceeded the maximum depth of {self.max_depth}.")

            match = self._best_match(run.level, dest_start, dest_end, source_start, source_end)
            if match is None:
                # No shared element in this range
                continue
            run.matches.append(match)

            upper_dest_start = match.dest_index + match.length
            upper_source_start = match.source_index + match.length
            if upper_dest_start <= dest_end and upper_source_start <= source_end:
                pending.append((upper_dest_start, dest_end, upper_source_start, source_end, depth + 1))
            if dest_start < match.dest_index and source_start < match.source_index:
                pending.append((dest_start, match.dest_index - 1, source_start, match.source_index - 1, depth + 1))


def compute_diff(
    source: Sequence,
    destination: Sequence,
    level: MatchLevel = MatchLevel.SLOW_PERFECT,
    *,
    max_depth: int | None = None,
    cancel_event=None,
) -> DiffRun:
    """Runs the engine over `source` -> `destination` and returns the completed run."""
    engine = DiffEngine(level, max_depth=max_depth, cancel_event=cancel_event)
    engine.process_diff(source, destination)
    return engine.run


def diff_report(run: DiffRun) -> list[EditSpan]:
    """Returns the ordered edit script of a completed run."""
    return run.report()
