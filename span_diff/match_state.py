from enum import Enum


class MatchStatus(Enum):
    UNKNOWN = -2
    NO_MATCH = -1
    MATCHED = 1


class MatchState:
    """
    Memo of the longest source match starting at one destination index.

    The window (`window_start`..`window_end`, inclusive) and `max_length` record
    the search that produced the result, so later searches can tell whether the
    memo still answers their question.
    """

    __slots__ = ('status', 'source_index', 'length', 'window_start', 'window_end', 'max_length')

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.status = MatchStatus.UNKNOWN
        self.source_index = -1
        self.length = 0
        self.window_start = -1
        self.window_end = -1
        self.max_length = 0

    @property
    def source_end(self) -> int:
        """Inclusive end index of the matched run in the source."""
        return self.source_index + self.length - 1

    def __repr__(self) -> str:
        if self.status is MatchStatus.MATCHED:
            return (f"MatchState(MATCHED source={self.source_index} length={self.length} "
                    f"window={self.window_start}..{self.window_end})")
        return f"MatchState({self.status.name})"


class MatchStateCache:
    """One `MatchState` per destination index, reused across a single diff run."""

    def __init__(self, states: list[MatchState]) -> None:
        self._states = states
        self.hits = 0
        self.misses = 0

    @classmethod
    def sized(cls, destination_length: int) -> "MatchStateCache":
        return cls([MatchState() for _ in range(destination_length)])

    def __len__(self) -> int:
        return len(self._states)

    def get(self, dest_index: int) -> MatchState:
        if not 0 <= dest_index < len(self._states):
            raise IndexError(f"Destination index {dest_index} out of range for cache of size {len(self._states)}")
        return self._states[dest_index]

    def is_valid_for(self, state: MatchState, source_start: int, source_end: int, max_length: int) -> bool:
        """
        True if `state` can answer a search over `source_start..source_end`
        bounded by `max_length` without recomputing.

        The request must sit inside the memoized window and bound. A memoized
        match must also still lie inside the requested window and fit the bound.
        """
        valid = (
            state.status is not MatchStatus.UNKNOWN
            and state.window_start <= source_start
            and source_end <= state.window_end
            and max_length <= state.max_length
        )
        if valid and state.status is MatchStatus.MATCHED:
            valid = (
                state.source_index >= source_start
                and state.source_end <= source_end
                and state.length <= max_length
            )
        if valid:
            self.hits += 1
        else:
            self.misses += 1
        return valid

    def record_match(
        self,
        state: MatchState,
        source_index: int,
        length: int,
        source_start: int,
        source_end: int,
        max_length: int,
    ) -> None:
        if length <= 0:
            raise ValueError(f"Match length must be positive, got {length}")
        if source_index < 0:
            raise ValueError(f"Match source index must not be negative, got {source_index}")
        state.status = MatchStatus.MATCHED
        state.source_index = source_index
        state.length = length
        self._record_window(state, source_start, source_end, max_length)

    def record_no_match(self, state: MatchState, source_start: int, source_end: int, max_length: int) -> None:
        state.status = MatchStatus.NO_MATCH
        state.source_index = -1
        state.length = 0
        self._record_window(state, source_start, source_end, max_length)

    def _record_window(self, state: MatchState, source_start: int, source_end: int, max_length: int) -> None:
        state.window_start = source_start
        state.window_end = source_end
        state.max_length = max_length
