import pytest

from span_diff.match_state import MatchStateCache, MatchStatus


@pytest.fixture
def cache():
    return MatchStateCache.sized(5)

def test_sized_cache_starts_unknown(cache):
    assert len(cache) == 5
    for i in range(5):
        assert cache.get(i).status is MatchStatus.UNKNOWN

def test_get_returns_same_state(cache):
    assert cache.get(2) is cache.get(2)
    assert cache.get(2) is not cache.get(3)

def test_get_out_of_range(cache):
    with pytest.raises(IndexError):
        cache.get(5)
    with pytest.raises(IndexError):
        cache.get(-1)

def test_unknown_is_never_valid(cache):
    assert cache.is_valid_for(cache.get(0), 0, 10, 5) is False
    assert cache.misses == 1

def test_record_match(cache):
    state = cache.get(1)
    cache.record_match(state, 4, 3, 0, 9, 4)
    assert state.status is MatchStatus.MATCHED
    assert state.source_index == 4
    assert state.length == 3
    assert state.source_end == 6
    assert (state.window_start, state.window_end, state.max_length) == (0, 9, 4)

def test_record_match_rejects_empty_run(cache):
    with pytest.raises(ValueError):
        cache.record_match(cache.get(0), 0, 0, 0, 9, 4)

def test_match_valid_for_same_or_narrower_window(cache):
    state = cache.get(0)
    cache.record_match(state, 4, 3, 0, 9, 5)

    assert cache.is_valid_for(state, 0, 9, 5)
    # Narrower window that still contains the run
    assert cache.is_valid_for(state, 2, 8, 3)
    assert cache.hits == 2

@pytest.mark.parametrize("source_start, source_end, max_length", [
    (0, 10, 5),  # wider than the recorded window
    (5, 9, 5),   # cuts off the start of the run
    (0, 5, 5),   # cuts off the end of the run
    (0, 9, 6),   # larger bound than recorded
    (0, 9, 2),   # run no longer fits the bound
])
def test_match_invalid_requests(cache, source_start, source_end, max_length):
    state = cache.get(0)
    cache.record_match(state, 4, 3, 0, 9, 5)
    assert cache.is_valid_for(state, source_start, source_end, max_length) is False

def test_no_match_valid_inside_window(cache):
    state = cache.get(3)
    cache.record_no_match(state, 2, 8, 2)
    assert state.status is MatchStatus.NO_MATCH
    assert cache.is_valid_for(state, 3, 7, 1)
    assert not cache.is_valid_for(state, 1, 7, 1)

def test_reset(cache):
    state = cache.get(0)
    cache.record_match(state, 1, 1, 0, 3, 1)
    state.reset()
    assert state.status is MatchStatus.UNKNOWN
    assert "UNKNOWN" in repr(state)
