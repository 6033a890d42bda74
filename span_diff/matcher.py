from collections.abc import Iterator

from span_diff.engine import DiffEngine, MatchLevel
from span_diff.spans import EditSpan, EditStatus


class SpanSequenceMatcher:
    """
    A difflib-compatible SequenceMatcher backed by the span engine.

    `a` is the source and `b` the destination. Unlike difflib (and the Myers
    matchers) the matching is heuristic: each region is split around its
    longest shared run, which is fast on typical inputs but does not
    guarantee a minimal edit script.
    """

    def __init__(self, isjunk=None, a=None, b=None, autojunk=True, level: MatchLevel = MatchLevel.SLOW_PERFECT):
        """
        Initializes the matcher with sequences a and b.
        `isjunk` and `autojunk` are ignored but kept for API compatibility.
        """
        self.level = level
        self.a = self.b = None
        self.edit_spans = self.opcodes = None
        self.set_seqs(a or [], b or [])

    def set_seqs(self, a, b):
        """Sets the two sequences to be compared."""
        self.set_seq1(a)
        self.set_seq2(b)

    def set_seq1(self, a):
        """Sets the first (source) sequence."""
        if a is self.a:
            return
        self.a = a
        self.edit_spans = self.opcodes = None

    def set_seq2(self, b):
        """Sets the second (destination) sequence."""
        if b is self.b:
            return
        self.b = b
        self.edit_spans = self.opcodes = None

    def get_edit_spans(self) -> list[EditSpan]:
        """Returns the engine's edit script. The result is cached."""
        if self.edit_spans is None:
            engine = DiffEngine(self.level)
            engine.process_diff(self.a, self.b)
            self.edit_spans = engine.diff_report()
        return self.edit_spans

    def get_matching_blocks(self) -> list[tuple[int, int, int]]:
        """
        Returns (i, j, n) triples with a[i:i+n] == b[j:j+n], ending with the
        (len(a), len(b), 0) sentinel like difflib.
        """
        blocks = [
            (span.source_index, span.dest_index, span.length)
            for span in self.get_edit_spans()
            if span.status is EditStatus.UNCHANGED
        ]
        blocks.append((len(self.a), len(self.b), 0))
        return blocks

    def get_opcodes(self) -> Iterator[tuple[str, int, int, int, int]]:
        """
        Return list of 5-tuples describing how to turn a into b.
        Each tuple is of the form (tag, i1, i2, j1, j2).

        There is one opcode per gap between matching blocks, so a replace
        followed by an insert or delete is reported as a single 'replace'.
        The result is cached.
        """
        if self.opcodes is None:
            self.opcodes = self._calculate_opcodes()
        yield from self.opcodes

    def _calculate_opcodes(self) -> list[tuple[str, int, int, int, int]]:
        opcodes = []
        src_pos = dest_pos = 0
        for span in self.get_edit_spans():
            src_next = src_pos + span.source_length
            dest_next = dest_pos + span.dest_length
            tag = span.status.value
            if tag != 'equal' and opcodes and opcodes[-1][0] != 'equal':
                # Remainder of the same gap: widen the previous replace
                _, gap_src, _, gap_dest, _ = opcodes[-1]
                opcodes[-1] = ('replace', gap_src, src_next, gap_dest, dest_next)
            else:
                opcodes.append((tag, src_pos, src_next, dest_pos, dest_next))
            src_pos, dest_pos = src_next, dest_next
        return opcodes

    def ratio(self) -> float:
        """Similarity in [0, 1]: twice the matched elements over the total, as in difflib."""
        total = len(self.a) + len(self.b)
        if not total:
            return 1.0
        matches = sum(size for _, _, size in self.get_matching_blocks())
        return 2.0 * matches / total
