from collections import namedtuple
from enum import Enum


# A run of `length` equal elements at `dest_index` / `source_index`.
MatchSpan = namedtuple('MatchSpan', ['dest_index', 'source_index', 'length'])


class EditStatus(Enum):
    """Kind of an edit span. Values are the matching difflib opcode tags."""

    UNCHANGED = 'equal'
    REPLACE = 'replace'
    INSERT = 'insert'
    DELETE = 'delete'


_LABELS = {
    EditStatus.UNCHANGED: 'Unchanged',
    EditStatus.REPLACE: 'Replace',
    EditStatus.INSERT: 'InsertIntoDestination',
    EditStatus.DELETE: 'DeleteFromSource',
}


class EditSpan(namedtuple('EditSpan', ['status', 'dest_index', 'source_index', 'length'])):
    """
    One operation of an edit script.

    - UNCHANGED / REPLACE: `length` elements on both sides, starting at
      `dest_index` and `source_index`.
    - INSERT: `length` destination elements at `dest_index`; `source_index` is None.
    - DELETE: `length` source elements at `source_index`; `dest_index` is None.
    """

    __slots__ = ()

    @classmethod
    def unchanged(cls, dest_index: int, source_index: int, length: int) -> "EditSpan":
        return cls(EditStatus.UNCHANGED, dest_index, source_index, length)

    @classmethod
    def replace(cls, dest_index: int, source_index: int, length: int) -> "EditSpan":
        return cls(EditStatus.REPLACE, dest_index, source_index, length)

    @classmethod
    def insert(cls, dest_index: int, length: int) -> "EditSpan":
        return cls(EditStatus.INSERT, dest_index, None, length)

    @classmethod
    def delete(cls, source_index: int, length: int) -> "EditSpan":
        return cls(EditStatus.DELETE, None, source_index, length)

    @property
    def dest_length(self) -> int:
        return 0 if self.status is EditStatus.DELETE else self.length

    @property
    def source_length(self) -> int:
        return 0 if self.status is EditStatus.INSERT else self.length

    def extended(self, length: int) -> "EditSpan":
        """Returns a copy of this span grown by `length` elements."""
        return self._replace(length=self.length + length)

    def __str__(self) -> str:
        return f"{_LABELS[self.status]} (Dest: {self.dest_index},Source: {self.source_index}) {self.length}"
