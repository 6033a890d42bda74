from collections.abc import Iterable

from span_diff.spans import EditSpan, EditStatus, MatchSpan


def _add_changes(report: list[EditSpan], cur_dest: int, next_dest: int, cur_source: int, next_source: int) -> bool:
    """
    Appends the edits that close the gap between the cursors and the next
    match. Returns True if anything was appended.
    """
    dest_gap = next_dest - cur_dest
    source_gap = next_source - cur_source

    if dest_gap > 0 and source_gap > 0:
        common = min(dest_gap, source_gap)
        report.append(EditSpan.replace(cur_dest, cur_source, common))
        if dest_gap > source_gap:
            report.append(EditSpan.insert(cur_dest + common, dest_gap - common))
        elif source_gap > dest_gap:
            report.append(EditSpan.delete(cur_source + common, source_gap - common))
        return True
    if dest_gap > 0:
        report.append(EditSpan.insert(cur_dest, dest_gap))
        return True
    if source_gap > 0:
        report.append(EditSpan.delete(cur_source, source_gap))
        return True
    return False


def assemble_report(matches: Iterable[MatchSpan], destination_length: int, source_length: int) -> list[EditSpan]:
    """
    Turns the match spans of a diff run into an ordered edit script covering
    both sequences end to end.

    Matches that touch the previous one on both sides are folded into the
    previous Unchanged span, so the script holds maximal unchanged runs.
    """
    if destination_length == 0:
        return [EditSpan.delete(0, source_length)] if source_length > 0 else []
    if source_length == 0:
        return [EditSpan.insert(0, destination_length)]

    report: list[EditSpan] = []
    cur_dest = 0
    cur_source = 0

    for match in sorted(matches, key=lambda m: m.dest_index):
        gap_closed = _add_changes(report, cur_dest, match.dest_index, cur_source, match.source_index)
        if not gap_closed and report and report[-1].status is EditStatus.UNCHANGED:
            report[-1] = report[-1].extended(match.length)
        else:
            report.append(EditSpan.unchanged(match.dest_index, match.source_index, match.length))
        cur_dest = match.dest_index + match.length
        cur_source = match.source_index + match.length

    # Tail end data
    _add_changes(report, cur_dest, destination_length, cur_source, source_length)

    return report
