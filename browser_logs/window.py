"""Character-bounded windows over rendered log lines."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple


def total_length(lines: Sequence[str]) -> int:
    return sum(len(line) for line in lines)


def trim_to_length(lines: Sequence[str], max_length: int, prefer_end: bool) -> List[str]:
    """
    Keep the longest run of whole lines whose total length fits ``max_length``.

    With ``prefer_end`` the run is anchored at the end of ``lines``, otherwise
    at the start. Lines are never cut; a line that does not fit stops the run.
    """
    length = 0
    if prefer_end:
        index = len(lines)
        for i in range(len(lines) - 1, -1, -1):
            length += len(lines[i])
            if length > max_length:
                break
            index = i
        return list(lines[index:])

    index = 0
    for i, line in enumerate(lines):
        length += len(line)
        if length > max_length:
            break
        index = i + 1
    return list(lines[:index])


def skipped_marker(count: int) -> str:
    return f"[{count} messages skipped]"


def trimmed_marker(count: int) -> str:
    return f"[{count} messages trimmed]"


def trim_lines(
    lines: Sequence[str],
    max_total_length: int,
    first: Optional[int] = None,
    last: Optional[int] = None,
) -> Tuple[List[str], int]:
    """
    Bound ``lines`` to ``max_total_length`` characters.

    Returns the lines to display and the number of source lines omitted. When
    lines were omitted, the returned list carries one marker line reporting
    that count:

    - neither ``first`` nor ``last``: keep the longest tail that fits and put
      ``[N messages trimmed]`` in front of it;
    - ``first`` only: take the first ``first`` lines, keep the longest head of
      them that fits and append the marker;
    - ``last`` only: take the last ``last`` lines, keep the longest tail of
      them that fits and prepend the marker;
    - both: if the two slices fit together they are returned as-is, even if
      they overlap. Otherwise the budget is split between them in proportion
      to their lengths (floor for the first slice, remainder for the last)
      and the result is ``first part + [N messages skipped] + last part``.
      N counts the source lines kept by neither part, so a line shared by
      overlapping slices is dropped only if both parts drop it.
    """
    source = list(lines)

    if first and last:
        first_n = source[:first]
        last_n = source[-last:]
        length_first = total_length(first_n)
        length_last = total_length(last_n)
        combined = length_first + length_last
        if combined <= max_total_length:
            return first_n + last_n, 0

        max_length_first = (max_total_length * length_first) // combined
        max_length_last = max_total_length - max_length_first
        trimmed_first = trim_to_length(first_n, max_length_first, prefer_end=False)
        trimmed_last = trim_to_length(last_n, max_length_last, prefer_end=True)

        # The slices may overlap; count source positions neither side kept.
        kept = set(range(len(trimmed_first)))
        kept.update(range(len(source) - len(trimmed_last), len(source)))
        skipped = len(source) - len(kept)
        if skipped == 0:
            return trimmed_first + trimmed_last, 0
        return trimmed_first + [skipped_marker(skipped)] + trimmed_last, skipped

    if first:
        head = source[:first]
        trimmed = trim_to_length(head, max_total_length, prefer_end=False)
        skipped = len(head) - len(trimmed)
        if skipped > 0:
            trimmed.append(trimmed_marker(skipped))
        return trimmed, skipped

    if last:
        tail = source[-last:]
        trimmed = trim_to_length(tail, max_total_length, prefer_end=True)
        skipped = len(tail) - len(trimmed)
        if skipped > 0:
            trimmed.insert(0, trimmed_marker(skipped))
        return trimmed, skipped

    trimmed = trim_to_length(source, max_total_length, prefer_end=True)
    skipped = len(source) - len(trimmed)
    if skipped > 0:
        trimmed.insert(0, trimmed_marker(skipped))
    return trimmed, skipped
