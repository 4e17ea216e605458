import logging

from pattern import ElementKind

logger = logging.getLogger(__name__)


def match_chunk(pattern, chunk):
    """
    Match a single window against `pattern`.

    `chunk` MUST be exactly `pattern.len()` bytes long.
    Returns `(captures, matched)` where captures are `(value, index)` pairs,
    `index` being relative to the start of the chunk.
    """
    if len(chunk) != pattern.len():
        raise AssertionError("chunk is %d bytes, pattern is %d" % (len(chunk), pattern.len()))

    matches = []
    for index, (actual, expected) in enumerate(zip(chunk, pattern.elements)):
        if expected.kind is ElementKind.LITERAL:
            if actual != expected.value:
                return [], False # Discard all captures
        elif expected.kind is ElementKind.PLACEHOLDER:
            matches.append((actual, index))
    return matches, True


def _find_anchor(pattern):
    # ---- collect known-byte runs ----
    runs = []
    run = []
    for i, element in enumerate(pattern.elements):
        if element.kind is ElementKind.LITERAL:
            run.append(element.value)
            continue
        if run:
            runs.append((i - len(run), bytes(run)))
            run = []
    if run:
        runs.append((pattern.len() - len(run), bytes(run)))

    if not runs:
        return None

    # ---- choose best anchor: longest run, all-00 or all-FF runs last ----
    def score(r):
        data = r[1]
        common = data.strip(b"\x00") == b"" or data.strip(b"\xff") == b""
        return (not common, len(data))

    return max(runs, key=score)


def _candidates(pattern, haystack):
    # Window starts that are worth checking, in ascending order
    plen = pattern.len()
    last = len(haystack) - plen
    if last < 0:
        return

    anchor = _find_anchor(pattern) if hasattr(haystack, "find") else None
    if anchor is None:
        yield from range(last + 1)
        return

    anchor_off, anchor_bytes = anchor
    logger.debug("Using anchor %s at +%d", anchor_bytes.hex(), anchor_off)

    pos = anchor_off
    while True:
        pos = haystack.find(anchor_bytes, pos)
        if pos == -1:
            return

        start = pos - anchor_off
        if start > last:
            return
        yield start

        pos += 1


def _matching_windows(pattern, haystack):
    plen = pattern.len()
    for start in _candidates(pattern, haystack):
        captures, matched = match_chunk(pattern, haystack[start:start + plen])
        if matched:
            yield start, captures


def find_matches_with_index(pattern, haystack):
    """
    Finds all captures in `haystack` as `(value, offset)` pairs.

    Offsets are absolute. Overlapping windows are all reported, in
    ascending order.
    """
    matches = []
    for start, captures in _matching_windows(pattern, haystack):
        matches.extend((value, index + start) for value, index in captures)
    return matches


def find_matches(pattern, haystack):
    return [value for value, _ in find_matches_with_index(pattern, haystack)]


def find_match_offsets(pattern, haystack):
    """Yields the start of every matching window."""
    for start, _ in _matching_windows(pattern, haystack):
        yield start


def has_match(pattern, haystack):
    for _ in _matching_windows(pattern, haystack):
        return True
    return False
