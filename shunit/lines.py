"""
Timestamped output fragments and the routines that turn the fragments
captured from a script's stdout and stderr back into ordered lines.

A fragment is whatever a single read from a pipe returned, so it may hold
a partial line.  Fragments from one stream are already in capture order;
fragments from the two streams are put back into (approximate) time order
by merge_streams and then glued into logical lines by join_lines.
"""

from collections import namedtuple
from operator import attrgetter


LogLine = namedtuple('LogLine', ['timestamp', 'text'])

JoinedLine = namedtuple('JoinedLine', ['timestamp', 'text'])


def merge_streams(stdout_fragments, stderr_fragments):
    """Merge two capture-ordered fragment sequences into one list sorted
    by timestamp.

    The sort is stable and stdout comes first in the concatenation, so
    fragments with equal timestamps are ordered stdout before stderr.  This
    is only a tie-break; the real interleaving of two pipes finer than the
    timestamp resolution can't be recovered.
    """
    return sorted(list(stdout_fragments) + list(stderr_fragments),
                  key=attrgetter('timestamp'))


def join_lines(fragments):
    """Join fragments so there is one entry per line.

    A line that was split across several fragments becomes a single
    JoinedLine carrying the timestamp of its first fragment.  The last
    fragment is always flushed, even if it has no line terminator.
    """
    fragments = list(fragments)
    joined = []
    buf = []
    first_ts = None
    last = len(fragments) - 1

    for i, (ts, text) in enumerate(fragments):
        buf.append(text)
        if first_ts is None:
            first_ts = ts
        if text.endswith('\n') or i == last:
            joined.append(JoinedLine(first_ts, ''.join(buf)))
            buf = []
            first_ts = None

    return joined


def lines_text(lines):
    """Return the concatenated text of the given lines or fragments."""
    return ''.join(line.text for line in lines)
