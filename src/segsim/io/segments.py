"""
Segment file parsing.

A segment file lists the trees of a multi-tree simulation, one record per
segment::

    # begin end tree
    0.0 0.4 ((A:0.1,B:0.2):0.1,C:0.3);
    0.4 1.0 ((A:0.1,C:0.2):0.1,
             B:0.3);

Positions are fractions of the simulated sequence length. A tree may span
several lines; the record ends at the semicolon closing the tree.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

from ..exceptions import ParseError
from ..segments import Segment
from .trees import Tree, find_newick_end

COMMENT = "#"


@dataclass(frozen=True)
class SegmentRecord:
    """
    One raw record of a segment file.

    Attributes
    ----------
    begin : float
        Start position in [0, 1]
    end : float
        End position in [0, 1]
    tree_text : str
        Newick text, including the terminating semicolon
    line : int
        1-based line number where the record starts
    """

    begin: float
    end: float
    tree_text: str
    line: int


def _parse_record(text: str, line: int) -> SegmentRecord:
    fields = text.split(None, 2)
    if len(fields) < 3 or fields[2] == ";":
        raise ParseError(
            "expected '<begin> <end> <tree>;' but found "
            f"{' '.join(text.split())!r}",
            line=line,
        )
    try:
        begin = float(fields[0])
        end = float(fields[1])
    except ValueError:
        raise ParseError(
            f"segment positions must be numbers, got {fields[0]!r} and {fields[1]!r}",
            line=line,
        )
    return SegmentRecord(begin=begin, end=end, tree_text=fields[2], line=line)


def read_segment_records(lines: Iterable[str]) -> Iterator[SegmentRecord]:
    """
    Read raw segment records from lines of text.

    Blank lines and lines starting with '#' are skipped. Text is accumulated
    until a semicolon closes the tree; semicolons inside quoted names and
    square-bracket comments do not count. Anything after the semicolon on the
    same line starts the next record, unless it is a '#' comment.

    Parameters
    ----------
    lines : iterable of str
        Lines of a segment file (an open file works)

    Yields
    ------
    SegmentRecord
        Records in file order

    Raises
    ------
    ParseError
        If a record is malformed or the input ends inside a tree
    """
    text = ""
    start_line = 0

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith(COMMENT):
            continue
        if not text:
            start_line = line_number
            text = line
        else:
            text += "\n" + line

        end = find_newick_end(text)
        while end >= 0:
            yield _parse_record(text[:end + 1], start_line)

            text = text[end + 1:].strip()
            if text.startswith(COMMENT):
                text = ""
            start_line = line_number
            end = find_newick_end(text)

    if text:
        raise ParseError("incomplete tree: end of input before ';'", line=start_line)


def load_segments(source: Union[Path, str, Iterable[str]]) -> list[Segment]:
    """
    Read a segment file and parse the tree of every record.

    Parameters
    ----------
    source : Path, str or iterable of str
        Path to a segment file, or its lines

    Returns
    -------
    list[Segment]
        Segments in file order (not yet validated)

    Raises
    ------
    ParseError
        If a record or its tree is malformed
    """
    if isinstance(source, (str, Path)):
        with open(source) as f:
            records = list(read_segment_records(f))
    else:
        records = list(read_segment_records(source))

    segments = []
    for record in records:
        try:
            tree = Tree.from_newick(record.tree_text)
        except ValueError as e:
            raise ParseError(f"invalid tree: {e}", line=record.line) from e
        segments.append(Segment(begin=record.begin, end=record.end, tree=tree))
    return segments
