"""
raw (unmerged) ranges read from range files

Two line formats are accepted

- ``[name.]chr[(strand)]:start[-end]`` (ex. ``S288c.I(+):1-100`` or ``II:5``)
- tab delimited ``chr<TAB>start<TAB>end[<TAB>name]``

Coordinates are inclusive in both formats.
"""
import re
from typing import Iterable, List

from .constants import RANGE_OP
from .error import ParseError
from .intspan import IntSpan
from .setmap import GroupedSetMap, SetMap

RANGE_PATTERN = re.compile(
    r'''^
    (?:(?P<name>\w+)\.)?
    (?P<chr>[\w/\-]+)
    (?:\((?P<strand>[+\-.])\))?
    :
    (?P<start>\d+)
    (?:[_\-](?P<end>\d+))?
    $''',
    re.VERBOSE,
)


class Range:
    """
    a single inclusive range on a chromosome

    Attributes:
        chr (str): the chromosome name
        start (int): the first position (inclusive)
        end (int): the last position (inclusive)
        name (str): optional species or feature name
        strand (str): optional strand
        line (str): the text the range was parsed from
    """

    def __init__(self, chr, start, end=None, name=None, strand=None, line=None):
        self.chr = str(chr)
        self.start = int(start)
        self.end = int(end) if end is not None else self.start
        self.name = name
        self.strand = strand
        if self.start > self.end:
            raise ParseError(f'range start > end is not allowed: {self.start} > {self.end}')
        self.line = line if line is not None else str(self)

    @classmethod
    def parse(cls, line: str) -> 'Range':
        """
        Raises:
            ParseError: the line is not in either of the range formats

        Example:
            >>> Range.parse('S288c.I(+):1-100')
            Range(I, 1, 100, name='S288c', strand='+')
            >>> Range.parse('I\\t10\\t20\\tgene1')
            Range(I, 10, 20, name='gene1')
        """
        text = line.strip()
        if '\t' in text:
            fields = text.split('\t')
            if len(fields) < 3:
                raise ParseError(f'tab delimited range requires at least 3 fields: {repr(line)}')
            try:
                start, end = int(fields[1]), int(fields[2])
            except ValueError:
                raise ParseError(f'range positions must be integers: {repr(line)}')
            name = fields[3] if len(fields) > 3 and fields[3] else None
            return cls(fields[0], start, end, name=name, line=text)
        match = RANGE_PATTERN.match(text)
        if not match:
            raise ParseError(f'malformed range: {repr(line)}')
        return cls(
            match.group('chr'),
            match.group('start'),
            match.group('end'),
            name=match.group('name'),
            strand=match.group('strand'),
            line=text,
        )

    def intspan(self) -> IntSpan:
        return IntSpan.from_pair(self.start, self.end)

    def __len__(self):
        return self.end - self.start + 1

    def __str__(self):
        prefix = f'{self.name}.' if self.name else ''
        strand = f'({self.strand})' if self.strand else ''
        if self.start == self.end:
            return f'{prefix}{self.chr}{strand}:{self.start}'
        return f'{prefix}{self.chr}{strand}:{self.start}-{self.end}'

    def __repr__(self):
        extra = ''
        if self.name:
            extra += f', name={repr(self.name)}'
        if self.strand:
            extra += f', strand={repr(self.strand)}'
        return f'{self.__class__.__name__}({self.chr}, {self.start}, {self.end}{extra})'

    def __eq__(self, other):
        if not isinstance(other, Range):
            return NotImplemented
        return (self.chr, self.start, self.end, self.name, self.strand) == (
            other.chr, other.start, other.end, other.name, other.strand
        )


def parse_ranges(lines: Iterable[str]) -> List[Range]:
    """
    parse every non-blank, non-comment line as a range

    Raises:
        ParseError: any of the lines is malformed (the line number is included in the message)
    """
    ranges = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip() or line.startswith('#'):
            continue
        try:
            ranges.append(Range.parse(line))
        except ParseError as err:
            raise ParseError(f'line {line_no}: {err}')
    return ranges


def matches(intspan: IntSpan, rng: Range, op: str) -> bool:
    """
    test the relation op between a query range and a run list

    Raises:
        InvalidOperatorError: op is not a range operator
    """
    op = RANGE_OP.enforce(op)
    query = rng.intspan()
    if op == RANGE_OP.OVERLAP:
        return intspan.overlap(query) > 0
    elif op == RANGE_OP.NON_OVERLAP:
        return intspan.overlap(query) == 0
    return intspan.superset(query)


def filter_ranges(setmap: SetMap, ranges: Iterable[Range], op: str = RANGE_OP.OVERLAP) -> List[Range]:
    """
    keep the ranges which satisfy the relation op with the run list of their chromosome,
    chromosomes missing from the run lists are treated as empty

    Example:
        >>> setmap = SetMap.from_runlists({'II': '21294-22075'})
        >>> filter_ranges(setmap, [Range('II', 21300, 21400), Range('II', 21000, 21400)], 'superset')
        [Range(II, 21300, 21400)]
    """
    op = RANGE_OP.enforce(op)
    empty = IntSpan()
    return [rng for rng in ranges if matches(setmap.get(rng.chr, empty), rng, op)]


def runlist_to_ranges(collection: GroupedSetMap) -> List[str]:
    """
    one range per span of every run list, grouped documents prefix the group name

    Example:
        >>> runlist_to_ranges(GroupedSetMap.from_document({'I': '1-5,9'}))
        ['I:1-5', 'I:9']
    """
    lines = []
    for name, setmap in collection:
        for chrom in sorted(setmap):
            for start, end in setmap[chrom].spans():
                rng = Range(chrom, start, end, name=name if collection.multi else None)
                lines.append(str(rng))
    return lines
