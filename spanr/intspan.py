import heapq
import itertools
import math
from bisect import bisect_left, bisect_right
from operator import itemgetter

from .constants import EMPTY_RUNLIST, RUNLIST_TOKEN
from .error import ParseError


def _edges(spans, tag):
    # half-open boundaries, each toggles membership of the tagged operand
    for lower, upper in spans:
        yield lower, tag
        yield upper + 1, tag


def _scan(first, second, keep):
    """
    merge-scan the sorted boundaries of two span lists and return the spans where
    keep(in_first, in_second) holds
    """
    result = []
    inside = [False, False]
    start = None
    boundaries = heapq.merge(_edges(first, 0), _edges(second, 1))
    for pos, group in itertools.groupby(boundaries, key=itemgetter(0)):
        for _, tag in group:
            inside[tag] = not inside[tag]
        if keep(*inside):
            if start is None:
                start = pos
        elif start is not None:
            result.append((start, pos - 1))
            start = None
    return result


class IntSpan:
    """
    a set of integers stored as a sorted list of disjoint, non-adjacent, inclusive ranges

    Example:
        >>> IntSpan('1-5,9,12,15-16,20')
        IntSpan('1-5,9,12,15-16,20')
        >>> IntSpan().add_range(1, 5).add_value(9).add_values([12, 16, 15, 15, 20])
        IntSpan('1-5,9,12,15-16,20')
    """

    def __init__(self, runlist=None):
        """
        Args:
            runlist (str): a run list to initialize the set with (ex. '1-5,9')
        """
        self._spans = []
        if runlist is not None:
            self.add_runlist(runlist)

    @classmethod
    def from_runlist(cls, runlist):
        """
        parse the run list notation

        Raises:
            ParseError: a token is not an integer or range or the range is reversed

        Example:
            >>> IntSpan.from_runlist('1-3, 5').spans()
            [(1, 3), (5, 5)]
            >>> IntSpan.from_runlist('-').is_empty()
            True
        """
        return cls().add_runlist(runlist)

    @classmethod
    def from_spans(cls, spans):
        return cls().add_spans(spans)

    @classmethod
    def from_pair(cls, lower, upper):
        return cls().add_range(lower, upper)

    def copy(self):
        result = IntSpan()
        result._spans = list(self._spans)
        return result

    # builders: these mutate and return the set itself

    def add_range(self, lower, upper):
        """
        add the inclusive range lower-upper, merging any range it touches or overlaps

        Raises:
            ValueError: lower is greater than upper
        """
        lower, upper = int(lower), int(upper)
        if lower > upper:
            raise ValueError('range lower bound > upper bound is not allowed', lower, upper)
        spans = self._spans
        first = bisect_left(spans, (lower, lower))
        if first > 0 and spans[first - 1][1] >= lower - 1:
            first -= 1
        last = bisect_right(spans, (upper + 1, math.inf))
        if first < last:
            lower = min(lower, spans[first][0])
            upper = max(upper, spans[last - 1][1])
        spans[first:last] = [(lower, upper)]
        return self

    add_pair = add_range

    def add_value(self, value):
        return self.add_range(value, value)

    add_n = add_value

    def add_values(self, values):
        """
        add many single integers, the input order and duplicates do not matter

        Example:
            >>> IntSpan().add_values([5, 3, 4, 4, 10]).runlist()
            '3-5,10'
        """
        runs = []
        for value in sorted(set(int(v) for v in values)):
            if runs and runs[-1][1] + 1 == value:
                runs[-1][1] = value
            else:
                runs.append([value, value])
        return self.add_spans(runs)

    add_vec = add_values

    def add_spans(self, spans):
        """
        add many (lower, upper) pairs
        """
        for lower, upper in spans:
            self.add_range(lower, upper)
        return self

    def add_runlist(self, runlist):
        runlist = ''.join(str(runlist).split())
        if runlist in {'', EMPTY_RUNLIST}:
            return self
        for token in runlist.split(','):
            match = RUNLIST_TOKEN.match(token)
            if not match:
                raise ParseError('malformed run list token {} in {}'.format(repr(token), repr(runlist)))
            lower = int(match.group('lower'))
            upper = int(match.group('upper')) if match.group('upper') else lower
            if lower > upper:
                raise ParseError('run list token {} has lower bound > upper bound'.format(repr(token)))
            self.add_range(lower, upper)
        return self

    def clear(self):
        self._spans = []
        return self

    # accessors

    def spans(self):
        """
        Returns:
            :class:`list` of :class:`tuple` of :class:`int`: the (lower, upper) pairs in ascending order
        """
        return list(self._spans)

    def ranges(self):
        """
        Example:
            >>> IntSpan('1-5,9').ranges()
            [1, 5, 9, 9]
        """
        return [pos for span in self._spans for pos in span]

    def is_empty(self):
        return not self._spans

    def is_not_empty(self):
        return bool(self._spans)

    def cardinality(self):
        """
        the number of integers in the set

        Example:
            >>> IntSpan('1-5,9,12,15-16,20').cardinality()
            10
        """
        return sum(upper - lower + 1 for lower, upper in self._spans)

    size = cardinality

    def span_size(self):
        """
        the number of ranges in the set

        Example:
            >>> IntSpan('1-5,9,12,15-16,20').span_size()
            5
        """
        return len(self._spans)

    def min(self):
        if not self._spans:
            raise ValueError('cannot compute the minimum of an empty set')
        return self._spans[0][0]

    def max(self):
        if not self._spans:
            raise ValueError('cannot compute the maximum of an empty set')
        return self._spans[-1][1]

    def contains(self, value):
        """
        binary search for the range that could hold the value

        Example:
            >>> IntSpan('1-5,9').contains(9)
            True
            >>> IntSpan('1-5,9').contains(6)
            False
        """
        index = bisect_right(self._spans, (value, math.inf))
        return index > 0 and self._spans[index - 1][1] >= value

    def runlist(self):
        """
        render the canonical run list notation

        Example:
            >>> IntSpan().add_spans([(9, 9), (1, 5)]).runlist()
            '1-5,9'
            >>> IntSpan().runlist()
            '-'
        """
        if not self._spans:
            return EMPTY_RUNLIST
        return ','.join(
            str(lower) if lower == upper else '{}-{}'.format(lower, upper) for lower, upper in self._spans
        )

    # set algebra

    def union(self, other):
        return IntSpan.from_canonical(_scan(self._spans, other._spans, lambda a, b: a or b))

    def intersect(self, other):
        return IntSpan.from_canonical(_scan(self._spans, other._spans, lambda a, b: a and b))

    def diff(self, other):
        return IntSpan.from_canonical(_scan(self._spans, other._spans, lambda a, b: a and not b))

    def xor(self, other):
        return IntSpan.from_canonical(_scan(self._spans, other._spans, lambda a, b: a != b))

    def overlap(self, other):
        """
        the number of integers shared with another set
        """
        return self.intersect(other).cardinality()

    def superset(self, other):
        """
        True if every integer of other is also in this set
        """
        return other.diff(self).is_empty()

    def subset(self, other):
        return other.superset(self)

    def holes(self):
        """
        the gaps between consecutive ranges

        Example:
            >>> IntSpan('1-5,9,12-15').holes()
            IntSpan('6-8,10-11')
        """
        return IntSpan.from_canonical([
            (prev[1] + 1, curr[0] - 1) for prev, curr in zip(self._spans, self._spans[1:])
        ])

    # span operations

    def cover(self):
        """
        the single range enclosing the set

        Example:
            >>> IntSpan('1-5,9,12-15').cover()
            IntSpan('1-15')
        """
        if not self._spans:
            return IntSpan()
        return IntSpan.from_canonical([(self.min(), self.max())])

    def fill(self, size):
        """
        fill in the holes which contain no more than size integers

        Example:
            >>> IntSpan('1-5,9,12-15').fill(2)
            IntSpan('1-5,9-15')
        """
        spans = []
        for lower, upper in self._spans:
            if spans and lower - spans[-1][1] - 1 <= size:
                spans[-1] = (spans[-1][0], upper)
            else:
                spans.append((lower, upper))
        return IntSpan.from_canonical(spans)

    def inset(self, size):
        """
        shrink each range by size at both ends, a negative size grows the ranges instead

        Example:
            >>> IntSpan('1-10,20-22').inset(2)
            IntSpan('3-8')
            >>> IntSpan('1-10,20-22').inset(-5)
            IntSpan('-4-27')
        """
        result = IntSpan()
        for lower, upper in self._spans:
            lower, upper = lower + size, upper - size
            if lower <= upper:
                result.add_range(lower, upper)
        return result

    def trim(self, size):
        return self.inset(size)

    def pad(self, size):
        return self.inset(-size)

    def excise(self, minlength):
        """
        remove any range with fewer than minlength integers

        Example:
            >>> IntSpan('1-10,20-22').excise(4)
            IntSpan('1-10')
        """
        return IntSpan.from_canonical([
            (lower, upper) for lower, upper in self._spans if upper - lower + 1 >= minlength
        ])

    @classmethod
    def from_canonical(cls, spans):
        # spans are already sorted, disjoint and non-adjacent
        result = cls()
        result._spans = list(spans)
        return result

    # python protocols

    def __contains__(self, value):
        return self.contains(value)

    def __or__(self, other):
        return self.union(other)

    def __and__(self, other):
        return self.intersect(other)

    def __sub__(self, other):
        return self.diff(other)

    def __xor__(self, other):
        return self.xor(other)

    def __len__(self):
        return self.cardinality()

    def __bool__(self):
        return bool(self._spans)

    def __eq__(self, other):
        if not isinstance(other, IntSpan):
            return NotImplemented
        return self._spans == other._spans

    def __hash__(self):
        return hash(tuple(self._spans))

    def __str__(self):
        return self.runlist()

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, repr(self.runlist()))
