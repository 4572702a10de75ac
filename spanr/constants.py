"""
module responsible for small utility functions and constants used throughout the spanr package
"""
import argparse
import os
import re

from .error import InvalidOperatorError


PROGNAME = 'spanr'
EXIT_OK = 0
EXIT_ERROR = 1

EMPTY_RUNLIST = '-'
""":class:`str`: placeholder token for the empty set in the run list notation"""

SINGLE_GROUP = '__single'
""":class:`str`: name of the implicit group holding a flat (not grouped) run list document"""

STDIN = 'stdin'
STDOUT = 'stdout'


class SpanrNamespace:
    """
    Namespace to hold module constants

    members flagged as environment overwritable are read from SPANR_<NAME> when that variable is set

    Example:
        >>> nspace = SpanrNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.values()
        [1, 2]
    """
    def __init__(self, **kwargs):
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_env_overwritable', set())
        for attr, value in kwargs.items():
            self.add(attr, value)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__, ', '.join('{}={}'.format(k, repr(v)) for k, v in self._members.items()))

    def __getattr__(self, attr):
        members = object.__getattribute__(self, '_members')
        if attr not in members:
            raise AttributeError(attr)
        if self.is_env_overwritable(attr):
            env = os.environ.get(self.get_env_name(attr))
            if env is not None:
                return self._types[attr](env.strip())
        return members[attr]

    def __setattr__(self, attr, val):
        raise AttributeError('members must be added with add', attr)

    def get_env_name(self, attr):
        """
        Example:
            >>> SpanrNamespace(a=1).get_env_name('a')
            'SPANR_A'
        """
        return '{}_{}'.format(PROGNAME, attr).upper()

    def is_env_overwritable(self, attr):
        return attr in self._env_overwritable

    def values(self):
        return [getattr(self, k) for k in self._members]

    def define(self, attr):
        """
        the help text of a member, None when it was added without one
        """
        return self._defns.get(attr)

    def add(self, attr, value, defn=None, cast_type=None, env_overwritable=False):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition, will be used in generating help menus
            cast_type (callable): the function used to cast the environment variable, defaults to the type of value
            env_overwritable (bool): True if this attribute will be overriden by its environment variable equivalent
        """
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        if attr in self._members:
            raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
        self._members[attr] = value
        self._types[attr] = cast_type if cast_type else type(value)
        if defn:
            self._defns[attr] = defn
        if env_overwritable:
            self._env_overwritable.add(attr)


class OperatorNamespace(SpanrNamespace):
    """
    closed family of operator names

    unknown names are rejected with :class:`~spanr.error.InvalidOperatorError` both when the
    namespace is used directly and when it is used as an argparse type

    Example:
        >>> SET_OP.enforce('union')
        'union'
        >>> SET_OP.enforce('invalid')
        Traceback (most recent call last):
        ....
        spanr.error.InvalidOperatorError: Invalid IntSpan Op: 'invalid' (expected one of: union, intersect, diff, xor)
    """
    def __init__(self, family, **kwargs):
        object.__setattr__(self, '_family', family)
        SpanrNamespace.__init__(self, **kwargs)

    def error_message(self, value):
        return 'Invalid {} Op: {} (expected one of: {})'.format(self._family, repr(value), ', '.join(self.values()))

    def enforce(self, value):
        """
        Returns:
            the input value

        Raises:
            InvalidOperatorError: the value is not one of the operators of this family
        """
        if value not in self.values():
            raise InvalidOperatorError(self.error_message(value))
        return value

    def __call__(self, value):
        try:
            return self.enforce(value)
        except InvalidOperatorError:
            raise argparse.ArgumentTypeError(self.error_message(value))


SUBCOMMAND = SpanrNamespace(
    GENOME='genome',
    SOME='some',
    MERGE='merge',
    SPLIT='split',
    STAT='stat',
    STATOP='statop',
    COMBINE='combine',
    COMPARE='compare',
    SPAN='span',
    COVER='cover',
    GFF='gff',
    CONVERT='convert',
    RANGE='range'
)
"""
holds controlled vocabulary for allowed spanr subcommands

- ``genome``: convert a chromosome size table to run lists covering each chromosome
- ``some``: keep the records of a run list document named in a list file
- ``merge``: merge run list documents into one grouped document
- ``split``: split a grouped document into one document per group
- ``stat``: coverage statistics of a run list document
- ``statop``: coverage statistics of one document against another
- ``combine``: union the groups of a grouped document
- ``compare``: set operations between two documents
- ``span``: span operations (cover, fill, trim, pad, excise)
- ``cover``: depth thresholded coverage of range files
- ``gff``: convert gff features to run lists
- ``convert``: convert run lists to ranges
- ``range``: filter ranges against a run list document
"""

SET_OP = OperatorNamespace('IntSpan', UNION='union', INTERSECT='intersect', DIFF='diff', XOR='xor')
"""
set algebra operators

- ``union``: elements of either set
- ``intersect``: elements of both sets
- ``diff``: elements of the first set not in the second
- ``xor``: elements of exactly one of the sets
"""

SPAN_OP = OperatorNamespace('IntSpan', COVER='cover', FILL='fill', TRIM='trim', PAD='pad', EXCISE='excise')
"""
span operators, all but cover take a single integer argument

- ``cover``: the single range from the minimum to the maximum
- ``fill``: fill holes no larger than n
- ``trim``: remove n integers from each end of each range
- ``pad``: add n integers to each end of each range
- ``excise``: remove ranges with fewer than n integers
"""

RANGE_OP = OperatorNamespace('Range', OVERLAP='overlap', NON_OVERLAP='non-overlap', SUPERSET='superset')
"""
relations between a query range and a run list

- ``overlap``: the range shares at least one position with the run list
- ``non-overlap``: the range shares no position with the run list
- ``superset``: the run list contains every position of the range
"""

RUNLIST_TOKEN = re.compile(r'^(?P<lower>-?\d+)(?:-(?P<upper>-?\d+))?$')
""":class:`re.Pattern`: a single token of the run list notation (whitespace already removed)

positions are expected to be positive but padding may push a range below 1 so a leading minus is accepted
"""
