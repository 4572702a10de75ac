"""
named collections of run lists

A :class:`SetMap` holds one :class:`~spanr.intspan.IntSpan` per chromosome. A
:class:`GroupedSetMap` holds one SetMap per group (species, sample, feature
name). Flat documents are loaded as a GroupedSetMap with a single implicit
group so that every command can treat both shapes the same way, the
:attr:`GroupedSetMap.multi` flag records which shape was read.
"""
from typing import Dict, Iterable, List, Optional

from .constants import SINGLE_GROUP
from .error import ParseError, SchemaError
from .intspan import IntSpan


def _is_scalar(value):
    return value is None or isinstance(value, (str, int, float))


class SetMap(dict):
    """
    mapping of chromosome name to :class:`~spanr.intspan.IntSpan`
    """

    @classmethod
    def from_runlists(cls, runlists: Dict) -> 'SetMap':
        """
        Args:
            runlists: mapping of chromosome name to run list text

        Raises:
            SchemaError: a value is not a run list
            ParseError: a run list is malformed
        """
        result = cls()
        for chrom, runlist in runlists.items():
            if not _is_scalar(runlist):
                raise SchemaError(f'expected a run list for {chrom} but found {type(runlist).__name__}')
            try:
                result[str(chrom)] = IntSpan.from_runlist('' if runlist is None else runlist)
            except ParseError as err:
                raise ParseError(f'{chrom}: {err}')
        return result

    def to_runlists(self) -> Dict[str, str]:
        return {chrom: self[chrom].runlist() for chrom in sorted(self)}

    def fill_up(self, universe: Iterable[str]) -> 'SetMap':
        """
        add an empty set for every name in the universe that is missing, existing sets are untouched
        """
        for chrom in universe:
            if chrom not in self:
                self[chrom] = IntSpan()
        return self

    def copy(self) -> 'SetMap':
        return SetMap({chrom: intspan.copy() for chrom, intspan in self.items()})

    def cardinality(self) -> int:
        return sum(intspan.cardinality() for intspan in self.values())

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, self.to_runlists())


class GroupedSetMap:
    """
    mapping of group name to :class:`SetMap`

    Attributes:
        groups (Dict[str,SetMap]): the sets by group name
        multi (bool): False when built from a flat document, the single group is then named by the
            :data:`~spanr.constants.SINGLE_GROUP` sentinel and dropped again on output
    """

    def __init__(self, groups: Optional[Dict[str, SetMap]] = None, multi: bool = True):
        self.groups = {} if groups is None else dict(groups)
        self.multi = multi
        if not multi and set(self.groups) - {SINGLE_GROUP}:
            raise SchemaError('a flat run list collection can only hold the single implicit group', list(self.groups))

    @classmethod
    def flat(cls, setmap: Optional[SetMap] = None) -> 'GroupedSetMap':
        return cls({SINGLE_GROUP: SetMap() if setmap is None else setmap}, multi=False)

    @classmethod
    def from_document(cls, document) -> 'GroupedSetMap':
        """
        decide between the flat and the grouped shape by the type of the values

        Raises:
            SchemaError: the document is not a mapping or mixes run lists and mappings

        Example:
            >>> GroupedSetMap.from_document({'I': '1-10'}).multi
            False
            >>> GroupedSetMap.from_document({'S288c': {'I': '1-10'}}).multi
            True
        """
        if document is None:
            return cls.flat()
        if not isinstance(document, dict):
            raise SchemaError(f'expected a mapping at the top level of the document but found {type(document).__name__}')
        scalars = [key for key, value in document.items() if _is_scalar(value)]
        mappings = [key for key, value in document.items() if isinstance(value, dict)]
        if len(scalars) == len(document):
            return cls.flat(SetMap.from_runlists(document))
        elif len(mappings) == len(document):
            return cls({str(name): SetMap.from_runlists(value) for name, value in document.items()})
        raise SchemaError(
            'the document must map names to either run lists or mappings of run lists, not a mixture',
            sorted(str(k) for k in scalars), sorted(str(k) for k in mappings)
        )

    def to_document(self) -> Dict:
        if not self.multi:
            return self.single().to_runlists()
        return {name: self.groups[name].to_runlists() for name in sorted(self.groups)}

    def single(self) -> SetMap:
        """
        the only SetMap of this collection

        Raises:
            SchemaError: there is more than one group
        """
        if len(self.groups) != 1:
            raise SchemaError(f'expected a single group but found {len(self.groups)}', sorted(self.groups))
        return next(iter(self.groups.values()))

    def chromosomes(self) -> List[str]:
        return keys_union(self)

    def fill_up(self, universe: Iterable[str]) -> 'GroupedSetMap':
        universe = list(universe)
        for setmap in self.groups.values():
            setmap.fill_up(universe)
        return self

    def names(self) -> List[str]:
        return sorted(self.groups)

    def items(self):
        return [(name, self.groups[name]) for name in sorted(self.groups)]

    def __iter__(self):
        return iter(self.items())

    def __len__(self):
        return len(self.groups)

    def __getitem__(self, name):
        return self.groups[name]

    def __eq__(self, other):
        if not isinstance(other, GroupedSetMap):
            return NotImplemented
        return self.multi == other.multi and self.groups == other.groups

    def __repr__(self):
        return '{}({}, multi={})'.format(self.__class__.__name__, self.to_document(), self.multi)


def keys_union(*collections) -> List[str]:
    """
    all chromosome names found in any of the collections

    Args:
        collections (SetMap or GroupedSetMap): the collections to gather names from

    Example:
        >>> keys_union(SetMap.from_runlists({'I': '1'}), GroupedSetMap.from_document({'II': '1'}))
        ['I', 'II']
    """
    chroms = set()
    for collection in collections:
        if isinstance(collection, GroupedSetMap):
            for setmap in collection.groups.values():
                chroms.update(setmap)
        else:
            chroms.update(collection)
    return sorted(chroms)
