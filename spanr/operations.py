"""
operations on whole run list collections

Every function returns a new collection, the inputs are never modified.
"""
from typing import Dict, Iterable, List, Tuple

from .constants import SET_OP, SPAN_OP
from .error import SchemaError
from .intspan import IntSpan
from .setmap import GroupedSetMap, SetMap, keys_union
from .util import logger


def genome(sizes: Dict[str, int]) -> SetMap:
    """
    a run list covering every chromosome of a size table from 1 to its length

    Example:
        >>> genome({'I': 230218})
        SetMap({'I': '1-230218'})
    """
    result = SetMap()
    for chrom, length in sizes.items():
        result[chrom] = IntSpan.from_pair(1, length) if length > 0 else IntSpan()
    return result


def some(collection: GroupedSetMap, names: Iterable[str]) -> GroupedSetMap:
    """
    keep only the top level records named: the groups of a grouped document or the chromosomes of a flat one
    """
    names = set(names)
    if collection.multi:
        return GroupedSetMap(
            {name: setmap.copy() for name, setmap in collection.items() if name in names}
        )
    setmap = collection.single()
    return GroupedSetMap.flat(
        SetMap({chrom: intspan.copy() for chrom, intspan in setmap.items() if chrom in names})
    )


def merge(named_collections: Dict[str, GroupedSetMap]) -> GroupedSetMap:
    """
    merge single group collections into one grouped collection

    Args:
        named_collections: the collections by the name of the group they will become (usually the file stem)

    Raises:
        SchemaError: one of the inputs holds more than one group
    """
    groups = {}
    for name, collection in named_collections.items():
        try:
            setmap = collection.single()
        except SchemaError as err:
            raise SchemaError(f'cannot merge {name}: {err}')
        if name in groups:
            logger.warning(f'duplicate group name ({name}), the sets will be combined')
            groups[name] = _union_setmaps([groups[name], setmap])
        else:
            groups[name] = setmap.copy()
    return GroupedSetMap(groups)


def split(collection: GroupedSetMap) -> List[Tuple[str, SetMap]]:
    """
    Raises:
        SchemaError: the collection is not grouped
    """
    if not collection.multi:
        raise SchemaError('only a grouped run list document can be split')
    return [(name, setmap.copy()) for name, setmap in collection.items()]


def _union_setmaps(setmaps: List[SetMap]) -> SetMap:
    result = SetMap()
    for chrom in keys_union(*setmaps):
        combined = IntSpan()
        for setmap in setmaps:
            if chrom in setmap:
                combined = combined.union(setmap[chrom])
        result[chrom] = combined
    return result


def combine(collection: GroupedSetMap) -> SetMap:
    """
    union every group of a collection chromosome by chromosome, a flat collection is returned unchanged
    """
    if not collection.multi:
        return collection.single().copy()
    return _union_setmaps([setmap for _, setmap in collection])


def set_operation(first: IntSpan, second: IntSpan, op: str) -> IntSpan:
    """
    Raises:
        InvalidOperatorError: op is not a set operator

    Example:
        >>> set_operation(IntSpan('1-10'), IntSpan('5-15'), 'xor')
        IntSpan('1-4,11-15')
    """
    op = SET_OP.enforce(op)
    if op == SET_OP.UNION:
        return first.union(second)
    elif op == SET_OP.INTERSECT:
        return first.intersect(second)
    elif op == SET_OP.DIFF:
        return first.diff(second)
    return first.xor(second)


def compare_setmaps(first: SetMap, second: SetMap, op: str, chroms=None) -> SetMap:
    """
    apply a set operation chromosome by chromosome, missing chromosomes are treated as empty sets
    """
    op = SET_OP.enforce(op)
    if chroms is None:
        chroms = keys_union(first, second)
    empty = IntSpan()
    return SetMap({chrom: set_operation(first.get(chrom, empty), second.get(chrom, empty), op) for chrom in chroms})


def compare(first: GroupedSetMap, second: GroupedSetMap, op: str) -> GroupedSetMap:
    """
    apply a set operation between two collections

    The result takes the shape of the first collection. When both are grouped the groups are paired by
    name, otherwise every group of the first collection is compared against the single set map of the second.

    Raises:
        InvalidOperatorError: op is not a set operator
        SchemaError: the second collection has several groups that cannot be paired with the first
    """
    op = SET_OP.enforce(op)
    chroms = keys_union(first, second)
    if not first.multi:
        return GroupedSetMap.flat(compare_setmaps(first.single(), second.single(), op, chroms))
    groups = {}
    for name, setmap in first:
        if second.multi:
            other = second.groups.get(name, SetMap())
        else:
            other = second.single()
        groups[name] = compare_setmaps(setmap, other, op, chroms)
    return GroupedSetMap(groups)


def span_operation(intspan: IntSpan, op: str, number: int = 0) -> IntSpan:
    """
    Raises:
        InvalidOperatorError: op is not a span operator
    """
    op = SPAN_OP.enforce(op)
    if op == SPAN_OP.COVER:
        return intspan.cover()
    elif op == SPAN_OP.FILL:
        return intspan.fill(number)
    elif op == SPAN_OP.TRIM:
        return intspan.trim(number)
    elif op == SPAN_OP.PAD:
        return intspan.pad(number)
    return intspan.excise(number)


def span(collection: GroupedSetMap, op: str, number: int = 0) -> GroupedSetMap:
    """
    apply a span operation to every set of a collection

    Raises:
        InvalidOperatorError: op is not a span operator
    """
    op = SPAN_OP.enforce(op)
    groups = {
        name: SetMap({chrom: span_operation(intspan, op, number) for chrom, intspan in setmap.items()})
        for name, setmap in collection.items()
    }
    return GroupedSetMap(groups, multi=collection.multi)
