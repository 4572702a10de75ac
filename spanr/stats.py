"""
coverage statistics tables for the stat and statop commands
"""
from typing import Dict, List, Optional

import pandas as pd

from .constants import SET_OP
from .operations import set_operation
from .setmap import GroupedSetMap, SetMap
from .util import logger

ALL_ROW = 'all'
FLOAT_FORMAT = '%.4f'


def _divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """
    element-wise division, 0 where the denominator is 0
    """
    denominator = denominator.astype(float)
    result = numerator.astype(float) / denominator.where(denominator != 0)
    return result.fillna(0.0)


def _check_universe(setmap: SetMap, sizes: Dict[str, int]) -> None:
    missing = sorted(set(setmap) - set(sizes))
    if missing:
        logger.warning(f'chromosomes missing from the size table are not counted: {", ".join(missing)}')


def _finish(df: pd.DataFrame, columns: List[str], grouped: bool, all_only: bool) -> pd.DataFrame:
    """
    add the key column when grouped and drop the per chromosome rows (and the chr column) for the all only table
    """
    if all_only:
        df = df[df.chr == ALL_ROW]
        columns = [c for c in columns if c != 'chr']
    if grouped:
        columns = ['key'] + columns
    return df[columns].reset_index(drop=True)


def stat_table(sizes: Dict[str, int], setmap: SetMap) -> pd.DataFrame:
    """
    per chromosome (and total) length, covered size and proportion covered
    """
    _check_universe(setmap, sizes)
    filled = setmap.copy().fill_up(sizes)
    rows = []
    for chrom in sorted(sizes):
        rows.append([chrom, sizes[chrom], filled[chrom].cardinality()])
    df = pd.DataFrame(rows, columns=['chr', 'chrLength', 'size'])
    total = pd.DataFrame([[ALL_ROW, df.chrLength.sum(), df['size'].sum()]], columns=df.columns)
    df = pd.concat([df, total], ignore_index=True).astype({'chrLength': 'int64', 'size': 'int64'})
    df['coverage'] = _divide(df['size'], df.chrLength)
    return df


def statop_table(sizes: Dict[str, int], first: SetMap, second: SetMap, op: str, base: str) -> pd.DataFrame:
    """
    compare the coverage of the first set map with the coverage of the result of applying
    op between the first and the second set maps

    Args:
        base: the name of the second set map, used to prefix its columns

    Raises:
        InvalidOperatorError: op is not a set operator
    """
    op = SET_OP.enforce(op)
    _check_universe(first, sizes)
    first, second = first.copy().fill_up(sizes), second.copy().fill_up(sizes)
    length_col, size_col = f'{base}Length', f'{base}Size'
    rows = []
    for chrom in sorted(sizes):
        set1, set2 = first[chrom], second[chrom]
        rows.append([
            chrom,
            sizes[chrom],
            set1.cardinality(),
            set2.cardinality(),
            set_operation(set1, set2, op).cardinality(),
        ])
    columns = ['chr', 'chrLength', 'size', length_col, size_col]
    df = pd.DataFrame(rows, columns=columns)
    total = pd.DataFrame([[ALL_ROW] + [df[c].sum() for c in columns[1:]]], columns=columns)
    df = pd.concat([df, total], ignore_index=True).astype({c: 'int64' for c in columns[1:]})
    df['c1'] = _divide(df['size'], df.chrLength)
    df['c2'] = _divide(df[size_col], df[length_col])
    df['ratio'] = _divide(df.c2, df.c1)
    return df


def stat(sizes: Dict[str, int], collection: GroupedSetMap, all_only: bool = False) -> pd.DataFrame:
    frames = []
    for name, setmap in collection:
        df = stat_table(sizes, setmap)
        df.insert(0, 'key', name)
        frames.append(df)
    columns = ['chr', 'chrLength', 'size', 'coverage']
    if not frames:
        return pd.DataFrame([], columns=columns)
    return _finish(pd.concat(frames, ignore_index=True), columns, collection.multi, all_only)


def statop(
    sizes: Dict[str, int],
    first: GroupedSetMap,
    second: GroupedSetMap,
    op: str = SET_OP.INTERSECT,
    base: Optional[str] = None,
    all_only: bool = False,
) -> pd.DataFrame:
    """
    Raises:
        InvalidOperatorError: op is not a set operator
        SchemaError: the second collection has more than one group
    """
    op = SET_OP.enforce(op)
    base = base or 'base'
    other = second.single()
    frames = []
    for name, setmap in first:
        df = statop_table(sizes, setmap, other, op, base)
        df.insert(0, 'key', name)
        frames.append(df)
    columns = ['chr', 'chrLength', 'size', f'{base}Length', f'{base}Size', 'c1', 'c2', 'ratio']
    if not frames:
        return pd.DataFrame([], columns=columns)
    return _finish(pd.concat(frames, ignore_index=True), columns, first.multi, all_only)


def to_csv(df: pd.DataFrame) -> str:
    return df.to_csv(index=False, float_format=FLOAT_FORMAT)
