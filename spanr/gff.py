"""
convert gff feature coordinates to run lists
"""
import io
from typing import Iterable, List, Optional

import pandas as pd

from .error import ParseError
from .intspan import IntSpan
from .setmap import SetMap
from .util import logger

GFF_COLUMNS = ['seqid', 'source', 'type', 'start', 'end', 'score', 'strand', 'phase', 'attributes']
GFF_FASTA_DIRECTIVE = '##FASTA'


def parse_gff(lines: Iterable[str]) -> pd.DataFrame:
    """
    read the feature lines of a gff file into a table with the standard gff column names

    comment and directive lines are skipped, everything after the ##FASTA directive is ignored

    Raises:
        ParseError: a feature line has fewer than 9 fields or non-integer positions
    """
    features = []
    for line in lines:
        if line.startswith(GFF_FASTA_DIRECTIVE):
            break
        features.append(line.rstrip('\r\n') if line.strip() else '')
    if not any(line.strip() and not line.startswith('#') for line in features):
        return pd.DataFrame([], columns=GFF_COLUMNS).astype({'start': 'int64', 'end': 'int64'})

    try:
        df = pd.read_csv(
            io.StringIO('\n'.join(features)),
            sep='\t',
            dtype={col: str for col in GFF_COLUMNS},
            index_col=False,
            header=None,
            comment='#',
            names=GFF_COLUMNS,
        )
    except pd.errors.ParserError as err:
        raise ParseError(f'malformed gff features: {err}')

    # the attributes column may be empty
    incomplete = df[GFF_COLUMNS[:-1]].isnull().any(axis=1)
    if incomplete.any():
        row = incomplete.idxmax()
        raise ParseError(f'feature {row + 1}: gff feature requires 9 tab delimited fields: {df.seqid[row]}')
    try:
        df = df.astype({'start': 'int64', 'end': 'int64'})
    except ValueError as err:
        raise ParseError(f'gff positions must be integers: {err}')
    reversed_features = df[df.start > df.end]
    if reversed_features.shape[0]:
        row = reversed_features.index[0]
        raise ParseError(
            f'feature {row + 1}: gff feature start > end: {reversed_features.start[row]} > {reversed_features.end[row]}'
        )
    return df


def features_to_setmap(df: pd.DataFrame, tag: Optional[str] = None) -> SetMap:
    """
    union the feature coordinates by seqid

    Args:
        df: the features (see :func:`parse_gff`)
        tag: only use features of this type (case sensitive), all features are used when not given
    """
    if tag:
        df = df[df.type == tag]
    result = SetMap()
    for seqid, group in df.groupby('seqid', sort=True):
        pairs = sorted(zip(group.start.tolist(), group.end.tolist()))
        result[str(seqid)] = IntSpan.from_spans(pairs)
    return result


def gff_to_setmap(contents: List[List[str]], tag: Optional[str] = None) -> SetMap:
    """
    Args:
        contents: the lines of each gff file
        tag: the feature type to keep
    """
    frames = [parse_gff(lines) for lines in contents]
    if frames:
        df = pd.concat(frames, ignore_index=True)
    else:
        df = pd.DataFrame([], columns=GFF_COLUMNS)
    logger.info(f'read {df.shape[0]} gff features')
    return features_to_setmap(df, tag)
