"""
reading and writing run list documents, size tables and plain line files
"""
import os
import sys
from typing import Dict, Iterable, List, Union

import yaml

from .constants import STDIN, STDOUT
from .error import ParseError, SchemaError
from .setmap import GroupedSetMap, SetMap
from .util import logger


def read_text(path: str) -> str:
    """
    Raises:
        FileNotFoundError: the input file does not exist
    """
    if path == STDIN:
        logger.info('loading: stdin')
        return sys.stdin.read()
    logger.info(f'loading: {path}')
    with open(path, 'r') as fh:
        return fh.read()


def read_lines(path: str) -> List[str]:
    return read_text(path).splitlines()


def write_text(path: str, content: str) -> None:
    if path == STDOUT:
        sys.stdout.write(content)
        sys.stdout.flush()
        return
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    logger.info(f'writing: {path}')
    with open(path, 'w') as fh:
        fh.write(content)


def write_lines(path: str, lines: Iterable[str]) -> None:
    write_text(path, ''.join(line + '\n' for line in lines))


def parse_sizes(lines: Iterable[str]) -> Dict[str, int]:
    """
    parse a chromosome size table, one tab delimited name and length per line

    Raises:
        ParseError: a line does not have exactly two fields or the length is not an integer

    Example:
        >>> parse_sizes(['I\\t230218', 'II\\t813184'])
        {'I': 230218, 'II': 813184}
    """
    length_of = {}
    for line_no, line in enumerate(lines, start=1):
        if not line.strip() or line.startswith('#'):
            continue
        fields = line.rstrip('\r\n').split('\t')
        if len(fields) != 2:
            raise ParseError(f'line {line_no}: expected 2 tab delimited fields but found {len(fields)}: {repr(line)}')
        try:
            length = int(fields[1])
        except ValueError:
            raise ParseError(f'line {line_no}: chromosome length is not an integer: {repr(fields[1])}')
        if length < 0:
            raise ParseError(f'line {line_no}: chromosome length cannot be negative: {length}')
        length_of[fields[0]] = length  # duplicate names: the last line wins
    return length_of


def read_sizes(path: str) -> Dict[str, int]:
    return parse_sizes(read_lines(path))


def read_list(path: str) -> List[str]:
    """
    read a file of names, one per line, ignoring blank lines
    """
    return [line.strip() for line in read_lines(path) if line.strip()]


def load_runlist(content: str) -> GroupedSetMap:
    """
    parse the YAML text of a flat or grouped run list document

    Raises:
        SchemaError: the YAML cannot be parsed or has the wrong shape
    """
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as err:
        raise SchemaError(f'not a valid YAML document: {err}')
    return GroupedSetMap.from_document(document)


def read_runlist(path: str) -> GroupedSetMap:
    return load_runlist(read_text(path))


def dump_runlist(collection: Union[GroupedSetMap, SetMap]) -> str:
    """
    render a run list collection as a YAML document

    Example:
        >>> dump_runlist(SetMap.from_runlists({'II': '', 'I': '1-5'}))
        "---\\nI: 1-5\\nII: '-'\\n"
    """
    if isinstance(collection, SetMap):
        document = collection.to_runlists()
    else:
        document = collection.to_document()
    return yaml.safe_dump(
        document,
        default_flow_style=False,
        explicit_start=True,
        sort_keys=True,
        width=sys.maxsize,
    )


def write_runlist(path: str, collection: Union[GroupedSetMap, SetMap]) -> None:
    write_text(path, dump_runlist(collection))
