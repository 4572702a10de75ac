import logging
import os
from glob import glob

from braceexpand import braceexpand

from .constants import STDIN

logger = logging.getLogger('spanr')


def bash_expands(*expressions):
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        if expression == STDIN:
            result.append(expression)
            continue
        eresult = []
        for name in braceexpand(expression):
            for fname in sorted(glob(name)):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [f if f == STDIN else os.path.abspath(f) for f in result]


def file_stem(path):
    """
    the file name without its directory and last extension, used to name groups after their source

    Example:
        >>> file_stem('/path/to/cds.yml')
        'cds'
        >>> file_stem('I.II.yml')
        'I.II'
    """
    return os.path.splitext(os.path.basename(path))[0]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')
    indent = ' '
    for arg, val in sorted(vars(args).items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg} = {repr(val)}')
        else:
            logger.info(f'{indent}{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    os.makedirs(dirname, exist_ok=True)
    return dirname
