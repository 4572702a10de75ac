#!python
import argparse
import logging
import os
import platform
import sys
import time
from functools import reduce
from typing import List, Optional

from . import __version__
from . import config as _config
from . import file_io
from . import operations
from . import stats
from . import util as _util
from .constants import EXIT_ERROR, EXIT_OK, RANGE_OP, SET_OP, SPAN_OP, STDOUT, SUBCOMMAND
from .coverage import cover
from .error import SpanrError
from .gff import gff_to_setmap
from .range import filter_ranges, parse_ranges, runlist_to_ranges


def genome_main(infile, outfile):
    sizes = file_io.read_sizes(infile)
    file_io.write_runlist(outfile, operations.genome(sizes))


def some_main(infile, list_file, outfile):
    collection = file_io.read_runlist(infile)
    names = file_io.read_list(list_file)
    file_io.write_runlist(outfile, operations.some(collection, names))


def merge_main(inputs, outfile):
    named = {}
    for path in inputs:
        named[_util.file_stem(path)] = file_io.read_runlist(path)
    file_io.write_runlist(outfile, operations.merge(named))


def split_main(infile, outdir, suffix):
    """
    write one document per group, to the screen as consecutive documents or to <outdir>/<group><suffix>
    """
    groups = operations.split(file_io.read_runlist(infile))
    rendered = [(name, file_io.dump_runlist(setmap)) for name, setmap in groups]
    if outdir == STDOUT:
        file_io.write_text(STDOUT, ''.join(content for _, content in rendered))
        return
    _util.mkdirp(outdir)
    for name, content in rendered:
        file_io.write_text(os.path.join(outdir, name + suffix), content)


def stat_main(chr_sizes, infile, outfile, all_only=False):
    sizes = file_io.read_sizes(chr_sizes)
    collection = file_io.read_runlist(infile)
    file_io.write_text(outfile, stats.to_csv(stats.stat(sizes, collection, all_only=all_only)))


def statop_main(chr_sizes, infile1, infile2, op, outfile, all_only=False):
    sizes = file_io.read_sizes(chr_sizes)
    first = file_io.read_runlist(infile1)
    second = file_io.read_runlist(infile2)
    df = stats.statop(sizes, first, second, op=op, base=_util.file_stem(infile2), all_only=all_only)
    file_io.write_text(outfile, stats.to_csv(df))


def combine_main(infile, outfile):
    file_io.write_runlist(outfile, operations.combine(file_io.read_runlist(infile)))


def compare_main(inputs, op, outfile):
    """
    apply the set operation from left to right over all of the inputs
    """
    collections = [file_io.read_runlist(path) for path in inputs]
    result = reduce(lambda first, second: operations.compare(first, second, op), collections)
    file_io.write_runlist(outfile, result)


def span_main(infile, op, number, outfile):
    collection = file_io.read_runlist(infile)
    file_io.write_runlist(outfile, operations.span(collection, op, number))


def cover_main(inputs, coverage, outfile):
    ranges = []
    for path in inputs:
        ranges.extend(parse_ranges(file_io.read_lines(path)))
    file_io.write_runlist(outfile, cover(ranges, coverage=coverage))


def gff_main(inputs, tag, outfile):
    contents = [file_io.read_lines(path) for path in inputs]
    file_io.write_runlist(outfile, gff_to_setmap(contents, tag=tag))


def convert_main(infile, outfile):
    file_io.write_lines(outfile, runlist_to_ranges(file_io.read_runlist(infile)))


def range_main(infile, inputs, op, outfile):
    setmap = file_io.read_runlist(infile).single()
    ranges = []
    for path in inputs:
        ranges.extend(parse_ranges(file_io.read_lines(path)))
    kept = filter_ranges(setmap, ranges, op)
    _util.logger.info(f'kept {len(kept)} of {len(ranges)} ranges')
    file_io.write_lines(outfile, [rng.line for rng in kept])


def create_parser(argv):
    parser = argparse.ArgumentParser(prog='spanr', formatter_class=_config.CustomHelpFormatter)
    _config.augment_parser(['version'], parser)
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(command, formatter_class=_config.CustomHelpFormatter, add_help=False)
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        _config.augment_parser(['help', 'version', 'log', 'log_level'], optional[command])
        if command != SUBCOMMAND.SPLIT:
            _config.augment_parser(['outfile'], optional[command])

    # single input document
    for command in [SUBCOMMAND.SOME, SUBCOMMAND.SPLIT, SUBCOMMAND.COMBINE, SUBCOMMAND.SPAN, SUBCOMMAND.CONVERT]:
        required[command].add_argument('infile', help='path to the run list document, stdin for the screen')

    # genome
    required[SUBCOMMAND.GENOME].add_argument('infile', help='path to the chromosome size table, stdin for the screen')

    # some
    required[SUBCOMMAND.SOME].add_argument('list_file', help='path to the file of names to keep, one per line')

    # merge
    required[SUBCOMMAND.MERGE].add_argument(
        'inputs', nargs='+', help='path to the run list documents, each becomes a group named by its file name')

    # split
    optional[SUBCOMMAND.SPLIT].add_argument(
        '-o', '--outdir', default=STDOUT, help=f'output directory, {STDOUT} for the screen')
    _config.augment_parser(['suffix'], optional[SUBCOMMAND.SPLIT])

    # stat and statop
    for command in [SUBCOMMAND.STAT, SUBCOMMAND.STATOP]:
        required[command].add_argument('chr_sizes', help='path to the chromosome size table')
        _config.augment_parser(['all'], optional[command])
    required[SUBCOMMAND.STAT].add_argument('infile', help='path to the run list document')
    required[SUBCOMMAND.STATOP].add_argument('infile1', help='path to the first run list document')
    required[SUBCOMMAND.STATOP].add_argument('infile2', help='path to the second run list document')

    # set operations
    for command in [SUBCOMMAND.STATOP, SUBCOMMAND.COMPARE]:
        optional[command].add_argument(
            '--op', default=SET_OP.INTERSECT, type=SET_OP, metavar='{' + ','.join(SET_OP.values()) + '}',
            help='the set operation to apply')
    required[SUBCOMMAND.COMPARE].add_argument(
        'inputs', nargs='+', help='path to the run list documents, at least two, applied from left to right')

    # span
    optional[SUBCOMMAND.SPAN].add_argument(
        '--op', default=SPAN_OP.COVER, type=SPAN_OP, metavar='{' + ','.join(SPAN_OP.values()) + '}',
        help='the span operation to apply')
    _config.augment_parser(['number'], optional[SUBCOMMAND.SPAN])

    # cover
    required[SUBCOMMAND.COVER].add_argument('inputs', nargs='+', help='path to the range files')
    _config.augment_parser(['coverage'], optional[SUBCOMMAND.COVER])

    # gff
    required[SUBCOMMAND.GFF].add_argument('inputs', nargs='+', help='path to the gff files')
    optional[SUBCOMMAND.GFF].add_argument('--tag', default=None, help='only use features of this type, ex. CDS')

    # range
    required[SUBCOMMAND.RANGE].add_argument('infile', help='path to the run list document')
    required[SUBCOMMAND.RANGE].add_argument('inputs', nargs='+', help='path to the range files')
    optional[SUBCOMMAND.RANGE].add_argument(
        '--op', default=RANGE_OP.OVERLAP, type=RANGE_OP, metavar='{' + ','.join(RANGE_OP.values()) + '}',
        help='keep the ranges with this relation to the run lists')

    args = parser.parse_args(argv)
    if args.command == SUBCOMMAND.COMPARE and len(args.inputs) < 2:
        parser.error('compare requires at least two input files')
    return parser, args


def run_command(args):
    command = args.command
    if command == SUBCOMMAND.GENOME:
        genome_main(args.infile, args.outfile)
    elif command == SUBCOMMAND.SOME:
        some_main(args.infile, args.list_file, args.outfile)
    elif command == SUBCOMMAND.MERGE:
        merge_main(args.inputs, args.outfile)
    elif command == SUBCOMMAND.SPLIT:
        split_main(args.infile, args.outdir, args.suffix)
    elif command == SUBCOMMAND.STAT:
        stat_main(args.chr_sizes, args.infile, args.outfile, all_only=args.all_only)
    elif command == SUBCOMMAND.STATOP:
        statop_main(args.chr_sizes, args.infile1, args.infile2, args.op, args.outfile, all_only=args.all_only)
    elif command == SUBCOMMAND.COMBINE:
        combine_main(args.infile, args.outfile)
    elif command == SUBCOMMAND.COMPARE:
        compare_main(args.inputs, args.op, args.outfile)
    elif command == SUBCOMMAND.SPAN:
        span_main(args.infile, args.op, args.number, args.outfile)
    elif command == SUBCOMMAND.COVER:
        cover_main(args.inputs, args.coverage, args.outfile)
    elif command == SUBCOMMAND.GFF:
        gff_main(args.inputs, args.tag, args.outfile)
    elif command == SUBCOMMAND.CONVERT:
        convert_main(args.infile, args.outfile)
    else:  # RANGE
        range_main(args.infile, args.inputs, args.op, args.outfile)


def expand_inputs(args):
    """
    expand the glob and brace patterns of every input path

    Raises:
        FileNotFoundError: an input pattern does not match any file
    """
    for arg in ['infile', 'infile1', 'infile2', 'chr_sizes', 'list_file']:
        path = getattr(args, arg, None)
        if path is None:
            continue
        expanded = _util.bash_expands(path)
        if len(expanded) > 1:
            raise SpanrError(f'--{arg} the file pattern matches multiple files and expected only one: {path}')
        setattr(args, arg, expanded[0])
    if getattr(args, 'inputs', None) is not None:
        args.inputs = _util.bash_expands(*args.inputs)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    then redirects into the subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments

    Returns:
        int: the exit code
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in original_logging_handlers:
        logging.root.removeHandler(handler)
    if args.log:  # redirect the logging output to a file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'spanr: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        expand_inputs(args)
        run_command(args)

        duration = int(time.time()) - start_time
        hours = duration - duration % 3600
        minutes = duration - hours - (duration - hours) % 60
        seconds = duration - hours - minutes
        _util.logger.info(
            'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)
        )
        _util.logger.info(f'run time (s): {duration}')
        return EXIT_OK
    except (SpanrError, OSError, ValueError) as err:
        _util.logger.error(f'{args.command} failed: {err}')
        return EXIT_ERROR
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
            handler.close()
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


if __name__ == '__main__':
    sys.exit(main())
