import argparse

from . import __version__
from .constants import STDOUT, SpanrNamespace


class WeakSpanrNamespace(SpanrNamespace):
    """
    namespace where every member can be overridden by its environment variable (SPANR_<NAME>)
    """

    def is_env_overwritable(self, attr):
        return True


DEFAULTS = WeakSpanrNamespace()
DEFAULTS.add('coverage', 1, cast_type=int, defn='minimum depth of coverage to be included in the output')
DEFAULTS.add('number', 0, cast_type=int, defn='the distance or length used by the span operations fill, trim, pad and excise')
DEFAULTS.add('suffix', '.yml', defn='file extension of the documents written by split')
DEFAULTS.add('log_level', 'INFO', defn='level of logging to output')


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required or action.default is None or action.default == argparse.SUPPRESS:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(int)
        'INT'
    """
    if arg_type == int:
        return 'INT'
    return None


def augment_parser(arguments, parser):
    """
    Adds options to the argument parser. Separate function so that the subcommands
    all have a similar look/feel
    """
    for arg in arguments:
        if arg == 'help':
            parser.add_argument('-h', '--help', action='help', help='show this help message and exit')
        elif arg == 'version':
            parser.add_argument(
                '-v', '--version', action='version', version='%(prog)s version ' + __version__,
                help='Outputs the version number')
        elif arg == 'log':
            parser.add_argument('--log', help='redirect stdout to a log file', default=None)
        elif arg == 'log_level':
            parser.add_argument(
                '--log_level', help=DEFAULTS.define('log_level'), choices=['DEBUG', 'INFO', 'WARNING'],
                default=DEFAULTS.log_level)
        elif arg == 'outfile':
            parser.add_argument(
                '-o', '--outfile', default=STDOUT, metavar='FILEPATH',
                help=f'output filename, {STDOUT} for the screen')
        elif arg == 'coverage':
            parser.add_argument(
                '-c', '--coverage', default=DEFAULTS.coverage, type=int, help=DEFAULTS.define('coverage'))
        elif arg == 'number':
            parser.add_argument(
                '-n', '--number', default=DEFAULTS.number, type=int, help=DEFAULTS.define('number'))
        elif arg == 'suffix':
            parser.add_argument('-s', '--suffix', default=DEFAULTS.suffix, help=DEFAULTS.define('suffix'))
        elif arg == 'all':
            parser.add_argument(
                '--all', dest='all_only', action='store_true', default=False,
                help='only write the results of all chromosomes combined')
        else:
            raise KeyError('invalid argument', arg)
