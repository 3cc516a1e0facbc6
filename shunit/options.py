import sys

from argparse import ArgumentParser


TIMESTAMP_MODES = ('none', 'sec', 'ms', 'us', 'ns')


def _get_parser():
    """Returns a parser to handle command line args."""

    parser = ArgumentParser(description="Runs a list of scripts and writes the "
                                        "results as a JUnit XML report.")
    parser.usage = "shunit [options] [script ...]"
    parser.add_argument('-q', '--quiet', action='store_true', dest='quiet',
                        help='Silence log messages and progress output. Script '
                             'output is still echoed.')
    parser.add_argument('-v', '--verbose', action='count', dest='verbose',
                        default=0,
                        help='Verbose mode (-v, -vv, -vvv). The levels are warnings, '
                             'informational and debugging messages. Any -v also '
                             'prints a line for every script that runs.')
    parser.add_argument('-t', '--timestamp', action='store', dest='timestamp',
                        choices=TIMESTAMP_MODES, default='none',
                        help='Resolution of the timestamp on log messages.')
    parser.add_argument('-o', '--output', action='store', dest='output',
                        metavar='FILE',
                        help='Name of the file to write the report to. By '
                             'default the report is written to stdout.')
    parser.add_argument('-c', '--config', action='store', dest='cfg',
                        metavar='FILE',
                        help='Path of config file where preferences are specified.')
    parser.add_argument('--scriptfile', action='store', dest='scriptfile',
                        metavar='FILE',
                        help='Path to a file containing one script per line.')
    parser.add_argument('--timeout', action='store', dest='timeout', type=float,
                        help='Timeout in seconds. A script is killed and reported '
                             'as an error if it takes longer than timeout.')
    parser.add_argument('--no-echo', action='store_true', dest='no_echo',
                        help="Don't echo the output of scripts while they run. "
                             "It is still captured for the report.")
    parser.add_argument('-x', '--stop', action='store_true', dest='stop',
                        help='Stop after the first script that fails.')
    parser.add_argument('-f', '--fail', action='store_true', dest='save_fails',
                        help='Save failed scripts to failscripts.in file.')

    parser.add_argument('--coverage', action='store_true', dest='coverage',
                        help="Collect coverage data from Python scripts and display "
                             "results on stderr. Scripts only record data if "
                             "coverage's process startup hook is installed.")
    parser.add_argument('--coverage-html', action='store_true', dest='coveragehtml',
                        help="Collect coverage data from Python scripts and write "
                             "an html report to the _html directory.")
    parser.add_argument('--coverpkg', action='append', dest='coverpkgs',
                        metavar='PKG',
                        help="Add the given package to the coverage list. You"
                              " can use this option multiple times to cover"
                              " multiple packages.")
    parser.add_argument('--cover-omit', action='append', dest='cover_omits',
                        metavar='FILE',
                        help="Add a file name pattern to remove it from coverage.")

    parser.add_argument('scripts', metavar='script', nargs='*',
                        help='A script to run.')

    return parser


def get_options(args=None):
    if args is None:
        args = sys.argv[1:]

    return _get_parser().parse_args(args)
