"""
shunit runs a list of scripts, one at a time, and writes the results as a
JUnit XML report for easy use in CI/CD systems.

It feeds the script names through a pipeline of iterators.
The ScriptRunner turns each script name into a TestOutcome and the rest of
the pipeline operates on those outcomes, printing progress, summarizing the
run and finally writing the report.

The only API for objects added to the pipeline is:

    def get_iter(self, input_iter)

which should expect to receive an iterator and should return an iterator
over TestOutcome objects.
"""

import os
import sys
import logging

from contextlib import ExitStack

from shunit.options import get_options
from shunit.runner import ScriptRunner
from shunit.printer import ResultPrinter
from shunit.summary import ResultSummary
from shunit.filters import FailFilter
from shunit.report import JUnitReport
from shunit.devnull import DevNull
from shunit.cover import setup_coverage, finalize_coverage
from shunit.util import read_config_file, read_script_file, setup_logging


logger = logging.getLogger('shunit.main')


def run_pipeline(source, pipe):
    """Run a pipeline of iteration objects and return the list of
    outcomes that came out the end of it.
    """

    iters = [source]

    # give each object the iterator from upstream in the pipeline
    for i, p in enumerate(pipe):
        iters.append(p(iters[i]))

    return list(iters[-1])


def main(args=None):
    if args is None:
        args = sys.argv[1:]

    options = get_options(args)

    # read user prefs from ~/.shunit file if there is one
    rcfile = os.path.join(os.path.expanduser('~'), '.shunit')
    if os.path.isfile(rcfile):
        read_config_file(rcfile, options)
    if options.cfg:
        read_config_file(options.cfg, options)

    setup_logging(options.verbose, options.quiet, options.timestamp)

    scripts = list(options.scripts)
    if options.scriptfile:
        scripts += list(read_script_file(options.scriptfile))

    # the environment and working dir are read once, here, and handed down
    cwd = os.getcwd()
    env = dict(os.environ)
    properties = list(env.items())
    suite_name = env.get('PWD') or cwd

    setup_coverage(options, env)

    if options.no_echo:
        echo_out = echo_err = DevNull()
    else:
        echo_out, echo_err = sys.stdout, sys.stderr

    verbose = -1 if options.quiet else options.verbose

    with ExitStack() as stack:
        if options.output:
            report = stack.enter_context(open(options.output, 'w',
                                              encoding='utf-8'))
        else:
            report = sys.stdout

        pipeline = [
            ScriptRunner(options, env=env, cwd=cwd, stdout=echo_out,
                         stderr=echo_err).get_iter,
            ResultPrinter(verbose=verbose).get_iter,
            ResultSummary(verbose=verbose).get_iter,
        ]

        if options.save_fails:
            pipeline.append(FailFilter().get_iter)

        pipeline.append(JUnitReport(report, properties, name=suite_name).get_iter)

        outcomes = run_pipeline(scripts, pipeline)

    finalize_coverage(options)

    logger.info("ran %d scripts, %d did not pass", len(outcomes),
                sum(1 for o in outcomes if o.failure is not None))

    # failures are recorded in the report, not in our exit code
    return 0


if __name__ == '__main__':
    sys.exit(main())
