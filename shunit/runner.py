"""
Methods and class for running test scripts.
"""

import os
import sys
import time
import signal
import logging

from shunit.capture import ProcessCapture, SpawnError
from shunit.lines import merge_streams, join_lines, lines_text
from shunit.result import TestOutcome, ScriptFailure, \
                          ASSERTION_FAILED, IO_ERROR, TIMEOUT


logger = logging.getLogger(__name__)


def resolve_script_path(path, cwd=None):
    """Return the absolute path of the script with all symlinks resolved.

    Raises SpawnError if the script doesn't exist.
    """
    if cwd is None:
        cwd = os.getcwd()
    resolved = os.path.realpath(os.path.join(cwd, path))
    if not os.path.exists(resolved):
        raise SpawnError("Unable to determine the absolute path for %s: "
                         "No such file or directory" % path)
    return resolved


def _exit_message(result):
    if result.signal is not None:
        try:
            signame = signal.Signals(result.signal).name
        except ValueError:
            signame = 'signal %d' % result.signal
        return "Non-zero exit-code: -1 (killed by %s)" % signame
    return "Non-zero exit-code: %d" % result.exit_code


class ScriptRunner:
    """Runs scripts one at a time, capturing their output, and turns each
    run into a TestOutcome.
    """

    def __init__(self, options, env=None, cwd=None, stdout=sys.stdout,
                 stderr=sys.stderr):
        self.stop = getattr(options, 'stop', False)
        self.timeout = getattr(options, 'timeout', None)
        self.cwd = os.getcwd() if cwd is None else cwd
        self._capture = ProcessCapture(stdout=stdout, stderr=stderr, env=env,
                                       cwd=self.cwd, timeout=self.timeout)

    def get_iter(self, input_iter):
        """Run scripts serially."""

        for path in input_iter:
            outcome = self.run(path)
            yield outcome
            if self.stop and outcome.failure is not None:
                logger.info("stopping after failure of %s", path)
                break

    def run(self, path):
        """Run the script at path and return its TestOutcome."""
        start_time = time.time()

        try:
            classname = resolve_script_path(path, self.cwd)
        except SpawnError as err:
            logger.error("%s", err)
            return TestOutcome(path, os.path.abspath(os.path.join(self.cwd, path)),
                               start_time, time.time(),
                               ScriptFailure(str(err), IO_ERROR))

        logger.info("running %s", classname)

        try:
            result = self._capture.capture(classname)
        except SpawnError as err:
            logger.error("%s", err)
            return TestOutcome(path, classname, start_time, time.time(),
                               ScriptFailure(str(err), IO_ERROR))

        end_time = time.time()

        stdout = lines_text(result.stdout_fragments)
        stderr = lines_text(result.stderr_fragments)

        if result.success:
            failure = None
        else:
            body = lines_text(join_lines(merge_streams(result.stdout_fragments,
                                                       result.stderr_fragments)))
            if result.timed_out:
                failure = ScriptFailure("Timed out after %s seconds" % self.timeout,
                                        TIMEOUT, body)
            else:
                failure = ScriptFailure(_exit_message(result), ASSERTION_FAILED,
                                        body)
            logger.info("%s failed: %s", path, failure.message)

        return TestOutcome(path, classname, start_time, end_time, failure,
                           stdout, stderr)
