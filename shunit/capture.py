"""
Run a child process while draining its stdout and stderr pipes.

Three tasks run concurrently for each child: one reader per pipe and one
waiting for the process to exit.  Each reader echoes every line to its own
output stream as soon as it's read and keeps a timestamped copy, so output
from one stream is never held up by the other and the child can't block on
a full pipe.
"""

import os
import sys
import time
import signal
import logging
import subprocess

from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from datetime import datetime, timezone

from shunit.lines import LogLine


logger = logging.getLogger(__name__)


class ShunitError(Exception):
    """Base class for shunit errors."""


class SpawnError(ShunitError):
    """Raised when a script can't be started or its output can't be
    captured.  The underlying error, if any, is available as __cause__.
    """


class CaptureResult:
    """Exit status and captured fragments of a finished child process.

    returncode follows the subprocess convention, so a negative value means
    the child was killed by signal -returncode.
    """

    def __init__(self, returncode, stdout_fragments, stderr_fragments,
                 timed_out=False):
        self.returncode = returncode
        self.stdout_fragments = tuple(stdout_fragments)
        self.stderr_fragments = tuple(stderr_fragments)
        self.timed_out = timed_out

    @property
    def success(self):
        return self.returncode == 0 and not self.timed_out

    @property
    def exit_code(self):
        """The exit code, or None if the process died from a signal."""
        if self.returncode < 0:
            return None
        return self.returncode

    @property
    def signal(self):
        """The number of the signal that killed the process, or None."""
        if self.returncode < 0:
            return -self.returncode
        return None

    def __repr__(self):
        return "CaptureResult(returncode=%d, stdout=%d fragments, " \
               "stderr=%d fragments, timed_out=%s)" % (self.returncode,
                                                       len(self.stdout_fragments),
                                                       len(self.stderr_fragments),
                                                       self.timed_out)


def _kill(proc):
    """Kill the process and, on POSIX, anything left in the session it
    leads, since those may still hold its output pipes open.

    Does nothing once the process has been reaped, as its pid (and so its
    process group id) may then belong to something else.
    """
    if proc.returncode is not None:
        return
    if os.name == 'posix':
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


def _wait_for_exit(proc):
    """Block until proc exits.

    Where possible the exited process is left unreaped so that its process
    group id stays reserved until every reader is done.
    """
    if hasattr(os, 'waitid'):
        os.waitid(os.P_PID, proc.pid, os.WEXITED | os.WNOWAIT)
    else:
        proc.wait()


class ProcessCapture:
    """Spawns a process and captures its stdout and stderr.

    stdout, stderr: streams
        Where captured lines are echoed as they arrive.
    env: mapping
        Environment for the child.  None means inherit ours.
    cwd: str
        Working directory for the child.
    timeout: float
        If not None, the child is killed once it has run this many seconds.
    encoding: str
        Used to decode the child's output.  Undecodable bytes are replaced.
    """

    def __init__(self, stdout=sys.stdout, stderr=sys.stderr, env=None,
                 cwd=None, timeout=None, encoding='utf-8'):
        self.stdout = stdout
        self.stderr = stderr
        self.env = env
        self.cwd = cwd
        self.timeout = timeout
        self.encoding = encoding

    def capture(self, executable, args=()):
        """Run executable with args and return a CaptureResult once the
        process has exited and both of its output streams are drained.
        """
        cmd = [executable] + list(args)
        logger.debug("spawning %s", cmd)
        deadline = None if self.timeout is None else time.monotonic() + self.timeout

        try:
            proc = subprocess.Popen(cmd, stdin=subprocess.DEVNULL,
                                    stdout=subprocess.PIPE,
                                    stderr=subprocess.PIPE,
                                    env=self.env, cwd=self.cwd,
                                    start_new_session=(os.name == 'posix'))
        except OSError as err:
            raise SpawnError("Failed to run %s: %s" % (executable, err)) from err

        if proc.stdout is None or proc.stderr is None:
            _kill(proc)
            proc.wait()
            raise SpawnError("No output pipe for %s" % executable)

        try:
            with ThreadPoolExecutor(max_workers=3,
                                    thread_name_prefix='shunit-capture') as pool:
                out_future = pool.submit(self._drain, proc.stdout, self.stdout)
                err_future = pool.submit(self._drain, proc.stderr, self.stderr)
                exit_future = pool.submit(_wait_for_exit, proc)

                try:
                    timed_out = self._collect(proc, [out_future, err_future,
                                                     exit_future], deadline)
                    stdout_fragments = out_future.result()
                    stderr_fragments = err_future.result()
                except Exception as err:
                    # unblock whichever tasks are still running so the pool
                    # can shut down
                    _kill(proc)
                    raise SpawnError("Error while capturing output of %s: %s" %
                                     (executable, err)) from err
        finally:
            returncode = proc.wait()

        logger.debug("%s exited with %d (%d stdout, %d stderr fragments)",
                     executable, returncode, len(stdout_fragments),
                     len(stderr_fragments))

        return CaptureResult(returncode, stdout_fragments, stderr_fragments,
                             timed_out=timed_out)

    def _collect(self, proc, futures, deadline):
        """Wait for the reader and exit tasks, raising the first error any
        of them hits.  Once the timeout expires, the child and the rest of
        its session are killed so the remaining tasks can finish.

        Returns True if the timeout expired.
        """
        remaining = None if deadline is None else max(0., deadline - time.monotonic())
        done, pending = wait(futures, timeout=remaining, return_when=FIRST_EXCEPTION)
        for future in done:
            future.result()

        if not pending:
            return False

        logger.warning("pid %d still running or holding its output open after "
                       "%s seconds, killing it", proc.pid, self.timeout)
        _kill(proc)
        for future in wait(pending).done:
            future.result()
        return True

    def _drain(self, pipe, echo):
        """Read pipe one line at a time until EOF, echoing each line and
        returning the list of timestamped fragments.
        """
        fragments = []
        with pipe:
            for data in iter(pipe.readline, b''):
                now = datetime.now(timezone.utc)
                text = data.decode(self.encoding, errors='replace')
                echo.write(text)
                echo.flush()
                fragments.append(LogLine(now, text))
        return fragments

