import sys
import time

from shunit.util import elapsed_str

class ResultSummary:
    """Writes a summary after all scripts are run."""

    def __init__(self, stream=sys.stderr, verbose=0):
        self.stream = stream
        self.verbose = verbose
        self._start_time = time.time()

    def get_iter(self, input_iter):
        oks = 0
        total = 0
        fails = []
        errors = []
        script_sum_time = 0.

        for result in input_iter:
            total += 1
            script_sum_time += result.elapsed()

            if result.status == 'OK':
                oks += 1
            elif result.status == 'FAIL':
                fails.append(result.path)
            else:
                errors.append(result.path)

            yield result

        if self.verbose < 0:
            return

        write = self.stream.write

        # now summarize the run
        if errors:
            write("\n\nThe following scripts could not be run:\n")
            for e in errors:
                write(e)
                write('\n')

        if fails:
            write("\n\nThe following scripts failed:\n")
            for f in fails:
                write(f)
                write('\n')
        elif not errors:
            write("\n\nOK")

        write("\n\nPassed:  %d\nFailed:  %d\nErrors:  %d\n" %
              (oks, len(fails), len(errors)))

        wallclock = time.time() - self._start_time

        s = "" if total == 1 else "s"
        write("\n\nRan %d script%s\nSum of script times: %s\n"
              "Wall clock time:     %s\n\n" %
              (total, s, elapsed_str(script_sum_time), elapsed_str(wallclock)))
        self.stream.flush()
