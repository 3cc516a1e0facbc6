import sys

from shunit.util import elapsed_str


_result_map = {
    'OK': '.',
    'FAIL': 'F',
    'ERROR': 'E',
}

class ResultPrinter:
    """Prints the status and failure message (if any) of each TestOutcome
    after its script has been run if verbose is > 0.  If verbose is 0,
    it displays a dot for each successful script, but failures and errors
    are still displayed in verbose form.  If verbose is < 0, nothing is
    displayed.
    """

    def __init__(self, stream=sys.stderr, verbose=0):
        self.stream = stream
        self.verbose = verbose

    def get_iter(self, input_iter):
        for result in input_iter:
            self._print_result(result)
            yield result

    def _print_result(self, result):
        if self.verbose < 0:
            return

        stream = self.stream
        stats = elapsed_str(result.elapsed())

        if result.failure is not None:
            stream.write("%s ... %s (%s)\n    %s: %s\n" % (result.path,
                                                          result.status,
                                                          stats,
                                                          result.failure.kind,
                                                          result.failure.message))
        elif self.verbose > 0:
            stream.write("%s ... %s (%s)\n" % (result.path, result.status, stats))
        else:
            stream.write(_result_map[result.status])

        stream.flush()
