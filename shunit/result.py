import os


# failure kinds
ASSERTION_FAILED = 'Assertion failed'
IO_ERROR = 'IO error'
TIMEOUT = 'Timeout'


class ScriptFailure:
    """Why a script failed: a short message, the kind of failure and a body
    holding the script's merged output (if any).
    """

    def __init__(self, message, kind, body=''):
        self.message = message
        self.kind = kind
        self.body = body

    def __eq__(self, other):
        return isinstance(other, ScriptFailure) and \
            (self.message, self.kind, self.body) == (other.message, other.kind, other.body)

    def __repr__(self):
        return "ScriptFailure(%r, %r)" % (self.message, self.kind)


class TestOutcome:
    """Contains the path of the script as given, its resolved absolute path,
    start/end times, the failure (if any) and the text the script wrote to
    stdout and stderr.
    """

    __test__ = False

    def __init__(self, path, classname, start_time=0., end_time=0.,
                 failure=None, stdout='', stderr=''):
        self.path = path
        self.classname = classname
        self.start_time = start_time
        self.end_time = end_time
        self.failure = failure
        self.stdout = stdout
        self.stderr = stderr

    @property
    def status(self):
        if self.failure is None:
            return 'OK'
        elif self.failure.kind == ASSERTION_FAILED:
            return 'FAIL'
        return 'ERROR'

    def elapsed(self):
        return self.end_time - self.start_time

    def short_name(self):
        """Returns the script's basename."""
        return os.path.basename(self.path)

    def __str__(self):
        if self.failure is not None:
            return "%s: %s\n%s" % (self.path, self.status, self.failure.message)
        else:
            return "%s: %s" % (self.path, self.status)
