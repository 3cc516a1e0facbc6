
class DevNull:
    """A class for throwaway stream output, used in place of the echo
    streams when the output of scripts shouldn't reach the terminal.
    """

    def write(self, s):
        return len(s)

    def writelines(self, iterable):
        pass

    def flush(self):
        pass

    def isatty(self):
        return False
