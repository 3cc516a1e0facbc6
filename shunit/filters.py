
class FailFilter:
    """This iterator saves to the specified output file only those scripts
    that fail or could not be run.  This output file can later be fed into
    shunit with --scriptfile to rerun just those scripts.
    """
    def __init__(self, outfile='failscripts.in'):
        self.outfile = outfile

    def get_iter(self, input_iter):
        with open(self.outfile, 'w') as f:
            for result in input_iter:
                if result.failure is not None:
                    print(result.path, file=f)
                yield result
