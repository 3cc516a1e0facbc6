"""
Misc. utility routines.
"""

import os
import sys
import time
import logging

from configparser import ConfigParser


def read_script_file(scriptfile):
    """Reads a file containing one script per line."""
    with open(os.path.abspath(scriptfile), 'r') as f:
        for line in f:
            idx = line.find('#')
            if idx >= 0:
                line = line[:idx]

            line = line.strip()
            if line:
                yield line


def read_config_file(cfgfile, options):
    """Fill in options from the [shunit] section of cfgfile.

    Options that were given on the command line are left alone.
    """
    config = ConfigParser()
    with open(cfgfile) as f:
        config.read_file(f)

    if config.has_option('shunit', 'timeout') and options.timeout is None:
        options.timeout = config.getfloat('shunit', 'timeout')

    if config.has_option('shunit', 'output') and options.output is None:
        options.output = config.get('shunit', 'output')

    if config.has_option('shunit', 'verbose') and not options.verbose:
        options.verbose = config.getint('shunit', 'verbose')


def elapsed_str(elapsed):
    """return a string of the form hh:mm:sec"""
    hrs = int(elapsed/3600)
    elapsed -= (hrs * 3600)
    mins = int(elapsed/60)
    elapsed -= (mins * 60)
    return "%02d:%02d:%.2f" % (hrs, mins, elapsed)


_levels = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


class TimestampFormatter(logging.Formatter):
    """Formats log records with an RFC 3339 timestamp of the given
    resolution ('sec', 'ms', 'us' or 'ns'), or no timestamp for 'none'.
    """

    def __init__(self, mode='none'):
        if mode == 'none':
            fmt = '%(levelname)s - %(message)s'
        else:
            fmt = '%(asctime)s %(levelname)s - %(message)s'
        super().__init__(fmt)
        self.mode = mode

    def formatTime(self, record, datefmt=None):
        created_ns = getattr(record, 'created_ns', None)
        if created_ns is None:
            created_ns = int(record.created * 1e9)
        secs, frac = divmod(created_ns, 10**9)
        stamp = time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(secs))
        if self.mode == 'ms':
            stamp += '.%03d' % (frac // 10**6)
        elif self.mode == 'us':
            stamp += '.%06d' % (frac // 10**3)
        elif self.mode == 'ns':
            stamp += '.%09d' % frac
        return stamp + 'Z'


def setup_logging(verbose=0, quiet=False, timestamp='none', stream=None):
    """Configure the 'shunit' logger to write to stderr.

    verbose selects the level (0=error, 1=warning, 2=info, 3+=debug); quiet
    turns logging off entirely.
    """
    logger = logging.getLogger('shunit')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if quiet:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
    else:
        handler = logging.StreamHandler(sys.stderr if stream is None else stream)
        handler.setFormatter(TimestampFormatter(timestamp))
        logger.addHandler(handler)
        logger.setLevel(_levels[min(verbose, len(_levels) - 1)])

    logger.propagate = False
    return logger
