"""
Methods to collect code coverage from Python scripts using coverage.py.

The scripts run in their own processes, so nothing is measured here.  We
only point the scripts at a shared config and data directory through their
environment and combine whatever data files they leave behind.
"""
import os
import sys
import shutil
import logging

try:
    import coverage
    from coverage.config import HandyConfigParser
except ImportError:
    coverage = None


logger = logging.getLogger(__name__)

# use to hold a global coverage obj
_coverobj = None

def _to_ini(lst):
    if lst:
        return ','.join(lst)
    return ''


def _write_temp_config(options, rcfile):
    """
    Read any .coveragerc file if it exists, and override parts of it then generate our temp config.

    Parameters
    ----------
    options : cmd line options
        Options from the command line parser.
    rcfile : str
        The name of our temporary coverage config file.
    """
    tmp_cfg = {
        'run': {
            'branch': False,
            'parallel': True,
            'source_pkgs': _to_ini(options.coverpkgs),
        },
        'report': {
            'ignore_errors': True,
            'skip_empty': True,
            'sort': '-cover',
        },
        'html': {
            'skip_empty': True,
        }
    }

    if options.cover_omits:
        tmp_cfg['run']['omit'] = _to_ini(options.cover_omits)
        tmp_cfg['report']['omit'] = _to_ini(options.cover_omits)

    cfgparser = HandyConfigParser(our_file=True)

    if os.path.isfile('.coveragerc'):
        cfgparser.read(['.coveragerc'])

    cfgparser.read_dict(tmp_cfg)

    with open(rcfile, 'w') as f:
        cfgparser.write(f)


def setup_coverage(options, env):
    """If coverage was requested, prepare the data directory and add the
    variables that coverage's process startup hook looks for to env.

    Returns the Coverage object used to combine the data later, or None.
    """
    global _coverobj
    if _coverobj is None and (options.coverage or options.coveragehtml):
        if not coverage:
            raise RuntimeError("coverage has not been installed.")
        if not options.coverpkgs:
            raise RuntimeError("No packages specified for coverage. "
                               "Use the --coverpkg option to add a package.")
        oldcov = os.path.join(os.getcwd(), '.coverage')
        if os.path.isfile(oldcov):
            os.remove(oldcov)
        covdir = os.path.join(os.getcwd(), '_covdir')
        if os.path.isdir(covdir):
            shutil.rmtree(covdir)
        os.mkdir(covdir)
        rcfile = os.path.join(covdir, '_coveragerc_')
        covfile = os.path.join(covdir, '.coverage')
        env['COVERAGE_RUN'] = 'true'
        env['COVERAGE_RCFILE'] = rcfile
        env['COVERAGE_FILE'] = covfile
        env['COVERAGE_PROCESS_START'] = rcfile
        _write_temp_config(options, rcfile)
        _coverobj = coverage.Coverage(data_file=covfile, data_suffix=True,
                                      config_file=rcfile)
        logger.info("collecting coverage data in %s", covdir)
    return _coverobj


def finalize_coverage(options):
    """Combine the data files written by the scripts and report on them."""
    global _coverobj
    if _coverobj is None:
        return

    cov, _coverobj = _coverobj, None

    try:
        cov.combine()
        cov.save()

        if options.coverage:
            cov.report(file=sys.stderr)
        else:
            dname = os.path.join(os.getcwd(), '_html')
            cov.html_report(directory=dname)
            logger.warning("coverage report written to %s",
                           os.path.join(dname, 'index.html'))
    except coverage.CoverageException as err:
        logger.warning("no coverage report: %s", err)
        return

    datafile = cov.get_data().data_filename()
    if os.path.isfile(datafile):
        shutil.copy(datafile, os.path.join(os.getcwd(), '.coverage'))
