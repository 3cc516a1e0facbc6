from setuptools import setup

import re

__version__ = re.findall(
    r"""__version__ = ["']+([0-9\.]*)["']+""",
    open('shunit/__init__.py').read(),
)[0]

setup(name='shunit',
      version=__version__,
      description="Runs a list of shell scripts and outputs the results in JUnit "
                  "format for easy use in CI/CD systems.",
      long_description="""
        usage: shunit [options] [script ...]

        positional arguments:
          script                A script to run.

        optional arguments:
          -h, --help            show this help message and exit
          -q, --quiet           Silence log messages and progress output. Script
                                output is still echoed.
          -v, --verbose         Verbose mode (-v, -vv, -vvv). The levels are
                                warnings, informational and debugging messages.
                                Any -v also prints a line for every script that
                                runs.
          -t {none,sec,ms,us,ns}, --timestamp {none,sec,ms,us,ns}
                                Resolution of the timestamp on log messages.
          -o FILE, --output FILE
                                Name of the file to write the report to. By
                                default the report is written to stdout.
          -c FILE, --config FILE
                                Path of config file where preferences are
                                specified.
          --scriptfile FILE     Path to a file containing one script per line.
          --timeout TIMEOUT     Timeout in seconds. A script is killed and
                                reported as an error if it takes longer than
                                timeout.
          --no-echo             Don't echo the output of scripts while they run.
                                It is still captured for the report.
          -x, --stop            Stop after the first script that fails.
          -f, --fail            Save failed scripts to failscripts.in file.
          --coverage            Collect coverage data from Python scripts and
                                display results on stderr.
          --coverage-html       Collect coverage data from Python scripts and
                                write an html report to the _html directory.
          --coverpkg PKG        Add the given package to the coverage list.
          --cover-omit FILE     Add a file name pattern to remove it from
                                coverage.
      """,
      python_requires='>=3.9',
      install_requires=[
        'coverage'
      ],
      packages=['shunit'],
      entry_points="""
          [console_scripts]
          shunit=shunit.main:main
      """
      )
