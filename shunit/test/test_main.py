import os
import sys
import shutil
import tempfile
import unittest
import xml.etree.ElementTree as ET

from shunit.main import main
from shunit.util import setup_logging


def _make_script(dirname, name, body):
    path = os.path.join(dirname, name)
    with open(path, 'w') as f:
        f.write("#!/bin/sh\n")
        f.write(body)
    os.chmod(path, 0o755)
    return path


@unittest.skipIf(sys.platform == 'win32', "uses /bin/sh scripts")
class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.startdir = os.getcwd()
        self.tempdir = tempfile.mkdtemp()
        os.chdir(self.tempdir)
        _make_script(self.tempdir, 'im_ok.sh', "echo ok\n")
        _make_script(self.tempdir, 'bad_apple.sh', "echo rotten >&2\nexit 3\n")
        self.report = os.path.join(self.tempdir, 'report.xml')

    def tearDown(self):
        os.chdir(self.startdir)
        shutil.rmtree(self.tempdir)
        setup_logging(quiet=True)

    def _read_report(self):
        return ET.parse(self.report).getroot()

    def test_no_scripts(self):
        self.assertEqual(main(['-q', '-o', self.report]), 0)
        suite = self._read_report()
        self.assertEqual(suite.get('tests'), '0')
        self.assertEqual(suite.get('errors'), '0')
        self.assertEqual(suite.get('failures'), '0')

    def test_mixed_results(self):
        retval = main(['-q', '--no-echo', '-o', self.report,
                       './im_ok.sh', './bad_apple.sh', './missing.sh', './im_ok.sh'])
        self.assertEqual(retval, 0)

        suite = self._read_report()
        self.assertEqual(suite.get('tests'), '4')
        self.assertEqual(suite.get('failures'), '1')
        self.assertEqual(suite.get('errors'), '1')

        cases = suite.findall('testcase')
        self.assertEqual([c.get('name') for c in cases],
                         ['./im_ok.sh', './bad_apple.sh', './missing.sh', './im_ok.sh'])
        self.assertEqual(cases[0].get('classname'),
                         os.path.realpath(os.path.join(self.tempdir, 'im_ok.sh')))
        failure = cases[1].find('failure')
        self.assertEqual(failure.get('message'), 'Non-zero exit-code: 3')
        self.assertEqual(failure.get('type'), 'Assertion failed')
        self.assertEqual(failure.text, 'rotten\n')
        self.assertEqual(cases[2].find('error').get('type'), 'IO error')
        self.assertIsNone(cases[3].find('failure'))

        self.assertEqual(suite.find('system-out').text, 'ok\nok\n')
        self.assertEqual(suite.find('system-err').text, 'rotten\n')

        names = [p.get('name') for p in suite.find('properties')]
        self.assertIn('PATH', names)

    def test_scriptfile_and_fail_file(self):
        with open('scripts.in', 'w') as f:
            f.write("./im_ok.sh\n./bad_apple.sh  # known bad\n")
        main(['-q', '--no-echo', '-f', '--scriptfile', 'scripts.in',
              '-o', self.report])
        self.assertEqual(self._read_report().get('tests'), '2')
        with open('failscripts.in') as f:
            self.assertEqual(f.read(), './bad_apple.sh\n')

    def test_config_file(self):
        with open('shunit.cfg', 'w') as f:
            f.write("[shunit]\noutput = %s\n" % self.report)
        main(['-q', '--no-echo', '-c', 'shunit.cfg', './im_ok.sh'])
        self.assertEqual(self._read_report().get('tests'), '1')

    def test_stop(self):
        main(['-q', '--no-echo', '-x', '-o', self.report,
              './bad_apple.sh', './im_ok.sh'])
        self.assertEqual(self._read_report().get('tests'), '1')


if __name__ == '__main__':
    unittest.main()
