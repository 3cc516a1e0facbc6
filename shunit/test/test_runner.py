import os
import sys
import shutil
import tempfile
import unittest

from io import StringIO

from shunit.options import get_options
from shunit.runner import ScriptRunner, resolve_script_path
from shunit.capture import SpawnError
from shunit.result import ASSERTION_FAILED, IO_ERROR, TIMEOUT


def _make_script(dirname, name, body):
    path = os.path.join(dirname, name)
    with open(path, 'w') as f:
        f.write("#!/bin/sh\n")
        f.write(body)
    os.chmod(path, 0o755)
    return path


@unittest.skipIf(sys.platform == 'win32', "uses /bin/sh scripts")
class ScriptRunnerTestCase(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.mkdtemp()
        _make_script(self.tempdir, 'im_ok.sh', "echo all good\nexit 0\n")
        _make_script(self.tempdir, 'bad_apple.sh',
                     "echo first\nsleep 0.2\necho second >&2\nexit 7\n")
        _make_script(self.tempdir, 'slow.sh', "echo started\nsleep 30\n")
        self.out = StringIO()
        self.err = StringIO()

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    def _runner(self, *args):
        return ScriptRunner(get_options(list(args)), cwd=self.tempdir,
                            stdout=self.out, stderr=self.err)

    def test_ok(self):
        outcome = self._runner().run('im_ok.sh')
        self.assertIsNone(outcome.failure)
        self.assertEqual(outcome.status, 'OK')
        self.assertEqual(outcome.path, 'im_ok.sh')
        self.assertEqual(outcome.classname,
                         os.path.realpath(os.path.join(self.tempdir, 'im_ok.sh')))
        self.assertEqual(outcome.stdout, 'all good\n')
        self.assertEqual(outcome.stderr, '')
        self.assertGreaterEqual(outcome.elapsed(), 0.)
        self.assertEqual(self.out.getvalue(), 'all good\n')

    def test_non_zero_exit(self):
        outcome = self._runner().run('bad_apple.sh')
        self.assertEqual(outcome.status, 'FAIL')
        self.assertEqual(outcome.failure.kind, ASSERTION_FAILED)
        self.assertEqual(outcome.failure.message, "Non-zero exit-code: 7")
        self.assertEqual(outcome.failure.body, "first\nsecond\n")
        self.assertEqual(outcome.stdout, "first\n")
        self.assertEqual(outcome.stderr, "second\n")
        self.assertGreaterEqual(outcome.elapsed(), 0.2)

    def test_killed_by_signal(self):
        _make_script(self.tempdir, 'term.sh', "echo bye\nkill -TERM $$\n")
        outcome = self._runner().run('term.sh')
        self.assertEqual(outcome.failure.kind, ASSERTION_FAILED)
        self.assertIn('SIGTERM', outcome.failure.message)
        self.assertEqual(outcome.failure.body, "bye\n")

    def test_missing_script(self):
        outcome = self._runner().run('nope.sh')
        self.assertEqual(outcome.status, 'ERROR')
        self.assertEqual(outcome.failure.kind, IO_ERROR)
        self.assertIn('nope.sh', outcome.failure.message)
        self.assertEqual(outcome.failure.body, '')
        self.assertEqual(outcome.classname, os.path.join(self.tempdir, 'nope.sh'))

    def test_not_executable(self):
        path = os.path.join(self.tempdir, 'plain.sh')
        with open(path, 'w') as f:
            f.write("echo hi\n")
        os.chmod(path, 0o644)
        outcome = self._runner().run('plain.sh')
        self.assertEqual(outcome.failure.kind, IO_ERROR)

    def test_spawn_failure_isolation(self):
        outcomes = list(self._runner().get_iter(['nope.sh', 'im_ok.sh']))
        self.assertEqual(len(outcomes), 2)
        self.assertEqual(outcomes[0].failure.kind, IO_ERROR)
        self.assertIsNone(outcomes[1].failure)

    def test_runs_all_scripts_in_order(self):
        outcomes = list(self._runner().get_iter(['bad_apple.sh', 'im_ok.sh',
                                                 'bad_apple.sh']))
        self.assertEqual([o.status for o in outcomes], ['FAIL', 'OK', 'FAIL'])

    def test_stop_after_failure(self):
        outcomes = list(self._runner('-x').get_iter(['bad_apple.sh', 'im_ok.sh']))
        self.assertEqual(len(outcomes), 1)
        self.assertEqual(outcomes[0].status, 'FAIL')

    def test_timeout(self):
        outcome = self._runner('--timeout', '0.5').run('slow.sh')
        self.assertEqual(outcome.status, 'ERROR')
        self.assertEqual(outcome.failure.kind, TIMEOUT)
        self.assertIn('0.5', outcome.failure.message)
        self.assertEqual(outcome.failure.body, 'started\n')
        self.assertLess(outcome.elapsed(), 30.)

    def test_empty_input(self):
        self.assertEqual(list(self._runner().get_iter([])), [])


class ResolveScriptPathTestCase(unittest.TestCase):

    def test_relative_to_cwd(self):
        tempdir = tempfile.mkdtemp()
        try:
            path = os.path.join(tempdir, 'x.sh')
            open(path, 'w').close()
            self.assertEqual(resolve_script_path('x.sh', tempdir),
                             os.path.realpath(path))
            self.assertEqual(resolve_script_path(path), os.path.realpath(path))
        finally:
            shutil.rmtree(tempdir)

    def test_missing(self):
        with self.assertRaises(SpawnError):
            resolve_script_path('definitely_not_here.sh', tempfile.gettempdir())


if __name__ == '__main__':
    unittest.main()
