"""
Writes the outcomes of a run as a JUnit XML <testsuite> document.
"""

import re
import sys
import time
import socket
import xml.etree.ElementTree as ET

from datetime import datetime, timezone

from shunit.result import ASSERTION_FAILED


# characters that can't appear in an XML 1.0 document
_illegal_xml_chars = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')


def xml_safe(text):
    """Return text with characters that XML 1.0 can't represent removed."""
    return _illegal_xml_chars.sub('', text)


def _seconds(t):
    return "%.3f" % t


def build_testsuite(outcomes, properties=(), name='Unknown', hostname='',
                    timestamp=None, elapsed=0.):
    """Return an Element for a <testsuite> holding the given outcomes.

    properties is a sequence of (name, value) pairs, usually the
    environment the scripts ran in.
    """
    outcomes = list(outcomes)
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    errors = sum(1 for o in outcomes if o.status == 'ERROR')
    failures = sum(1 for o in outcomes if o.status == 'FAIL')

    suite = ET.Element('testsuite', {
        'errors': str(errors),
        'failures': str(failures),
        'hostname': xml_safe(hostname),
        'name': xml_safe(name),
        'tests': str(len(outcomes)),
        'time': _seconds(elapsed),
        'timestamp': timestamp.strftime('%Y-%m-%dT%H:%M:%S'),
    })

    props = ET.SubElement(suite, 'properties')
    for pname, value in properties:
        ET.SubElement(props, 'property', {'name': xml_safe(pname),
                                          'value': xml_safe(value)})

    for outcome in outcomes:
        case = ET.SubElement(suite, 'testcase', {
            'classname': xml_safe(outcome.classname),
            'name': xml_safe(outcome.path),
            'time': _seconds(outcome.elapsed()),
        })
        failure = outcome.failure
        if failure is not None:
            tag = 'failure' if failure.kind == ASSERTION_FAILED else 'error'
            elem = ET.SubElement(case, tag, {'message': xml_safe(failure.message),
                                             'type': failure.kind})
            elem.text = xml_safe(failure.body)

    ET.SubElement(suite, 'system-out').text = \
        xml_safe(''.join(o.stdout for o in outcomes))
    ET.SubElement(suite, 'system-err').text = \
        xml_safe(''.join(o.stderr for o in outcomes))

    return suite


def write_testsuite(suite, stream):
    """Write the <testsuite> element to a text stream, indented."""
    ET.indent(suite)
    stream.write('<?xml version="1.0" encoding="UTF-8"?>\n')
    stream.write(ET.tostring(suite, encoding='unicode'))
    stream.write('\n')
    stream.flush()


class JUnitReport:
    """Collects every outcome that passes through it and writes the JUnit
    report to stream once the input is exhausted.
    """

    def __init__(self, stream=sys.stdout, properties=(), name='Unknown',
                 hostname=None):
        self.stream = stream
        self.properties = list(properties)
        self.name = name
        self.hostname = socket.gethostname() if hostname is None else hostname
        self._timestamp = datetime.now(timezone.utc)
        self._start_time = time.time()

    def get_iter(self, input_iter):
        outcomes = []
        for result in input_iter:
            outcomes.append(result)
            yield result

        suite = build_testsuite(outcomes, self.properties, name=self.name,
                                hostname=self.hostname,
                                timestamp=self._timestamp,
                                elapsed=time.time() - self._start_time)
        write_testsuite(suite, self.stream)
