import os

import pytest

TESTDATA = os.path.join(os.path.dirname(__file__), 'testdata')


@pytest.fixture
def testdata():
    def path(*parts):
        return os.path.join(TESTDATA, *parts)
    return path


@pytest.fixture
def write_output(tmp_path):
    """Writes a <base>.dimacs / <base>.rsf pair like kconfigreader does and returns <base>."""
    def write(dimacs, xml, preamble='Item\tA\tboolean\n'):
        base = tmp_path / 'kconfigreader_output'
        (tmp_path / 'kconfigreader_output.dimacs').write_text(dimacs)
        (tmp_path / 'kconfigreader_output.rsf').write_text(preamble + '.\n' + xml)
        return str(base)
    return write
