import matplotlib

matplotlib.use("Agg")

import pytest


@pytest.fixture
def trace_file(tmp_path):
    """Write addresses (or raw text) to a trace file and return its path."""
    def _make(content, name="trace.txt"):
        path = tmp_path / name
        if not isinstance(content, str):
            content = "\n".join(str(a) for a in content) + "\n"
        path.write_text(content)
        return str(path)
    return _make
