import pytest

from errors import FileOpenError, InvalidConfiguration, MalformedTraceToken, OutputError
from traces import TraceFile, generate_addresses, parse_address, read_addresses, write_trace


def test_reads_whitespace_separated_tokens(trace_file):
    path = trace_file("0 16\n\n  32\t48\n64")
    assert read_addresses(path) == [0, 16, 32, 48, 64]


def test_wide_values_are_accepted(trace_file):
    assert read_addresses(trace_file([2**40])) == [2**40]


@pytest.mark.parametrize("token", ["abc", "-5", "+5", "0x10", "1.5", "12ab"])
def test_malformed_token(token):
    with pytest.raises(MalformedTraceToken):
        parse_address(token)


def test_malformed_token_reports_line(trace_file):
    path = trace_file("0 16\n32 oops\n")
    with pytest.raises(MalformedTraceToken) as excinfo:
        read_addresses(path)
    assert excinfo.value.token == "oops"
    assert excinfo.value.line_no == 2


def test_missing_file(tmp_path):
    with pytest.raises(FileOpenError):
        with TraceFile(str(tmp_path / "nope.txt")):
            pass


def test_trace_file_closes_on_error(trace_file):
    trace = TraceFile(trace_file("1 x"))
    with pytest.raises(MalformedTraceToken):
        with trace:
            list(trace)
    assert trace._f is None


def test_write_trace_round_trip(tmp_path):
    path = write_trace(str(tmp_path / "out" / "t.txt"), [5, 6, 7], per_line=2)
    with open(path) as f:
        assert f.read() == "5 6\n7\n"
    assert read_addresses(path) == [5, 6, 7]


def test_sequential_pattern_wraps():
    # 1 KB working set of 256-byte blocks is 4 blocks
    addrs = generate_addresses("sequential", num_requests=6, working_set_kb=1, block_size=256)
    assert addrs == [0, 256, 512, 768, 0, 256]


@pytest.mark.parametrize("pattern", ["random", "mixed"])
def test_generated_trace_is_reproducible(pattern):
    a = generate_addresses(pattern, num_requests=500, working_set_kb=4, block_size=64, seed=7)
    b = generate_addresses(pattern, num_requests=500, working_set_kb=4, block_size=64, seed=7)
    assert a == b
    assert len(a) == 500
    assert all(x % 64 == 0 and 0 <= x < 4096 for x in a)


def test_unknown_pattern():
    with pytest.raises(InvalidConfiguration):
        generate_addresses("strided")


def test_non_ascii_bytes_are_malformed(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"0 16\n\xff\xfe 32\n")
    with pytest.raises(MalformedTraceToken) as excinfo:
        read_addresses(str(path))
    assert excinfo.value.line_no == 2


def test_negative_request_count():
    with pytest.raises(InvalidConfiguration):
        generate_addresses("random", num_requests=-1)


def test_write_trace_unwritable_path(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(OutputError):
        write_trace(str(blocker / "t.txt"), [1])
