import io

import pytest

from matvec_lab.cli import MODE_PROMPT, SIZE_PROMPT, format_results, main, parse_mode
from matvec_lab.errors import InvalidArgument
from matvec_lab.kernels.variants import KernelVariant


def run_cli(text, argv=()):
    stdout, stderr = io.StringIO(), io.StringIO()
    code = main(list(argv), stdin=io.StringIO(text), stdout=stdout, stderr=stderr)
    return code, stdout.getvalue(), stderr.getvalue()


def test_sequential_run():
    code, out, err = run_cli("1\n3\n")
    assert code == 0
    lines = out.splitlines()
    assert lines[0] == MODE_PROMPT
    assert lines[1] == SIZE_PROMPT
    assert lines[2] == "Sequential calculation selected"
    assert lines[3] == "14 | 14 | 14"
    assert err == ""


def test_parallel_run_with_flags():
    code, out, _ = run_cli("0\n21\n", argv=["--backend", "host", "--tile-edge", "20", "--workers", "4"])
    assert code == 0
    lines = out.splitlines()
    assert lines[2] == "Parallel calculation selected"
    values = lines[3].split(" | ")
    assert len(values) == 21
    assert set(values) == {str(sum((j + 1) ** 2 for j in range(21)))}


def test_any_other_mode_selects_parallel():
    code, out, _ = run_cli("7\n1\n")
    assert code == 0
    assert "Parallel calculation selected" in out
    assert out.endswith("1\n")


def test_zero_dimension_prints_empty_row():
    code, out, _ = run_cli("0\n0\n")
    assert code == 0
    lines = out.splitlines()
    assert lines[-2] == "Parallel calculation selected"
    assert lines[-1] == ""


@pytest.mark.parametrize("text", ["1\n-4\n", "1\nabc\n", "x\n3\n", ""])
def test_bad_input_fails_without_results(text):
    code, out, err = run_cli(text)
    assert code == 1
    assert "Error during input" in err
    assert " | " not in out


def test_execution_failure_reported():
    code, out, err = run_cli("0\n3\n", argv=["--tile-edge", "64"])
    assert code == 1
    assert "Error during execution" in err
    assert "14" not in out


def test_allocation_failure_reported(monkeypatch):
    monkeypatch.setenv("MATVEC_DEVICE_MEMORY_LIMIT", "8")
    code, _, err = run_cli("1\n5\n")
    assert code == 1
    assert "Error during allocation" in err


def test_parse_mode():
    assert parse_mode("1") is KernelVariant.SEQUENTIAL
    assert parse_mode("0") is KernelVariant.PARALLEL
    assert parse_mode("-3") is KernelVariant.PARALLEL
    with pytest.raises(InvalidArgument):
        parse_mode("seq")


def test_format_results():
    assert format_results([1, 2, 3]) == "1 | 2 | 3"
    assert format_results([]) == ""


def test_huge_dimension_reports_allocation_failure():
    # A would need about 29 TiB
    code, out, err = run_cli("0\n2000000\n")
    assert code == 1
    assert "Error during allocation" in err
    assert " | " not in out
