import pytest

from simpleos.matrix import main, multiply_ones


@pytest.mark.parametrize("num_threads", [1, 2, 5])
def test_multiply_ones_entries_equal_size(num_threads):
    size = 9
    result = multiply_ones(size, num_threads)
    assert len(result) == size
    assert all(len(row) == size for row in result)
    assert {value for row in result for value in row} == {size}


def test_multiply_ones_more_threads_than_rows():
    result = multiply_ones(3, 10)
    assert result == [[3, 3, 3]] * 3


def test_main_reports_success(capsys):
    assert main(["2", "6"]) == 0
    out = capsys.readouterr().out
    assert "Test Success." in out
    assert out.count("Execution Time:") == 2


def test_main_rejects_bad_thread_count():
    with pytest.raises(ValueError):
        main(["0", "4"])