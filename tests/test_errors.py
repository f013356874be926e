import pytest

from lokipsr.errors import (
    DetailedException,
    check,
    check_equal,
    check_not_null,
    check_range,
)


def test_check_false_raises_with_message():
    with pytest.raises(DetailedException) as info:
        check(False, "boom")
    assert str(info.value).startswith("Error: boom\n")
    assert info.value.user_msg == "boom"


def test_exception_is_runtime_error():
    with pytest.raises(RuntimeError):
        check(1 > 2, "ordering")


def test_location_points_at_caller():
    with pytest.raises(DetailedException) as info:
        check(False, "where")
    assert info.value.function == "test_location_points_at_caller"
    assert info.value.filename == __file__
    assert "test_location_points_at_caller" in str(info.value)
    assert info.value.line > 0


def test_check_true_returns_none():
    assert check(True, "fine") is None


def test_check_equal_default_message():
    with pytest.raises(DetailedException) as info:
        check_equal(1, 2)
    assert info.value.user_msg == "Check failed: 1 != 2"


def test_check_equal_custom_message():
    with pytest.raises(DetailedException) as info:
        check_equal("a", "b", "mismatch")
    assert info.value.user_msg == "mismatch (a != b)"


def test_check_equal_equal_values_pass():
    assert check_equal(3, 3) is None


def test_check_not_null_default_message():
    with pytest.raises(DetailedException) as info:
        check_not_null(None)
    assert info.value.user_msg == "Pointer must not be null"


def test_check_not_null_accepts_object():
    assert check_not_null(0) is None


def test_check_range_default_message():
    with pytest.raises(DetailedException) as info:
        check_range(3, 3)
    assert info.value.user_msg == "Index 3 out of range [0, 3)"


def test_check_range_custom_message():
    with pytest.raises(DetailedException) as info:
        check_range(7, 2, "bad bin")
    assert info.value.user_msg == "bad bin (index 7 >= size 2)"


def test_check_range_in_bounds():
    assert check_range(0, 1) is None