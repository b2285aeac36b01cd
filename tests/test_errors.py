import pytest

from errors import NotFoundError, StorageError, ValidationError, attempt
from menus import MAIN_MENU, TRASH_MENU, find_item


def test_attempt_wraps_value():
    result = attempt(lambda a, b: a + b, 2, b=3)
    assert result.ok
    assert result.value == 5
    assert result.kind is None
    assert result.message == ""


@pytest.mark.parametrize(
    "error, kind",
    [
        (ValidationError("bad title"), "validation"),
        (NotFoundError("abc"), "not_found"),
        (StorageError("disk full"), "io"),
    ],
)
def test_attempt_tags_failures_by_kind(error, kind):
    def fail():
        raise error

    result = attempt(fail)

    assert not result.ok
    assert result.kind == kind
    assert result.error is error


def test_not_found_message_names_the_id():
    err = NotFoundError("abc")
    assert err.task_id == "abc"
    assert str(err) == "No task found with id: abc"


def test_attempt_lets_bugs_propagate():
    with pytest.raises(ZeroDivisionError):
        attempt(lambda: 1 / 0)


def test_find_item_normalises_key():
    assert find_item(MAIN_MENU, " 3 ").action == "add_task"
    assert find_item(TRASH_MENU, "P").action == "purge_task"
    assert find_item(MAIN_MENU, "x") is None
