import pytest

from todo_service.errors import InvalidIdentifier, ValidationFailure
from todo_service.schemas import TodoCreate
from todo_service.validation import validate_new_todo, validate_todo_id


class TestValidateNewTodo:
    def test_accepts_unpersisted_todo_with_title(self):
        assert validate_new_todo(TodoCreate(title="Learn Go")) is None

    @pytest.mark.parametrize("todo_id", [5, 1, -3])
    def test_rejects_client_supplied_id(self, todo_id):
        with pytest.raises(InvalidIdentifier):
            validate_new_todo(TodoCreate(id=todo_id, title="x"))

    def test_id_is_checked_before_title(self):
        with pytest.raises(InvalidIdentifier):
            validate_new_todo(TodoCreate(id=5, title=""))

    def test_rejects_empty_title(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_new_todo(TodoCreate())
        assert str(exc_info.value) == "The title is required"

    def test_rejects_null_title(self):
        with pytest.raises(ValidationFailure):
            validate_new_todo(TodoCreate(title=None))

    def test_whitespace_only_title_is_accepted(self):
        validate_new_todo(TodoCreate(title="   "))


class TestValidateTodoId:
    @pytest.mark.parametrize("todo_id", [0, -1])
    def test_rejects_non_positive_ids(self, todo_id):
        with pytest.raises(InvalidIdentifier):
            validate_todo_id(todo_id)

    def test_accepts_positive_id(self):
        assert validate_todo_id(42) is None

    @pytest.mark.parametrize("todo_id", [2**63, 2**64])
    def test_rejects_ids_beyond_64_bits(self, todo_id):
        with pytest.raises(InvalidIdentifier):
            validate_todo_id(todo_id)

    def test_accepts_largest_64_bit_id(self):
        assert validate_todo_id(2**63 - 1) is None
