"""Settings validation tests."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.column_names == ["To Do", "In Progress", "Done"]
    assert settings.initial_column == "To Do"


def test_columns_are_trimmed() -> None:
    settings = Settings(_env_file=None, board_columns=" Backlog , Doing,Done ", initial_column="Backlog")
    assert settings.column_names == ["Backlog", "Doing", "Done"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"board_columns": " , "},
        {"board_columns": "A,A", "initial_column": "A"},
        {"board_columns": "A,B", "initial_column": "C"},
        {"ws_outbound_queue_size": 0},
    ],
)
def test_invalid_board_layout(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
