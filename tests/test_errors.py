from app.core.errors import validation_error_map


def test_validation_error_map_groups_by_field() -> None:
    errors = [
        {"loc": ("body", "name"), "msg": "Field required"},
        {"loc": ("body", "name"), "msg": "must not be blank"},
        {"loc": ("body", "client"), "msg": "Field required"},
        {"loc": ("query", "support_id"), "msg": "Input should be a valid integer"},
    ]
    assert validation_error_map(errors) == {
        "name": ["Field required", "must not be blank"],
        "client": ["Field required"],
        "support_id": ["Input should be a valid integer"],
    }


def test_validation_error_map_whole_body() -> None:
    assert validation_error_map([{"loc": ("body",), "msg": "Field required"}]) == {"body": ["Field required"]}
