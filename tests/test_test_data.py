import json
import re

import pytest

from signup_suite import test_data
from signup_suite.test_data import (
    as_params,
    expand_placeholders,
    get_row,
    load_rows,
    random_field,
    random_password,
    unique_email,
)


@pytest.fixture
def data_files(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_DATA_DIR", str(tmp_path))
    test_data.clear_cache()
    yield tmp_path
    test_data.clear_cache()


def write(directory, name, rows):
    (directory / name).write_text(json.dumps(rows), encoding="utf-8")


def test_bundled_files_load():
    test_data.clear_cache()

    assert len(load_rows("invalid_logins.json")) == 3
    assert load_rows("logins.json")[0]["validPassword"] == "Passw0rd!"
    users = load_rows("users.json")
    assert all(user["email"].endswith("@testmail.com") for user in users)
    assert users[0]["email"] != users[1]["email"]


def test_placeholders_expand_once_per_load(data_files):
    write(data_files, "rows.json", [{"email": "<generated>", "password": "<random_password>", "tag": "plain"}])

    first = load_rows("rows.json")
    second = load_rows("rows.json")

    assert first[0]["email"].endswith("@testmail.com")
    assert first[0]["email"] == second[0]["email"]
    assert first[0]["tag"] == "plain"
    assert "<" not in first[0]["password"]


def test_callers_get_independent_copies(data_files):
    write(data_files, "rows.json", [{"name": "Ada", "tags": ["a"]}])

    rows = load_rows("rows.json")
    rows[0]["name"] = "changed"
    rows[0]["tags"].append("b")

    assert load_rows("rows.json") == [{"name": "Ada", "tags": ["a"]}]


def test_missing_and_malformed_files(data_files):
    (data_files / "broken.json").write_text("{not json", encoding="utf-8")
    write(data_files, "object.json", {"name": "not a list"})

    with pytest.raises(FileNotFoundError, match="Test data file not found"):
        load_rows("absent.json")
    with pytest.raises(ValueError, match="Failed to parse"):
        load_rows("broken.json")
    with pytest.raises(ValueError, match="JSON list of objects"):
        load_rows("object.json")


def test_get_row_bounds(data_files):
    write(data_files, "rows.json", [{"n": 0}, {"n": 1}])

    assert get_row("rows.json", 1) == {"n": 1}
    with pytest.raises(IndexError, match=r"Invalid index 2 for file rows.json \(size: 2\)"):
        get_row("rows.json", 2)
    with pytest.raises(IndexError):
        get_row("rows.json", -1)


def test_as_params_uses_description_or_file_index(data_files):
    write(data_files, "rows.json", [{"description": "happy path"}, {"other": True}])

    params = as_params("rows.json")

    assert [param.id for param in params] == ["happy path", "rows-1"]
    assert params[1].values == ({"other": True},)


def test_random_password_mixes_character_classes():
    password = random_password(16)

    assert len(password) == 16
    assert re.search(r"[A-Z]", password)
    assert re.search(r"[a-z]", password)
    assert re.search(r"\d", password)
    assert re.search(r"[!@#$%^&*]", password)
    with pytest.raises(ValueError):
        random_password(3)


def test_generated_values_are_unique_and_typed():
    emails = {unique_email() for _ in range(50)}

    assert len(emails) == 50
    assert random_field("zipcode").isdigit()
    assert random_field("PHONE").startswith("+1")
    assert len(random_field("favourite-colour")) == 8


def test_expand_placeholders_leaves_other_values():
    row = expand_placeholders({"email": "<unique_email>", "age": 30, "note": "<unknown>"})

    assert row["email"].endswith("@testmail.com")
    assert row["age"] == 30
    assert row["note"] == "<unknown>"
