import json

import pytest

from colonykit.jsonio import (
    JsonFileError,
    json_file_load,
    json_file_write,
    strip_json_comments,
)


def test_strip_line_and_block_comments():
    text = '{ // note\n "a": 1, /* inner */ "b": [2] }'
    assert json.loads(strip_json_comments(text)) == {"a": 1, "b": [2]}


def test_strip_keeps_strings():
    text = '{"url": "a//b", "c": "/* x */", "q": "say \\"//\\""}'
    assert json.loads(strip_json_comments(text)) == json.loads(text)


def test_strip_unterminated_block():
    with pytest.raises(JsonFileError):
        strip_json_comments('{"a": 1 /* open')


def test_round_trip(tmp_path):
    data = {"enums": ["HOME", "WALL"], "consts": {"x": 1.5, "y": 2}, "none": None}
    path = tmp_path / "data.json"
    json_file_write(data, path)
    assert json_file_load(path) == data


def test_write_indents_by_four(tmp_path):
    path = tmp_path / "out.json"
    json_file_write({"a": 1}, str(path))
    assert path.read_text(encoding="utf-8") == '{\n    "a": 1\n}'


def test_write_sorts_keys(tmp_path):
    path = tmp_path / "out.json"
    json_file_write({"b": 1, "a": 2}, path)
    text = path.read_text(encoding="utf-8")
    assert text.index('"a"') < text.index('"b"')


def test_load_with_comments(tmp_path):
    path = tmp_path / "c.json"
    path.write_text('// header\n{"textures": [] /* none */}\n', encoding="utf-8")
    assert json_file_load(path) == {"textures": []}


def test_load_missing_file(tmp_path):
    with pytest.raises(JsonFileError):
        json_file_load(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"a": }', encoding="utf-8")
    with pytest.raises(JsonFileError):
        json_file_load(path)


def test_write_into_missing_directory(tmp_path):
    with pytest.raises(JsonFileError):
        json_file_write({"a": 1}, tmp_path / "nope" / "x.json")