import pytest

from lineagekit.cli_maps import (
    is_media_type_json,
    parse_commandline_list,
    parse_commandline_map,
    split_string,
)


@pytest.mark.parametrize(
    "src, expected",
    [
        ("key1:value1,key2:value2", {"key1": "value1", "key2": "value2"}),
        ('key1:"value1,value2",key2:value3', {"key1": "value1,value2", "key2": "value3"}),
        ('key1:"value1,value2,key2:value3"', {"key1": "value1,value2,key2:value3"}),
        ('"key1,key2":value1', {"key1,key2": "value1"}),
    ],
)
def test_parse_input_mapping(src, expected):
    assert parse_commandline_map(src) == expected


def test_parse_input_mapping_rejects_missing_colon():
    with pytest.raises(ValueError, match="expected key:value"):
        parse_commandline_map("key1value1")


def test_parse_input_mapping_rejects_extra_colon():
    with pytest.raises(ValueError):
        parse_commandline_map("a:b:c")


@pytest.mark.parametrize(
    "src, expected",
    [
        ("1,2,3", ["1", "2", "3"]),
        ('"1,2",3', ['"1,2"', "3"]),
        ('1,"2,3",', ["1", '"2,3"', ""]),
    ],
)
def test_split_string(src, expected):
    assert split_string(src, ",") == expected


def test_parse_commandline_list_trims_and_drops_empty():
    assert parse_commandline_list(" a , b,,c ") == ["a", "b", "c"]


def test_parse_commandline_list_blank_is_empty():
    assert parse_commandline_list("   ") == []


@pytest.mark.parametrize(
    "media_type, want",
    [
        ("", False),
        ("application/pdf", False),
        ("application/notjson", False),
        ("application/json", True),
        ("application/json-patch+json", True),
        ("application/vnd.api+json", True),
    ],
)
def test_is_media_type_json(media_type, want):
    assert is_media_type_json(media_type) is want