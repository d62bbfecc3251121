import pytest

from leitner.application.tags import process_tags


@pytest.mark.parametrize("value", [None, "", []])
def test_empty_input(value):
    assert process_tags(value) == []


def test_single_tag_with_spaces():
    assert process_tags(" tag1 ") == ["tag1"]


def test_multiple_tags_with_varying_whitespace():
    assert process_tags(" tag1 , tag2  , tag3 ") == ["tag1", "tag2", "tag3"]


def test_drops_empty_entries():
    assert process_tags("tag1,,tag2,") == ["tag1", "tag2"]
    assert process_tags(", , ") == []


def test_list_input_trimmed():
    assert process_tags([" geography ", "", "europe"]) == ["geography", "europe"]


def test_duplicates_removed_keeping_order():
    assert process_tags("b, a, b, c, a") == ["b", "a", "c"]


def test_case_sensitive():
    assert process_tags("Math, math") == ["Math", "math"]


def test_rejects_non_string_items():
    with pytest.raises(TypeError):
        process_tags(["ok", 3])


def test_rejects_other_types():
    with pytest.raises(TypeError):
        process_tags(42)
