import json

import pytest

from smart_minutes import corrections
from smart_minutes.corrections import DEFAULT_CORRECTIONS, apply_corrections
from smart_minutes.errors import MalformedRuleTable


def test_whole_word_only():
    assert apply_corrections("sand and land", [("and", "ang")]) == "sand ang land"


def test_case_insensitive():
    assert apply_corrections("YOUNG adults", [("Young", "yoong")]) == "yoong adults"


def test_rules_chain_in_order():
    assert apply_corrections("a", [("a", "b"), ("b", "c")]) == "c"
    assert apply_corrections("a", [("b", "c"), ("a", "b")]) == "b"


def test_no_match_leaves_text_unchanged():
    text = "Speaker 1:\nyoungster and youngest"
    assert apply_corrections(text, DEFAULT_CORRECTIONS) == text


def test_empty_table_and_empty_text():
    assert apply_corrections("Speaker 1:\nhi", []) == "Speaker 1:\nhi"
    assert apply_corrections("", DEFAULT_CORRECTIONS) == ""


def test_every_occurrence_replaced():
    assert apply_corrections("young, Young and young.", [("young", "yoong")]) == "yoong, yoong and yoong."


def test_phrase_with_punctuation_is_literal():
    text = "Thank you, sir. Have a good day in the office."
    assert apply_corrections(text, DEFAULT_CORRECTIONS) == "Thank you sa pag attend office."
    # "." in the pattern must not act as a wildcard
    assert apply_corrections("Thank you, sirX Have a good day in the", DEFAULT_CORRECTIONS) == (
        "Thank you, sirX Have a good day in the"
    )


def test_digits_count_as_word_characters():
    assert apply_corrections("and2 2and and", [("and", "ang")]) == "and2 2and ang"


def test_underscore_is_a_boundary():
    assert apply_corrections("young_team", [("young", "yoong")]) == "yoong_team"


def test_replacement_is_inserted_verbatim():
    assert apply_corrections("cost", [("cost", r"\1 \g<0>")]) == r"\1 \g<0>"


def test_replacement_not_rescanned_by_same_rule():
    assert apply_corrections("na", [("na", "na na")]) == "na na"


def test_deterministic():
    text = "The young one said young things"
    assert apply_corrections(text, DEFAULT_CORRECTIONS) == apply_corrections(text, DEFAULT_CORRECTIONS)


@pytest.mark.parametrize(
    "rules",
    [
        {"young": "yoong"},
        "young",
        [("young",)],
        [("", "x")],
        [(None, "x")],
        [("young", None)],
        ["young"],
    ],
)
def test_malformed_tables_raise(rules):
    with pytest.raises(MalformedRuleTable):
        apply_corrections("young", rules)


def test_load_rules(tmp_path):
    path = tmp_path / "corrections.json"
    path.write_text(json.dumps([["young", "yoong"], ["yoong", "Yoong"]]), encoding="utf-8")
    rules = corrections.load_rules(str(path))
    assert rules == [("young", "yoong"), ("yoong", "Yoong")]
    assert apply_corrections("young", rules) == "Yoong"


def test_load_rules_rejects_mapping(tmp_path):
    path = tmp_path / "corrections.json"
    path.write_text(json.dumps({"young": "yoong"}), encoding="utf-8")
    with pytest.raises(MalformedRuleTable):
        corrections.load_rules(str(path))
