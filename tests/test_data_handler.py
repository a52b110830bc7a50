from __future__ import annotations

import json

import pytest

from template_filler.data_handler import (
    bindings_from_fields,
    bullet_question,
    flatten_text_block,
    load_layout_config,
    load_render_request,
    parse_query_string,
    split_to_two_paras,
)


def test_flatten_structured_block():
    block = {"lead": "Calm under pressure.", "questions": ["When did it help?", " ", "When did it hurt?"]}
    assert flatten_text_block(block) == (
        "Calm under pressure.\nReflection questions:\n1. When did it help?\n2. When did it hurt?"
    )


def test_flatten_without_questions_has_no_marker():
    assert flatten_text_block({"paragraph": "Only a lead."}) == "Only a lead."


def test_flatten_lists_and_scalars():
    assert flatten_text_block(["a", "", None, " b "]) == "a\nb"
    assert flatten_text_block(None) == ""
    assert flatten_text_block(42) == "42"


def test_bullet_question():
    assert bullet_question("How do you adapt?") == "• How do you adapt?"
    assert bullet_question("• Already bulleted") == "• Already bulleted"
    assert bullet_question("   ") == ""


def test_split_on_blank_line():
    assert split_to_two_paras("First part.\n\nSecond part.") == ("First part.", "Second part.")


def test_split_on_sentences():
    assert split_to_two_paras("One. Two. Three.") == ("One. Two.", "Three.")
    assert split_to_two_paras("Just one sentence") == ("Just one sentence", "")
    assert split_to_two_paras(None) == ("", "")


def test_parse_query_string_keeps_order_and_blanks():
    pairs = parse_query_string("?L_p6Q_workwith_leaders_q_y=1000&debug=&L_p6Q_workwith_leaders_q_y=1010")
    assert pairs == [
        ("L_p6Q_workwith_leaders_q_y", "1000"),
        ("debug", ""),
        ("L_p6Q_workwith_leaders_q_y", "1010"),
    ]
    assert parse_query_string(None) == []


def test_bindings_skip_incomplete_fields():
    bindings = bindings_from_fields(
        [
            {"page": "p1Header", "box": "fullName", "value": "  Alex  "},
            {"page": "p1Header", "value": "no box"},
            "not a mapping",
            {"page": "p3Chart", "box": "spider", "value": "https://x/y.png", "kind": "IMAGE"},
        ]
    )
    assert [(b.page, b.box, b.value, b.kind) for b in bindings] == [
        ("p1Header", "fullName", "Alex", "text"),
        ("p3Chart", "spider", "https://x/y.png", "image"),
    ]


def test_load_render_request_with_bom(tmp_path):
    payload = {
        "fields": [{"page": "p6Q", "box": "workwith_leaders_q", "value": "• How?"}],
        "layout": {"p6Q": {"workwith_leaders_q": {"y": 1000}}},
        "query": "L_p6Q_workwith_leaders_q_size=12",
    }
    p = tmp_path / "request.json"
    p.write_text("\ufeff" + json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    req = load_render_request(p)
    assert req.bindings[0].value == "• How?"
    assert req.layout == {"p6Q": {"workwith_leaders_q": {"y": 1000}}}
    assert req.query_pairs == [("L_p6Q_workwith_leaders_q_size", "12")]


def test_load_render_request_rejects_non_object(tmp_path):
    p = tmp_path / "request.json"
    p.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_render_request(p)


def test_load_layout_config_missing_file(tmp_path):
    assert load_layout_config(tmp_path / "absent.json") == {}


def test_load_layout_config_bad_json(tmp_path):
    p = tmp_path / "layout.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_layout_config(p)


def test_bindings_bullet_flag():
    bindings = bindings_from_fields(
        [
            {"page": "p6Q", "box": "workwith_leaders_q", "value": "What would help?", "bullet": True},
            {"page": "p6Q", "box": "workwith_colleagues_q", "value": "• Already bulleted", "bullet": True},
            {"page": "p6Q", "box": "plain", "value": "No bullet"},
        ]
    )
    assert [b.value for b in bindings] == ["• What would help?", "• Already bulleted", "No bullet"]


def test_bindings_split_across_two_boxes():
    bindings = bindings_from_fields(
        [{"page": "p2Exec", "box": ["exec_summary_para1", "exec_summary_para2"], "value": "One. Two. Three."}]
    )
    assert [(b.page, b.box, b.value) for b in bindings] == [
        ("p2Exec", "exec_summary_para1", "One. Two."),
        ("p2Exec", "exec_summary_para2", "Three."),
    ]


def test_bindings_split_requires_two_boxes():
    bindings = bindings_from_fields(
        [
            {"page": "p2Exec", "box": ["only_one"], "value": "A. B."},
            {"page": "p3Chart", "box": ["a", "b"], "value": "x.png", "kind": "image"},
        ]
    )
    assert bindings == []
