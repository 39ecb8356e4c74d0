"""Tests for document-reference normalization."""

import copy
import re

import pytest

from nova.normalization import (
    REFERENCE_PATTERNS,
    ReferencePattern,
    canonical_reference,
    normalize_message,
    normalize_steps,
    split_canonical_reference,
)
from upstream_helpers import text_step, visual_step

CANONICAL = "<DOCUMENTID>abc123</DOCUMENTID>"


class TestNormalizeMessage:
    """Each recognized markup form maps onto the canonical tag."""

    @pytest.mark.parametrize(
        "message",
        [
            "See <DOCUMENTID>abc123</DOCUMENTID>",
            "See <document>abc123</document>",
            'See <doc id="abc123">',
            "See <document id='abc123'/>",
            "See [DOCUMENT: abc123]",
            "See [doc=abc123]",
        ],
    )
    def test_all_forms_produce_identical_output(self, message):
        assert normalize_message(message) == f"See {CANONICAL}"

    def test_surrounding_text_untouched(self):
        message = "Your plan is ready: [DOCUMENTID: abc123]. Let me know!"
        assert normalize_message(message) == f"Your plan is ready: {CANONICAL}. Let me know!"

    def test_attribute_form_is_case_insensitive(self):
        assert normalize_message("<Document ID='x-1'/>") == canonical_reference("x-1")

    def test_paired_tag_beats_later_patterns(self):
        message = "[DOC: bbb] and <doc>aaa</doc>"
        assert normalize_message(message) == "[DOC: bbb] and <DOCUMENTID>aaa</DOCUMENTID>"

    def test_only_first_reference_is_rewritten(self):
        message = "<doc>a1</doc> <doc>b2</doc>"
        assert normalize_message(message) == "<DOCUMENTID>a1</DOCUMENTID> <doc>b2</doc>"

    @pytest.mark.parametrize(
        "message, expected",
        [
            ('<doc id="abc123">Your plan</doc>', f"{CANONICAL}Your plan"),
            ("<Document ID='abc123'></document> done", f"{CANONICAL} done"),
        ],
    )
    def test_attribute_form_absorbs_matching_close_tag(self, message, expected):
        assert normalize_message(message) == expected

    def test_attribute_form_leaves_mismatched_close_tag(self):
        assert normalize_message('<doc id="abc123">x</document>') == f"{CANONICAL}x</document>"

    def test_canonical_input_is_stable(self):
        assert normalize_message(CANONICAL) == CANONICAL

    @pytest.mark.parametrize(
        "message",
        [
            "Hello there, how can I help?",
            "<DOCUMENTID>abc123",
            "<doc id=abc123>",
            "[DOCUMENT abc123]",
            "<doc></doc>",
            "<doc>abc</document>",
            "",
        ],
    )
    def test_non_matching_messages_unchanged(self, message):
        assert normalize_message(message) == message

    def test_custom_patterns_extend_recognition(self):
        hashtag = ReferencePattern(
            name="hashtag",
            regex=re.compile(r"#doc-(?P<id>\w+)"),
            extractor=lambda match: match.group("id"),
        )
        patterns = (*REFERENCE_PATTERNS, hashtag)
        assert normalize_message("see #doc-abc123", patterns) == f"see {CANONICAL}"
        assert normalize_message("see #doc-abc123") == "see #doc-abc123"


class TestNormalizeSteps:
    """Step-list level properties."""

    def test_preserves_count_and_order(self):
        steps = [
            text_step("first"),
            visual_step("https://img.test/a.png"),
            text_step('here <doc id="abc123">'),
            {"type": "choice", "payload": {"buttons": []}},
            text_step("last", step_type="speak"),
        ]
        result = normalize_steps(steps)

        assert len(result) == len(steps)
        assert [step["type"] for step in result] == ["text", "visual", "text", "choice", "speak"]
        assert result[2]["payload"]["message"] == f"here {CANONICAL}"

    def test_unmatched_and_non_text_steps_are_same_objects(self):
        steps = [text_step("plain"), visual_step("https://img.test/a.png"), {"type": "end"}]
        result = normalize_steps(steps)
        for before, after in zip(steps, result):
            assert after is before

    def test_speak_steps_are_normalized(self):
        result = normalize_steps([text_step("[DOC: abc123]", step_type="speak")])
        assert result[0]["payload"]["message"] == CANONICAL

    def test_visual_step_with_message_field_is_not_touched(self):
        step = {"type": "visual", "payload": {"image": "x", "message": "<doc>abc</doc>"}}
        assert normalize_steps([step])[0] is step

    def test_inputs_are_not_mutated(self):
        steps = [text_step("<doc>abc123</doc>"), text_step("plain")]
        snapshot = copy.deepcopy(steps)
        normalize_steps(steps)
        assert steps == snapshot

    def test_rewritten_step_keeps_other_payload_fields(self):
        step = {"type": "text", "payload": {"message": "<doc>abc123</doc>", "delay": 300}, "time": 1}
        result = normalize_steps([step])[0]
        assert result == {"type": "text", "payload": {"message": CANONICAL, "delay": 300}, "time": 1}

    def test_malformed_records_pass_through(self):
        steps = [{"type": "text"}, {"type": "text", "payload": "oops"}, "junk", {"payload": {}}]
        result = normalize_steps(steps)
        assert all(after is before for before, after in zip(steps, result))

    def test_empty_list(self):
        assert normalize_steps([]) == []


class TestSplitCanonicalReference:
    """Display text and document id separation."""

    def test_trailing_tag(self):
        assert split_canonical_reference(f"See {CANONICAL}") == ("See", "abc123")

    def test_tag_only(self):
        assert split_canonical_reference(CANONICAL) == (None, "abc123")

    def test_tag_in_middle_joins_text(self):
        text, document_id = split_canonical_reference(f"Here it is: {CANONICAL} enjoy")
        assert text == "Here it is: enjoy"
        assert document_id == "abc123"

    @pytest.mark.parametrize("punctuation", [".", ",", "!", "?", ")"])
    def test_no_space_before_closing_punctuation(self, punctuation):
        text, document_id = split_canonical_reference(f"See {CANONICAL}{punctuation}")
        assert text == f"See{punctuation}"
        assert document_id == "abc123"

    def test_space_kept_before_words(self):
        assert split_canonical_reference(f"See {CANONICAL} (attached)")[0] == "See (attached)"

    def test_no_tag(self):
        assert split_canonical_reference("no document") == ("no document", None)

    def test_non_canonical_forms_are_not_split(self):
        assert split_canonical_reference("<doc>abc123</doc>") == ("<doc>abc123</doc>", None)
