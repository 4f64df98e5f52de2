"""Prompt 输入值渲染 + 模板替换测试"""

from commentpilot.core.models import ModerationDecision, ThreadEntry
from commentpilot.provider.inputs import (
    RecordListInput,
    ScalarInput,
    StructuredInput,
    as_input_value,
    render_inputs,
)
from commentpilot.provider.prompt import format_instructions, render_template


class TestAsInputValue:
    def test_thread_rendered_as_numbered_lines(self, sample_thread):
        value = as_input_value(sample_thread)
        assert isinstance(value, RecordListInput)
        assert value.render() == "1. A: hi\n2. B: yo"

    def test_pydantic_entries_rendered_as_records(self):
        thread = [ThreadEntry(author="Ann", text="first"), ThreadEntry(text="second")]
        assert as_input_value(thread).render() == "1. Ann: first\n2. User: second"

    def test_missing_author_defaults_to_user(self):
        assert as_input_value([{"text": "hello"}]).render() == "1. User: hello"
        assert as_input_value([{"author": None, "text": "hello"}]).render() == (
            "1. User: hello"
        )

    def test_empty_author_kept(self):
        assert as_input_value([{"author": "", "text": "hello"}]).render() == "1. : hello"

    def test_record_without_text_rendered_as_json(self):
        value = as_input_value([{"author": "A", "content": "x"}])
        assert value.render() == '1. A: {"author":"A","content":"x"}'

    def test_thread_entry_extra_fields_rendered_as_json(self):
        entry = ThreadEntry.model_validate({"author": "A", "content": "x"})
        assert as_input_value([entry]).render() == '1. A: {"author":"A","content":"x"}'

    def test_empty_sequence_renders_empty(self):
        assert as_input_value([]).render() == ""

    def test_scalar_passthrough(self):
        assert isinstance(as_input_value("Nice post"), ScalarInput)
        assert as_input_value("Nice post").render() == "Nice post"
        assert as_input_value(3).render() == "3"
        assert as_input_value(None).render() == ""

    def test_mapping_rendered_as_indented_json(self):
        value = as_input_value({"a": 1})
        assert isinstance(value, StructuredInput)
        assert value.render() == '{\n  "a": 1\n}'

    def test_mixed_sequence_rendered_as_json(self):
        value = as_input_value([1, "two"])
        assert isinstance(value, StructuredInput)
        assert value.render() == '[\n  1,\n  "two"\n]'

    def test_existing_variant_returned_as_is(self):
        value = ScalarInput("x")
        assert as_input_value(value) is value

    def test_render_inputs(self, sample_thread):
        rendered = render_inputs({"comment": "ok", "thread": sample_thread})
        assert rendered == {"comment": "ok", "thread": "1. A: hi\n2. B: yo"}


class TestRenderTemplate:
    def test_replaces_known_placeholders(self):
        assert render_template("C: {comment}", {"comment": "hi"}) == "C: hi"

    def test_unknown_braces_left_alone(self):
        template = 'Return {"approved": true} for {comment}'
        assert render_template(template, {"comment": "x"}) == (
            'Return {"approved": true} for x'
        )

    def test_substituted_text_not_rescanned(self):
        result = render_template("{comment}", {"comment": "{thread}", "thread": "T"})
        assert result == "{thread}"


class TestFormatInstructions:
    def test_lists_fields_and_enum_values(self):
        text = format_instructions(ModerationDecision)
        for name in ("approved", "reason", "sentiment", "title"):
            assert f'"{name}"' in text
        for value in ("positive", "neutral", "negative"):
            assert value in text
