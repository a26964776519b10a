"""Tests for response assembly."""

import pytest

from parley.acts.content import ValueSetAct
from parley.rendering.response import ControlResponseBuilder, evaluate_prompt, join_list


@pytest.mark.parametrize(
    "items,conjunction,expected",
    [
        ([], "or", ""),
        (["a"], "or", "a"),
        (["a", "b"], "or", "a or b"),
        (["a", "b", "c"], "or", "a, b or c"),
        (["a", "b", "c"], "and", "a, b and c"),
    ],
)
def test_join_list(items, conjunction, expected):
    assert join_list(items, conjunction) == expected


class TestEvaluatePrompt:
    def test_template(self):
        assert evaluate_prompt("OK, {value}.", None, None, {"value": "red"}) == "OK, red."

    def test_list_picks_one_template(self):
        options = ["Got {value}.", "OK, {value}."]

        assert evaluate_prompt(options, None, None, {"value": "red"}) in {"Got red.", "OK, red."}

    def test_callable_result_is_used_verbatim(self):
        act = ValueSetAct(control_id="c", value="red", rendered_value="red")

        text = evaluate_prompt(lambda a, i: f"{{literal}} {a.value}", act, None, {})

        assert text == "{literal} red"


class TestControlResponseBuilder:
    def test_fragments_join_with_spaces_and_skip_empty(self):
        builder = ControlResponseBuilder()
        builder.add_prompt_fragment("OK, red.").add_prompt_fragment("").add_prompt_fragment(
            "Was that red?"
        )
        builder.add_reprompt_fragment("Was that red?")

        assert builder.build_prompt() == "OK, red. Was that red?"
        assert builder.build_reprompt() == "Was that red?"
