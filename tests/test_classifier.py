"""Tests for the generated-type classifier and its built-in rules."""

from __future__ import annotations

import pytest

from typesift.classifier import GeneratedTypeClassifier, is_generated
from typesift.rules.builtin import (
    AnonStoreyRule,
    CompilerAttributeRule,
    EmbeddedGuidRule,
    FixedBufferRule,
    LegacyIteratorRule,
    LiteralPrefixRule,
    LocalFunctionRule,
    PatternRule,
    StateMachineRule,
)


@pytest.mark.parametrize(
    "name",
    [
        "<>c__DisplayClassHelperd__12",
        "<Run>d__3",
        "<Foo>e__FixedBuffer",
        "<>c__AnonStorey1",
        "<>c__Iterator0",
        "NullableAttribute",
        "<3F2504E0-4F89-11D3-9A0C-0305E82C3301>Wrapper",
        "<M>g__Local|0_1",
        "<Module>",
        "<PrivateImplementationDetails>",
        "__StaticArrayInitTypeSize=16",
        "$ArrayType=byte[4]",
        "EmbeddedAttribute",
        "IsReadOnlyAttribute",
        "CompilerGeneratedAttribute",
        "NullableContextAttribute",
    ],
)
def test_generated_names_are_flagged(name: str) -> None:
    assert is_generated(name) is True


@pytest.mark.parametrize(
    "name",
    ["PlayerController", "Bar", "MyCustomAttributeHolder", "BasePlayer", "Item`1", "", "Nullable"],
)
def test_authored_names_are_kept(name: str) -> None:
    assert is_generated(name) is False


def test_classification_is_repeatable() -> None:
    classifier = GeneratedTypeClassifier()
    for name in ("<Run>d__3", "PlayerController", "NullableAttribute"):
        first = classifier.is_generated(name)
        assert classifier.is_generated(name) is first
        assert classifier.match(name) == classifier.match(name)


def test_match_reports_first_rule_name() -> None:
    classifier = GeneratedTypeClassifier()

    assert classifier.match("<Run>d__3") == "state-machine"
    assert classifier.match("<Foo>e__FixedBuffer") == "fixed-buffer"
    assert classifier.match("<>c__AnonStorey1") == "literal-prefix"
    assert classifier.match("NullableAttribute") == "compiler-attribute"
    assert classifier.match("<M>g__Local|0_1") == "local-function"
    assert classifier.match("<3F2504E0-4F89-11D3-9A0C-0305E82C3301>Wrapper") == "embedded-guid"
    assert classifier.match("PlayerController") is None


def test_literal_prefix_rule() -> None:
    rule = LiteralPrefixRule()
    assert rule.matches("<>c")
    assert rule.matches("<PrivateImplementationDetails>{ABC}")
    assert not rule.matches("Module")
    assert not LiteralPrefixRule(prefixes=()).matches("<>c")


def test_embedded_guid_rule_accepts_lowercase_hex() -> None:
    rule = EmbeddedGuidRule()
    assert rule.matches("Holder<3f2504e0-4f89-11d3-9a0c-0305e82c3301>")
    assert not rule.matches("<3F2504E0-4F89-11D3-9A0C>Wrapper")
    assert not rule.matches("3F2504E0-4F89-11D3-9A0C-0305E82C3301")


def test_state_machine_rule() -> None:
    rule = StateMachineRule()
    assert rule.matches("<Run>d__3")
    assert rule.matches("<LoadAsync>d__120")
    assert not rule.matches("<Run>d__")
    assert not rule.matches("Loadd__3")


def test_fixed_buffer_rule() -> None:
    rule = FixedBufferRule()
    assert rule.matches("<Foo>e__FixedBuffer")
    assert not rule.matches("FixedBuffer")


def test_anon_storey_rule() -> None:
    rule = AnonStoreyRule()
    assert rule.matches("<>c__AnonStorey1")
    assert rule.matches("<Start>c__AnonStorey12")
    assert not rule.matches("<Start>c__AnonStorey")


def test_legacy_iterator_rule() -> None:
    rule = LegacyIteratorRule()
    assert rule.matches("<>c__Iterator0")
    assert rule.matches("<Spawn>c__Iterator7")
    assert not rule.matches("IteratorHelper")


def test_compiler_attribute_rule_requires_both_terms() -> None:
    rule = CompilerAttributeRule()
    assert rule.matches("NullableAttribute")
    assert rule.matches("CompilerGeneratedAttribute")
    assert not rule.matches("MyCustomAttributeHolder")
    assert not rule.matches("NullableValue")


def test_local_function_rule() -> None:
    rule = LocalFunctionRule()
    assert rule.matches("<M>g__Local|0_1")
    assert not rule.matches("Mg__Local")
    assert not rule.matches("<M>Local")


def test_custom_rules_replace_defaults() -> None:
    classifier = GeneratedTypeClassifier([PatternRule("proxy", r"^Proxy_")])

    assert classifier.is_generated("Proxy_Player")
    assert not classifier.is_generated("<Run>d__3")
