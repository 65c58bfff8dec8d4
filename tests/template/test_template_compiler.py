# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Construction-time template checks."""

from __future__ import annotations

import re

import pytest

from iamvalidator import (
    MISSING,
    ExtraStrategy,
    MissingStrategy,
    TemplateError,
    TypeKind,
    create_validator,
)


def _noop(value, options):
    return value


class TestValidTemplates:
    def test_compiled_tree_shape(self):
        validator = create_validator(
            {
                "type": "object",
                "extra_strategy": "include",
                "fields": {
                    "tags": {"type": "array", "element": {"type": "string", "regexp": "^[a-z]+$"}},
                    "score": {"type": "number", "missing_strategy": "default", "default_value": 0},
                },
            }
        )

        root = validator.template
        assert root.kind is TypeKind.OBJECT
        assert root.extra_strategy is ExtraStrategy.INCLUDE
        assert list(root.fields) == ["tags", "score"]

        tags = root.fields["tags"]
        assert tags.kind is TypeKind.ARRAY
        assert isinstance(tags.element.regexp, re.Pattern)
        assert tags.missing_strategy is MissingStrategy.ERROR
        assert tags.default_value is MISSING

        score = root.fields["score"]
        assert score.missing_strategy is MissingStrategy.DEFAULT
        assert score.default_value == 0

    def test_none_is_a_valid_default(self):
        template = create_validator({"type": "string", "missing_strategy": "default", "default_value": None}).template

        assert template.default_value is None

    def test_raw_template_is_kept(self):
        raw = {"type": "string"}

        assert create_validator(raw).raw_template is raw

    def test_values_keep_their_container_shape(self):
        listed = create_validator({"type": "number", "values": [1, 2]}).template
        hashed = create_validator({"type": "number", "values": {1, 2}}).template

        assert listed.values == (1, 2)
        assert hashed.values == frozenset({1, 2})

    def test_hint_attached_to_variant_member(self):
        hint = lambda value, options: True  # noqa: E731
        template = create_validator(
            {"type": "variant", "variants": [{"type": "string", "hint": hint}, {"type": "number"}]}
        ).template

        assert template.variants[0].hint is hint
        assert template.variants[1].hint is None


class TestRejectedTemplates:
    @pytest.mark.parametrize(
        "template, message",
        [
            ({"type": "strnig"}, "Invalid type"),
            ({}, "Invalid type"),
            ({"type": "variant", "variants": []}, "Invalid variants"),
            ({"type": "object"}, "Invalid fields"),
            ({"type": "object", "fields": {}, "extra_strategy": "keep"}, "Invalid extra_strategy"),
            ({"type": "string", "missing_strategy": "skip"}, "Invalid missing_strategy"),
            ({"type": "string", "missing_strategy": "default"}, "Missing default_value"),
            ({"type": "string", "length": -1}, "Invalid length"),
            ({"type": "string", "min_length": True}, "Invalid min_length"),
            ({"type": "string", "regexp": "("}, "Invalid regexp"),
            ({"type": "string", "values": []}, "Invalid values"),
            ({"type": "number", "min_value": "1"}, "Invalid min_value"),
            ({"type": "number", "is_integer": "yes"}, "Invalid is_integer"),
            ({"type": "string", "is_nullable": 1}, "Invalid is_nullable"),
            ({"type": "string", "transform_after": "upper"}, "Invalid transform_after"),
            ({"type": "array", "element": {"type": "string"}, "check_equality": 1}, "Invalid check_equality"),
        ],
    )
    def test_malformed_node(self, template, message):
        with pytest.raises(TemplateError, match=message):
            create_validator(template)

    def test_unknown_key_is_rejected(self):
        with pytest.raises(TemplateError, match=r"Unknown key\(s\) \['min_lenght'\]"):
            create_validator({"type": "string", "min_lenght": 2})

    def test_key_of_another_type_is_rejected(self):
        with pytest.raises(TemplateError, match="Unknown key"):
            create_validator({"type": "number", "regexp": "x"})

    def test_hint_outside_variant_is_rejected(self):
        with pytest.raises(TemplateError, match="Unknown key"):
            create_validator({"type": "string", "hint": _noop})

    def test_hint_must_be_callable(self):
        with pytest.raises(TemplateError, match=r"variants\.0\.hint"):
            create_validator({"type": "variant", "variants": [{"type": "string", "hint": True}]})

    def test_error_names_nested_path(self):
        template = {
            "type": "object",
            "fields": {"items": {"type": "array", "element": {"type": "number", "max_value": "ten"}}},
        }

        with pytest.raises(TemplateError, match=r"fields\.items\.element\.max_value"):
            create_validator(template)

    def test_non_mapping_template(self):
        with pytest.raises(TemplateError):
            create_validator("string")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            create_validator({"type": "nope"})
