# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Object templates: declared fields, missing strategies and extra fields."""

from __future__ import annotations

from collections import OrderedDict
from types import MappingProxyType

import pytest

from iamvalidator import ErrorCode, ValidationError, create_validator


def _person(**overrides):
    template = {
        "type": "object",
        "fields": {
            "name": {"type": "string"},
            "age": {"type": "number", "min_value": 0},
        },
    }
    template.update(overrides)
    return template


@pytest.mark.anyio
async def test_valid_object_returns_new_dict():
    data = {"name": "Ada", "age": 36}

    result = await create_validator(_person()).validate(data)

    assert result == data
    assert result is not data


@pytest.mark.anyio
async def test_field_error_carries_field_path():
    template = {"type": "object", "fields": {"n": {"type": "number", "min_value": 10}}}

    with pytest.raises(ValidationError) as exc_info:
        await create_validator(template).validate({"n": 5})

    assert exc_info.value == ValidationError(ErrorCode.INVALID_NUMBER, ["n"], 5, {"expected_min_value": 10})


@pytest.mark.anyio
async def test_nested_path():
    template = {
        "type": "object",
        "fields": {"owner": _person()},
    }

    with pytest.raises(ValidationError) as exc_info:
        await create_validator(template).validate({"owner": {"name": "Ada", "age": "old"}})

    assert exc_info.value.path == ["owner", "age"]
    assert exc_info.value.dotted_path == "owner.age"


@pytest.mark.anyio
async def test_non_mapping_rejected():
    with pytest.raises(ValidationError) as exc_info:
        await create_validator(_person()).validate(["Ada", 36])

    assert exc_info.value.code is ErrorCode.TYPE_MISMATCH
    assert exc_info.value.info == {"expected_type": "object"}


@pytest.mark.anyio
async def test_any_mapping_is_accepted():
    data = MappingProxyType({"name": "Ada", "age": 36})

    assert await create_validator(_person()).validate(data) == {"name": "Ada", "age": 36}


# ------------------------------------------------------------------
# missing strategies
# ------------------------------------------------------------------


@pytest.mark.anyio
async def test_missing_field_error_omits_data():
    with pytest.raises(ValidationError) as exc_info:
        await create_validator(_person()).validate({"name": "Ada"})

    error = exc_info.value
    assert error.code is ErrorCode.MISSING_FIELD
    assert error.path == ["age"]
    assert error.has_data is False
    assert error.to_dict() == {"code": "MISSING_FIELD", "path": ["age"], "info": {}}


@pytest.mark.anyio
async def test_missing_field_ignored_is_left_out():
    template = {
        "type": "object",
        "fields": {"nickname": {"type": "string", "missing_strategy": "ignore"}},
    }

    assert await create_validator(template).validate({}) == {}


@pytest.mark.anyio
async def test_missing_field_default_is_used_verbatim():
    """The default value is returned as is, without running the field's checks."""
    template = {
        "type": "object",
        "fields": {
            "tags": {
                "type": "array",
                "element": {"type": "string"},
                "min_length": 1,
                "missing_strategy": "default",
                "default_value": [],
            },
            "note": {"type": "string", "missing_strategy": "default", "default_value": None},
        },
    }

    assert await create_validator(template).validate({}) == {"tags": [], "note": None}


@pytest.mark.anyio
async def test_explicit_none_is_not_missing():
    template = {
        "type": "object",
        "fields": {"note": {"type": "string", "missing_strategy": "ignore"}},
    }

    with pytest.raises(ValidationError) as exc_info:
        await create_validator(template).validate({"note": None})

    assert exc_info.value.code is ErrorCode.UNALLOWED_NULL


# ------------------------------------------------------------------
# extra fields
# ------------------------------------------------------------------


@pytest.mark.anyio
async def test_extra_fields_rejected_by_default():
    data = {"name": "Ada", "age": 36, "email": "ada@example.com", "role": "admin"}

    with pytest.raises(ValidationError) as exc_info:
        await create_validator(_person()).validate(data)

    error = exc_info.value
    assert error.code is ErrorCode.EXTRA_FIELDS
    assert error.path == []
    assert error.data == data
    assert error.info == {"field_names": ["email", "role"]}


@pytest.mark.anyio
async def test_extra_fields_checked_before_declared_fields():
    with pytest.raises(ValidationError) as exc_info:
        await create_validator(_person()).validate({"name": 1, "extra": True})

    assert exc_info.value.code is ErrorCode.EXTRA_FIELDS


@pytest.mark.anyio
async def test_extra_fields_excluded():
    validator = create_validator(_person(extra_strategy="exclude"))

    assert await validator.validate({"name": "Ada", "age": 36, "email": "x"}) == {"name": "Ada", "age": 36}


@pytest.mark.anyio
async def test_extra_fields_included_first_and_unvalidated():
    validator = create_validator(_person(extra_strategy="include"))

    result = await validator.validate(OrderedDict([("age", 36), ("email", object), ("name", "Ada")]))

    assert list(result) == ["email", "name", "age"]
    assert result["email"] is object


@pytest.mark.anyio
async def test_fields_validated_in_declaration_order():
    seen = []

    def record(name):
        return lambda value, options: seen.append(name)

    template = {
        "type": "object",
        "fields": {
            "b": {"type": "string", "validate_before": record("b")},
            "a": {"type": "string", "validate_before": record("a")},
        },
    }

    await create_validator(template).validate({"a": "x", "b": "y"})

    assert seen == ["b", "a"]


@pytest.mark.anyio
async def test_first_failing_field_aborts():
    seen = []
    template = {
        "type": "object",
        "fields": {
            "first": {"type": "number"},
            "second": {"type": "string", "validate_before": lambda value, options: seen.append(value)},
        },
    }

    with pytest.raises(ValidationError) as exc_info:
        await create_validator(template).validate({"first": "nope", "second": "ok"})

    assert exc_info.value.path == ["first"]
    assert seen == []
