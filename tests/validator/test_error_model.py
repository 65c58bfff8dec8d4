# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Structured error shape and the MISSING sentinel."""

from __future__ import annotations

import copy
import pickle

from iamvalidator import MISSING, ErrorCode, HookError, IamValidatorError, ValidationError


def test_error_code_is_a_string():
    assert ErrorCode.TYPE_MISMATCH == "TYPE_MISMATCH"
    assert str(ErrorCode.CUSTOM_ERROR) == "CUSTOM_ERROR"


def test_message_names_code_path_and_info():
    error = ValidationError(ErrorCode.INVALID_NUMBER, ["items", 0, "price"], -1, {"expected_min_value": 0})

    assert str(error) == "INVALID_NUMBER at items.0.price (expected_min_value=0)"


def test_root_path_message():
    assert str(ValidationError(ErrorCode.UNALLOWED_NULL, [], None)) == "UNALLOWED_NULL at <root>"


def test_to_dict_includes_data_when_present():
    error = ValidationError(ErrorCode.TYPE_MISMATCH, ("a",), 1, {"expected_type": "string"})

    assert error.to_dict() == {
        "code": "TYPE_MISMATCH",
        "path": ["a"],
        "data": 1,
        "info": {"expected_type": "string"},
    }


def test_to_dict_omits_absent_data():
    error = ValidationError(ErrorCode.MISSING_FIELD, ["a"])

    assert error.data is MISSING
    assert "data" not in error.to_dict()


def test_errors_share_a_base_class():
    assert issubclass(ValidationError, IamValidatorError)
    assert issubclass(HookError, IamValidatorError)


def test_missing_sentinel():
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert copy.deepcopy(MISSING) is MISSING
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING


def test_hook_error_message_defaults_to_code():
    assert str(HookError()) == "CUSTOM_ERROR"
    assert str(HookError("TOO_LONG")) == "TOO_LONG"
    assert str(HookError("TOO_LONG", message="name is too long")) == "name is too long"
