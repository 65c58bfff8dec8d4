# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import asyncio
import datetime
import logging
import re

from iamvalidator import CustomType, HookError, ValidationError, create_validator

# Basic logging setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

TAKEN_USERNAMES = {"admin", "root"}


# --- Hooks and custom types ---

async def username_available(value, options):
    """Simulates an I/O lookup; hooks may be async."""
    await asyncio.sleep(0.01)
    if value in TAKEN_USERNAMES:
        raise HookError("USERNAME_TAKEN", {"username": value})


def passwords_match(value, options):
    """Cross-field check through get_data on the original input."""
    if value != options.get_data(["password"]):
        raise HookError("PASSWORD_MISMATCH")


ISO_DATE = CustomType(
    type="iso_date",
    basic_type="string",
    match=lambda value, options: re.match(r"^\d{4}-\d{2}-\d{2}$", value) is not None,
    validate=lambda value, options: datetime.date.fromisoformat(value),
)

SIGNUP = {
    "type": "object",
    "extra_strategy": "exclude",
    "fields": {
        "username": {
            "type": "string",
            "regexp": r"^[a-z][a-z0-9_]{2,15}$",
            "transform_before": lambda value, options: value.strip().lower() if isinstance(value, str) else value,
            "validate_after": username_available,
        },
        "password": {"type": "string", "min_length": 8},
        "password_confirm": {"type": "string", "validate_after": passwords_match},
        "birthday": {"type": "iso_date", "is_nullable": True, "missing_strategy": "ignore"},
        "plan": {"type": "string", "values": ["free", "pro"], "missing_strategy": "default", "default_value": "free"},
        "contact": {
            "type": "variant",
            "variants": [
                {"type": "string", "regexp": r"@", "hint": lambda value, options: isinstance(value, str)},
                {"type": "object", "fields": {"phone": {"type": "string", "min_length": 7}}},
            ],
        },
    },
}


async def main():
    validator = create_validator(SIGNUP, custom_types=[ISO_DATE])

    good = {
        "username": "  Ada_L ",
        "password": "analytical",
        "password_confirm": "analytical",
        "birthday": "1815-12-10",
        "contact": {"phone": "5550100"},
        "utm_source": "newsletter",
    }
    print("valid signup =>", await validator.validate(good))

    for label, data in [
        ("taken username", dict(good, username="root")),
        ("password mismatch", dict(good, password_confirm="different")),
        ("bad contact", dict(good, contact={"phone": "1"})),
        ("missing password", {key: value for key, value in good.items() if key != "password"}),
    ]:
        try:
            await validator.validate(data)
            print(f"  [!] {label}: expected a ValidationError")
        except ValidationError as error:
            print(f"  -> {label}: {error.to_dict()}")

    print("callback style =>")
    await validator.validate(good, lambda err, value: print("   ", err, value))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    asyncio.run(main())
