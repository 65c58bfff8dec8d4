# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Public entry points: :func:`create_validator` and :class:`Validator`."""

from __future__ import annotations

import asyncio
import concurrent.futures as _cf
import contextvars as _ctxvars
import functools
import logging
import time
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import anyio

from .config import resolve_max_delay_nsecs
from .exceptions import TemplateError, ValidationError
from .registry import CustomType, CustomTypeRegistry
from .scheduler import DelayManager
from .telemetry import get_tracer, record_validation_metrics, template_compile_total
from .template import Template, compile_template, load_template
from .validation import DEFAULT_HANDLERS, ValidationContext, validate_value

logger = logging.getLogger(__name__)

DoneCallback = Callable[[Optional[ValidationError], Any], Any]


class Validator:
    """A compiled template ready to validate data.

    Instances are immutable and safe to share: every :meth:`validate` call
    gets its own context and delay manager.
    """

    def __init__(
        self,
        template: Template,
        raw_template: Mapping[str, Any],
        custom_types: CustomTypeRegistry,
        max_delay_nsecs: int,
    ):
        self._template = template
        self._raw_template = raw_template
        self._custom_types = custom_types
        self._max_delay_nsecs = max_delay_nsecs

    @property
    def template(self) -> Template:
        return self._template

    @property
    def raw_template(self) -> Mapping[str, Any]:
        return self._raw_template

    @property
    def custom_types(self) -> CustomTypeRegistry:
        return self._custom_types

    @property
    def max_delay_nsecs(self) -> int:
        return self._max_delay_nsecs

    async def validate(
        self,
        data: Any,
        done: Optional[DoneCallback] = None,
        *,
        context: Any = None,
        max_delay_nsecs: Optional[int] = None,
    ) -> Any:
        """Validate *data* and return the validated value.

        Args:
            data: The input to check.
            done: Optional callback. When given, it receives ``(None, result)``
                or ``(error, None)`` and the method returns ``None`` instead of
                returning or raising.
            context: Object handed to every hook; a fresh ``dict`` by default.
            max_delay_nsecs: Per-call override of the cooperative yield
                threshold.

        Raises:
            ValidationError: on the first failure, unless *done* is given.
        """

        delay_manager = DelayManager(resolve_max_delay_nsecs(max_delay_nsecs, self._max_delay_nsecs))
        ctx = ValidationContext(
            root=data,
            context={} if context is None else context,
            custom_types=self._custom_types,
            delay_manager=delay_manager,
            recurse=validate_value,
            handlers=DEFAULT_HANDLERS,
        )

        started_at = time.perf_counter()
        with get_tracer().start_as_current_span("iamvalidator.validate") as span:
            try:
                result = await validate_value(data, self._template, (), ctx)
            except ValidationError as error:
                span.set_attribute("iamvalidator.status", "error")
                span.set_attribute("iamvalidator.code", str(error.code))
                record_validation_metrics("error", started_at, str(error.code))
                logger.debug("Validation failed: %s at %s", error.code, error.dotted_path)
                if done is None:
                    raise
                done(error, None)
                return None

            span.set_attribute("iamvalidator.status", "ok")
            record_validation_metrics("ok", started_at)
            if delay_manager.yield_count:
                logger.debug("Validation yielded %d time(s)", delay_manager.yield_count)

        if done is not None:
            done(None, result)
            return None
        return result

    def validate_sync(self, data: Any, *, context: Any = None, max_delay_nsecs: Optional[int] = None) -> Any:
        """Blocking variant of :meth:`validate` for synchronous callers.

        Without a running event loop the call runs inline via ``anyio.run``.
        From inside a running loop it runs on a private loop in a worker
        thread, with the caller's contextvars copied across.
        """

        run = functools.partial(self.validate, data, context=context, max_delay_nsecs=max_delay_nsecs)

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return anyio.run(run)

        def _run_in_thread():
            return asyncio.run(run())

        _ctx = _ctxvars.copy_context()
        with _cf.ThreadPoolExecutor(max_workers=1) as _exec:
            _future = _exec.submit(lambda: _ctx.run(_run_in_thread))
            return _future.result()

    def __repr__(self) -> str:
        return f"Validator(type={self._template.type!r}, custom_types={len(self._custom_types)})"


def create_validator(
    template: Mapping[str, Any],
    *,
    custom_types: Iterable[Union[CustomType, Mapping[str, Any]]] = (),
    max_delay_nsecs: Optional[int] = None,
) -> Validator:
    """Compile *template* and return a :class:`Validator`.

    The whole template tree and every custom type descriptor are checked
    here, before any data is seen.

    Raises:
        TemplateError: on a malformed template or descriptor.
        ConfigurationError: on an invalid ``max_delay_nsecs`` (argument or
            ``IAMVALIDATOR_MAX_DELAY_NSECS``).
    """

    try:
        registry = CustomTypeRegistry(custom_types)
        compiled = compile_template(template, registry)
    except TemplateError:
        template_compile_total.add(1, {"outcome": "error"})
        raise
    template_compile_total.add(1, {"outcome": "ok"})

    return Validator(compiled, template, registry, resolve_max_delay_nsecs(max_delay_nsecs))


def create_validator_from_file(path: Union[str, Path], **options: Any) -> Validator:
    """Load a YAML/JSON template from *path* and compile it.

    Keyword options are forwarded to :func:`create_validator`.
    """

    return create_validator(load_template(path), **options)


__all__ = ["DoneCallback", "Validator", "create_validator", "create_validator_from_file"]
