"""Tests for ``stackorigin.stack.capturing`` — callsites(), frame dropping, hook restoration."""

from __future__ import annotations

import asyncio
import importlib

import pytest
from structlog.testing import capture_logs

import stackorigin.stack as stack_package
from stackorigin.core.errors import MissingStackError, UnsupportedPlatformError
from stackorigin.stack import capturing as capture_module
from stackorigin.stack import hooks
from stackorigin.stack.capturing import callsites, capture
from stackorigin.stack.hooks import StackCarrier
from stackorigin.stack.models import FrameDescriptor

EXPECTED_KEYS = {
    "receiver",
    "type_name",
    "function",
    "function_name",
    "method_name",
    "file_name",
    "line_number",
    "column_number",
    "eval_origin",
    "is_toplevel",
    "is_eval",
    "is_native",
    "is_constructor",
    "is_async",
    "is_promise_all",
    "promise_index",
}


def _raise_value_error():
    raise ValueError("boom")


def _module_level_site():
    return callsites()[0]


# ---------------------------------------------------------------------------
# Called without an error
# ---------------------------------------------------------------------------


class TestCallsitesWithoutError:
    def test_returns_non_empty_list(self):
        result = callsites()

        assert isinstance(result, list)
        assert len(result) > 0

    def test_every_member_is_a_descriptor_with_all_keys(self):
        for site in callsites():
            assert isinstance(site, FrameDescriptor)
            assert set(site.to_dict()) == EXPECTED_KEYS

    def test_excludes_the_capture_frame(self):
        result = callsites()

        assert capture_module.__file__.endswith("capturing.py")
        assert not any(
            site.function_name == "callsites" and site.file_name == capture_module.__file__
            for site in result
        )

    def test_first_frame_is_the_caller(self):
        site = callsites()[0]

        assert site.function_name == "test_first_frame_is_the_caller"
        assert site.file_name == __file__

    def test_capture_is_an_alias(self):
        assert capture is callsites

    def test_respects_stack_trace_limit(self):
        hooks.stack_trace_limit = 3

        # the capture frame counts against the limit before it is dropped
        assert len(callsites()) == 2


# ---------------------------------------------------------------------------
# Called with an error
# ---------------------------------------------------------------------------


class TestCallsitesWithError:
    def test_raised_error_starts_at_raise_site(self):
        try:
            _raise_value_error()
        except ValueError as exc:
            result = callsites(exc)

        assert result[0].function_name == "_raise_value_error"
        assert result[1].function_name == "test_raised_error_starts_at_raise_site"

    def test_raised_error_keeps_every_frame(self):
        try:
            _raise_value_error()
        except ValueError as exc:
            raw = hooks.raw_callsites(exc)
            result = callsites(exc)

        assert len(result) == len(raw)
        assert all(set(site.to_dict()) == EXPECTED_KEYS for site in result)

    def test_stack_carrier_is_not_trimmed(self):
        error = StackCarrier()
        result = callsites(error)

        assert result[0].function_name == "test_stack_carrier_is_not_trimmed"
        assert len(result) == len(error.callsites)

    def test_carrier_subclass_keeps_every_frame(self):
        class TaggedCarrier(StackCarrier):
            pass

        error = TaggedCarrier()
        result = callsites(error)

        assert result[0].function_name == "test_carrier_subclass_keeps_every_frame"
        assert len(result) == len(error.callsites)

    def test_marker_is_not_public(self):
        assert not hasattr(stack_package, "StackOnlyError")
        assert "StackOnlyError" not in capture_module.__all__

    def test_unraised_error_without_stack_fails(self):
        with pytest.raises(MissingStackError) as info:
            callsites(ValueError("never raised"))

        assert info.value.context["error_type"] == "ValueError"


# ---------------------------------------------------------------------------
# Hook restoration
# ---------------------------------------------------------------------------


class TestHookRestoration:
    def test_hook_restored_after_success(self, default_hook):
        callsites()

        assert hooks.get_prepare_stack_trace() is default_hook

    def test_custom_hook_restored(self):
        def custom(error, sites):
            return "custom"

        hooks.set_prepare_stack_trace(custom)
        result = callsites()

        assert isinstance(result, list)
        assert hooks.get_prepare_stack_trace() is custom

    def test_hook_overridden_during_capture(self, monkeypatch, default_hook):
        seen = []
        real_parse = capture_module.parse_callsite

        def spy(site):
            seen.append(hooks.get_prepare_stack_trace())
            return real_parse(site)

        monkeypatch.setattr(capture_module, "parse_callsite", spy)
        callsites()

        assert seen
        assert all(hook is not default_hook for hook in seen)

    def test_hook_restored_when_parsing_fails(self, monkeypatch, default_hook):
        def broken(site):
            raise RuntimeError("parse failure")

        monkeypatch.setattr(capture_module, "parse_callsite", broken)

        with pytest.raises(RuntimeError, match="parse failure"):
            callsites()

        assert hooks.get_prepare_stack_trace() is default_hook

    def test_hook_restored_when_error_has_no_stack(self, default_hook):
        with pytest.raises(MissingStackError):
            callsites(KeyError("x"))

        assert hooks.get_prepare_stack_trace() is default_hook

    def test_capture_module_is_reachable_for_patching(self):
        module = importlib.import_module("stackorigin.stack.capturing")

        assert module is capture_module
        assert callable(module.parse_callsite)

    def test_falsy_hook_survives_capture(self):
        class FalsyHook:
            def __call__(self, error, sites):
                return "falsy"

            def __bool__(self):
                return False

        hook = FalsyHook()
        hooks.set_prepare_stack_trace(hook)
        callsites()

        assert hooks.get_prepare_stack_trace() is hook

    def test_hook_restored_when_limit_is_invalid(self, default_hook):
        try:
            _raise_value_error()
        except ValueError as exc:
            error = exc
        hooks.stack_trace_limit = 0

        with pytest.raises(ValueError, match="at least 1"):
            callsites(error)

        assert hooks.get_prepare_stack_trace() is default_hook

    def test_temporary_override_is_not_logged(self):
        with capture_logs() as logs:
            callsites()

        assert not [entry for entry in logs if entry["event"] == "prepare_stack_trace_installed"]

    def test_unsupported_platform(self, monkeypatch, default_hook):
        monkeypatch.setattr(hooks.inspect, "currentframe", lambda: None)

        with pytest.raises(UnsupportedPlatformError):
            callsites()

        assert hooks.get_prepare_stack_trace() is default_hook


# ---------------------------------------------------------------------------
# Determinism and frame kinds
# ---------------------------------------------------------------------------


class Widget:
    def __init__(self):
        self.site = callsites()[0]

    def locate(self):
        return callsites()[0]

    @classmethod
    def build_site(cls):
        return callsites()[0]


class TestFrameKinds:
    def test_same_call_site_is_structurally_equal(self):
        first, second = Widget().locate(), Widget().locate()

        assert first.file_name == second.file_name
        assert first.line_number == second.line_number
        assert first.column_number == second.column_number
        assert first.function_name == second.function_name == "locate"
        assert first.receiver is not second.receiver

    def test_method_frame(self):
        widget = Widget()
        site = widget.locate()

        assert site.receiver is widget
        assert site.type_name == "Widget"
        assert site.method_name == "locate"
        assert site.function is Widget.locate
        assert site.is_toplevel is False
        assert site.is_constructor is False

    def test_constructor_frame(self):
        widget = Widget()
        site = widget.site

        assert site.is_constructor is True
        assert site.receiver is widget
        assert site.method_name == "__init__"

    def test_classmethod_frame(self):
        site = Widget.build_site()

        assert site.receiver is Widget
        assert site.type_name == "Widget"
        assert site.method_name == "build_site"
        assert site.function is Widget.build_site.__func__

    def test_module_level_function(self):
        site = _module_level_site()

        assert site.receiver is None
        assert site.type_name is None
        assert site.is_toplevel is True
        assert site.method_name is None
        assert site.function is _module_level_site

    def test_async_frame(self):
        async def locate_async():
            return callsites()[0]

        site = asyncio.run(locate_async())

        assert site.function_name == "locate_async"
        assert site.is_async is True
        assert site.is_promise_all is False
        assert site.promise_index is None

    def test_eval_frame(self):
        namespace = {"callsites": callsites}
        exec("site = callsites()[0]", namespace)
        site = namespace["site"]

        assert site.is_eval is True
        assert site.is_native is False
        assert site.file_name == "<string>"
        assert site.function_name is None
        assert site.eval_origin.startswith("test_eval_frame (")
        assert __file__ in site.eval_origin

    def test_frozen_frame_is_native(self):
        namespace = {"callsites": callsites}
        exec(compile("site = callsites()[0]", "<frozen fake_module>", "exec"), namespace)
        site = namespace["site"]

        assert site.is_native is True
        assert site.is_eval is False
        assert site.eval_origin is None

    def test_regular_frame_flags(self):
        site = callsites()[0]

        assert site.is_eval is False
        assert site.is_native is False
        assert site.is_async is False
        assert site.eval_origin is None
        assert site.line_number > 0
        assert site.column_number > 0


@pytest.mark.integration
class TestConcurrentCapture:
    def test_threads_never_observe_the_override(self, default_hook):
        from concurrent.futures import ThreadPoolExecutor

        def render():
            try:
                _raise_value_error()
            except ValueError as exc:
                return hooks.error_stack(exc)

        def work(index):
            if index % 2:
                return [site.function_name for site in callsites()]
            return render()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(200)))

        # every rendered stack went through the default hook, never the raw one
        assert all(isinstance(r, str) for r in results[::2])
        assert all(isinstance(r, list) for r in results[1::2])
        assert hooks.get_prepare_stack_trace() is default_hook
