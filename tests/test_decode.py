"""Tests for the public decode / render pipeline."""

from __future__ import annotations

import dataclasses

import pytest

import plcrash
from plcrash.container import encode_container


class TestDecode:
    def test_decodes_container(self, demo_container):
        report = plcrash.decode(demo_container)
        assert isinstance(report, plcrash.CrashReport)
        assert report.application_info.identifier == "com.yourcompany.DemoCrash"
        assert len(report.threads) == 2
        assert len(report.images) == 2

    def test_modern_container(self, modern_message):
        report = plcrash.decode(encode_container(modern_message.SerializeToString()))
        assert report.has_machine_info
        assert report.has_process_info
        assert report.has_exception_info

    def test_container_errors_precede_payload_decode(self, demo_message):
        data = b"plcrash\x02" + demo_message.SerializeToString()
        with pytest.raises(plcrash.UnsupportedVersion):
            plcrash.decode(data)

    def test_garbage_payload(self):
        with pytest.raises(plcrash.DecodeError):
            plcrash.decode(b"plcrash\x01\x0a\x05ab")

    def test_empty_payload_lacks_required_sections(self):
        with pytest.raises(plcrash.DecodeError) as exc_info:
            plcrash.decode(b"plcrash\x01")
        assert exc_info.value.section == "system_info"

    def test_missing_identifier(self, demo_message):
        demo_message.application_info.ClearField("identifier")
        with pytest.raises(plcrash.DecodeError) as exc_info:
            plcrash.decode(encode_container(demo_message.SerializeToString()))
        assert exc_info.value.section == "application_info"

    def test_all_errors_share_base(self):
        for error in (plcrash.TruncatedInput, plcrash.InvalidHeader, plcrash.UnsupportedVersion, plcrash.DecodeError):
            assert issubclass(error, plcrash.CrashReportError)

    def test_report_is_immutable(self, demo_container):
        report = plcrash.decode(demo_container)
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.signal_info = None


class TestRender:
    def test_render_default_is_ios(self, demo_container):
        report = plcrash.decode(demo_container)
        assert plcrash.render(report) == plcrash.render(report, plcrash.TextFormat.IOS)
        assert plcrash.render(report).startswith("Incident Identifier: ???\n")

    def test_image_for_address(self, demo_container):
        report = plcrash.decode(demo_container)
        assert plcrash.image_for_address(report, 0x90DC5C5B) is report.images[0]
        assert plcrash.image_for_address(report, 0x0) is None
