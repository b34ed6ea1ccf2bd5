"""Tests for login throttle identity keys."""

from __future__ import annotations

from starlette.datastructures import Headers

from docs_admin.client_identity import extract_client_ip, identity_key


class TestExtractClientIp:
    def test_first_forwarded_hop_wins(self):
        headers = Headers({"x-forwarded-for": "203.0.113.5, 10.0.0.1", "x-real-ip": "198.51.100.7"})
        assert extract_client_ip(headers) == "203.0.113.5"

    def test_falls_back_to_real_ip(self):
        headers = Headers({"x-real-ip": " 198.51.100.7 ", "cf-connecting-ip": "192.0.2.9"})
        assert extract_client_ip(headers) == "198.51.100.7"

    def test_falls_back_to_cf_connecting_ip(self):
        headers = Headers({"cf-connecting-ip": "192.0.2.9"})
        assert extract_client_ip(headers) == "192.0.2.9"

    def test_blank_forwarded_for_is_skipped(self):
        headers = Headers({"x-forwarded-for": " , 10.0.0.1", "x-real-ip": "198.51.100.7"})
        assert extract_client_ip(headers) == "198.51.100.7"

    def test_unknown_without_headers(self):
        assert extract_client_ip(Headers({})) == "unknown"

    def test_header_names_are_case_insensitive(self):
        headers = Headers({"X-Forwarded-For": "203.0.113.5"})
        assert extract_client_ip(headers) == "203.0.113.5"


class TestIdentityKey:
    def test_forwarded_for_scenario(self):
        headers = Headers({"x-forwarded-for": "203.0.113.5, 10.0.0.1"})
        key = identity_key(headers)
        assert key.startswith("203.0.113.5|")
        assert key == "203.0.113.5|unknown"

    def test_includes_user_agent(self):
        headers = Headers({"x-real-ip": "198.51.100.7", "user-agent": "Mozilla/5.0"})
        assert identity_key(headers) == "198.51.100.7|Mozilla/5.0"

    def test_truncates_user_agent(self):
        headers = Headers({"user-agent": "x" * 500})
        ip, user_agent = identity_key(headers).split("|", 1)
        assert ip == "unknown"
        assert user_agent == "x" * 120

    def test_deterministic(self):
        raw = {"x-forwarded-for": "203.0.113.5", "user-agent": "curl/8.0"}
        assert identity_key(Headers(raw)) == identity_key(Headers(raw))

    def test_plain_mapping(self):
        assert identity_key({"x-real-ip": "192.0.2.1"}) == "192.0.2.1|unknown"
