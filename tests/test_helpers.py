"""Tests for pure helpers"""

import pytest

from components import _helpers


class TestEnsureTrailingDot:
    def test_adds_dot_when_missing(self):
        assert _helpers.ensure_trailing_dot("example.com") == "example.com."

    def test_leaves_dot_when_present(self):
        assert _helpers.ensure_trailing_dot("example.com.") == "example.com."


class TestFqdn:
    def test_builds_ws_subdomain(self):
        assert _helpers.fqdn("example.com", "ws") == "ws.example.com."

    def test_domain_with_trailing_dot(self):
        assert _helpers.fqdn("example.com.", "api") == "api.example.com."

    def test_does_not_repeat_prefix(self):
        assert _helpers.fqdn("ws.example.com", "ws") == "ws.example.com."


class TestSubdomain:
    def test_has_no_trailing_dot(self):
        assert _helpers.subdomain("example.com", "ws") == "ws.example.com"

    def test_strips_dot_of_fqdn_domain(self):
        assert _helpers.subdomain("example.com.", "api") == "api.example.com"


class TestCnameRrdata:
    def test_adds_trailing_dot(self):
        assert _helpers.cname_rrdata("d-abc.execute-api.eu-central-1.amazonaws.com") == [
            "d-abc.execute-api.eu-central-1.amazonaws.com."
        ]

    def test_leaves_dot_unchanged(self):
        assert _helpers.cname_rrdata("cdn.example.com.") == ["cdn.example.com."]


class TestWebhookEndpoint:
    @pytest.mark.parametrize(
        "stage_url",
        [
            "https://abc123.execute-api.eu-central-1.amazonaws.com/prod",
            "https://api.example.com",
            "https://api.example.com/",
            "",
        ],
    )
    def test_is_stage_url_followed_by_route(self, stage_url):
        assert _helpers.webhook_endpoint(stage_url, "/tg") == stage_url + "/tg"


class TestExecutionEndpoint:
    def test_switches_wss_to_https(self):
        assert (
            _helpers.execution_endpoint("wss://abc.execute-api.eu-central-1.amazonaws.com", "prod")
            == "https://abc.execute-api.eu-central-1.amazonaws.com/prod"
        )

    def test_keeps_https(self):
        assert _helpers.execution_endpoint("https://abc.example.com/", "prod") == (
            "https://abc.example.com/prod"
        )


class TestEnvironmentFingerprint:
    ENV = {"A": "1", "B": "2", "C": "3"}

    def test_is_deterministic(self):
        assert _helpers.environment_fingerprint(dict(self.ENV)) == (
            _helpers.environment_fingerprint(dict(self.ENV))
        )

    @pytest.mark.parametrize("key", ["A", "B", "C"])
    def test_changes_when_one_value_changes(self, key):
        changed = {**self.ENV, key: "changed"}
        assert _helpers.environment_fingerprint(changed) != (
            _helpers.environment_fingerprint(self.ENV)
        )

    def test_depends_on_key_order(self):
        reordered = {"C": "3", "B": "2", "A": "1"}
        assert _helpers.environment_fingerprint(reordered) != (
            _helpers.environment_fingerprint(self.ENV)
        )

    def test_is_sha256_hex(self):
        digest = _helpers.environment_fingerprint(self.ENV)
        assert len(digest) == 64
        int(digest, 16)


class TestPolicyNameFromArn:
    def test_takes_last_segment(self):
        arn = "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
        assert _helpers.policy_name_from_arn(arn) == "AWSLambdaBasicExecutionRole"
