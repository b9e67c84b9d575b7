"""Tests for the built-in check plugins."""

import asyncio

import httpx
import pytest

from vibetest.checks import default_checks
from vibetest.checks.cookies import CookieSecurityCheck
from vibetest.checks.cors_credentials import CorsCredentialsCheck
from vibetest.checks.error_handling import ErrorHandlingCheck
from vibetest.checks.race_condition import RaceConditionCheck
from vibetest.checks.security_headers import SecurityHeadersCheck
from vibetest.checks.unsafe_methods import UnsafeMethodsCheck, candidate_routes
from vibetest.core.models import Route

from conftest import FakeClient, make_response


class TestRegistry:
    def test_default_order(self):
        assert [check.id for check in default_checks()] == [
            "cors-credentials",
            "unsafe-methods",
            "security-headers",
            "cookie-security",
            "race-condition",
            "error-handling",
        ]


class TestSecurityHeaders:
    """Test header hardening detection."""

    async def test_missing_headers_and_leak(self, make_context):
        frontend = FakeClient({"/": make_response(200, "home", headers={"X-Powered-By": "Express"})})
        findings = await SecurityHeadersCheck().run(make_context(frontend=frontend))

        risks = {finding.id: finding.risk for finding in findings}
        assert risks == {
            "header-powered-by": "low",
            "missing-content-security-policy": "medium",
            "missing-x-content-type-options": "low",
            "missing-x-frame-options": "low",
        }
        assert all(finding.check_id == "security-headers" for finding in findings)

    async def test_hardened_response(self, make_context):
        headers = {
            "Content-Security-Policy": "default-src 'self'",
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
        }
        frontend = FakeClient({"/": make_response(200, "home", headers=headers)})

        assert await SecurityHeadersCheck().run(make_context(frontend=frontend)) == []

    async def test_unreachable_page(self, make_context):
        frontend = FakeClient({"/": httpx.ReadTimeout("timed out")})
        assert await SecurityHeadersCheck().run(make_context(frontend=frontend)) == []


class TestCookieSecurity:
    """Test Set-Cookie flag inspection."""

    async def test_flags_reported_once_per_cookie(self, make_context):
        cookies = ["session=abc; Path=/", "theme=dark; HttpOnly; Secure; SameSite=Lax"]
        frontend = FakeClient(default=make_response(200, set_cookies=cookies))
        routes = [Route("/"), Route("/login")]

        findings = await CookieSecurityCheck().run(make_context(routes, frontend=frontend))

        assert sorted(finding.id for finding in findings) == [
            "cookie-httponly-session",
            "cookie-samesite-session",
            "cookie-secure-session",
        ]
        assert all(finding.endpoint == "/" for finding in findings)
        assert {method for method, _ in frontend.requested} == {"HEAD"}


class TestCorsCredentials:
    """Test credentialed CORS misconfiguration detection."""

    async def test_reflected_origin_with_credentials(self, make_context):
        def reflect(method, path, body, headers, params):
            return make_response(
                200,
                headers={
                    "Access-Control-Allow-Origin": headers["Origin"],
                    "Access-Control-Allow-Credentials": "true",
                },
                path=path,
            )

        api = FakeClient(default=reflect, base_url="http://localhost:8000")
        context = make_context([Route("/api/data")], api=api)

        findings = await CorsCredentialsCheck().run(context)
        ids = {finding.id for finding in findings}

        assert "cors-reflected-creds-/api/data-httpsevilcom" in ids
        assert {finding.risk for finding in findings} == {"high", "medium"}
        assert all(path == "/api/data" for _, path in api.requested)
        assert context.frontend_client.calls == []

    async def test_wildcard_with_credentials_is_critical(self, make_context):
        frontend = FakeClient(
            default=make_response(
                200,
                headers={
                    "Access-Control-Allow-Origin": "*",
                    "Access-Control-Allow-Credentials": "true",
                },
            )
        )
        findings = await CorsCredentialsCheck().run(make_context([Route("/")], frontend=frontend))

        assert "critical" in {finding.risk for finding in findings}

    async def test_no_credentials_no_findings(self, make_context):
        frontend = FakeClient(
            default=make_response(200, headers={"Access-Control-Allow-Origin": "*"})
        )
        assert await CorsCredentialsCheck().run(make_context([Route("/")], frontend=frontend)) == []

    async def test_preflight_for_state_changing_routes(self, make_context):
        def preflight(method, path, body, headers, params):
            if method != "OPTIONS":
                return make_response(200, path=path)
            return make_response(
                204,
                headers={
                    "Access-Control-Allow-Origin": "https://evil.com",
                    "Access-Control-Allow-Credentials": "true",
                },
                path=path,
            )

        frontend = FakeClient(default=preflight)
        findings = await CorsCredentialsCheck().run(
            make_context([Route("/submit", method="POST")], frontend=frontend)
        )

        assert [finding.id for finding in findings] == ["cors-preflight-creds-/submit"]
        assert findings[0].endpoint == "OPTIONS /submit"


class TestUnsafeMethods:
    """Test anonymous state-changing request detection."""

    def test_candidate_routes(self):
        routes = (
            Route("/api/users"),
            Route("/api/users/1"),
            Route("/login", method="POST"),
            Route("/api/items", method="PUT"),
            Route("/about"),
        )
        candidates = {(route.method, route.path) for route in candidate_routes(routes)}

        assert candidates == {
            ("POST", "/api/users"),
            ("POST", "/api/users/1"),
            ("DELETE", "/api/users/1"),
            ("PUT", "/api/items"),
        }

    async def test_accepted_and_crashing_requests(self, make_context):
        api = FakeClient(
            {
                ("POST", "/api/users"): make_response(201, path="/api/users"),
                ("PUT", "/api/items"): make_response(500, path="/api/items"),
                ("POST", "/api/users/1"): make_response(401, path="/api/users/1"),
            }
        )
        routes = [Route("/api/users"), Route("/api/users/1"), Route("/api/items", method="PUT")]

        findings = await UnsafeMethodsCheck().run(make_context(routes, api=api))

        assert {(finding.endpoint, finding.risk) for finding in findings} == {
            ("POST /api/users", "high"),
            ("PUT /api/items", "medium"),
        }
        assert ("DELETE", "/api/users/1") not in api.requested

    async def test_delete_probed_in_unsafe_mode(self, make_context):
        api = FakeClient({("DELETE", "/api/users/1"): make_response(204, path="/api/users/1")})
        findings = await UnsafeMethodsCheck().run(
            make_context([Route("/api/users/1")], api=api, safe_mode=False)
        )

        assert [finding.endpoint for finding in findings] == ["DELETE /api/users/1"]


class TestRaceCondition:
    """Test parallel one-time action probing."""

    async def test_skipped_in_safe_mode(self, make_context):
        api = FakeClient(default=make_response(200))
        routes = [Route("/api/coupon/redeem", method="POST")]

        assert await RaceConditionCheck().run(make_context(routes, api=api)) == []
        assert api.calls == []

    async def test_multiple_successes(self, make_context):
        api = FakeClient(default=make_response(200, path="/api/coupon/redeem"))
        routes = [Route("/api/coupon/redeem", method="POST"), Route("/api/users", method="POST")]

        findings = await RaceConditionCheck().run(make_context(routes, api=api, safe_mode=False))

        assert len(api.calls) == 10
        assert [finding.id for finding in findings] == ["race-condition-/api/coupon/redeem"]
        assert "10 succeeded" in findings[0].description

    async def test_failed_request_waits_for_whole_burst(self, make_context):
        """A transport error in one request neither abandons nor hides the others."""
        finished = []

        class FlakyClient(FakeClient):
            async def request(self, method, path, body=None, headers=None, params=None):
                self.calls.append((method, path, body, headers, params))
                if len(self.calls) == 1:
                    raise httpx.ConnectError("connection reset")
                await asyncio.sleep(0.01)
                finished.append(path)
                return make_response(200, path=path)

        api = FlakyClient()
        findings = await RaceConditionCheck().run(
            make_context([Route("/api/gift/claim", method="POST")], api=api, safe_mode=False)
        )

        assert len(finished) == 9
        assert "9 succeeded" in findings[0].description

    async def test_unexpected_error_reaches_scheduler(self, make_context):
        api = FakeClient(default=RuntimeError("bug in client"))

        with pytest.raises(RuntimeError):
            await RaceConditionCheck(request_count=3).run(
                make_context([Route("/api/vote", method="POST")], api=api, safe_mode=False)
            )

    async def test_single_success_is_fine(self, make_context):
        served = []

        def once(method, path, body, headers, params):
            served.append(path)
            return make_response(200 if len(served) == 1 else 409, path=path)

        api = FakeClient(default=once)
        findings = await RaceConditionCheck(request_count=5).run(
            make_context([Route("/api/vote", method="PUT")], api=api, safe_mode=False)
        )

        assert findings == []
        assert len(served) == 5


class TestErrorHandling:
    """Test verbose error leakage detection."""

    async def test_stack_traces_detected_per_vector(self, make_context):
        api = FakeClient(
            {
                ("POST", "/api/users"): make_response(
                    500, "Traceback (most recent call last):\n  File app.py", path="/api/users"
                ),
                ("GET", "/api/users"): make_response(
                    400, "SyntaxError: Unexpected token at JSON.parse", path="/api/users"
                ),
            }
        )
        findings = await ErrorHandlingCheck().run(
            make_context([Route("/api/users", method="POST")], api=api)
        )

        assert [finding.name for finding in findings] == [
            "Information Leakage: Stack Trace (Python)",
            "Information Leakage: Stack Trace (Syntax)",
        ]
        post = api.calls[0]
        assert post[2] == '{ "broken": json, }'
        assert api.calls[1][4] == {"id": "NaN", "page": "-1", "sort": "INVALID"}

    async def test_clean_errors_not_reported(self, make_context):
        frontend = FakeClient(default=make_response(404, "Not Found"))
        assert await ErrorHandlingCheck().run(make_context([Route("/about")], frontend=frontend)) == []

    async def test_leak_on_success_ignored(self, make_context):
        frontend = FakeClient(default=make_response(200, "node_modules/express/lib/router.js"))
        assert await ErrorHandlingCheck().run(make_context([Route("/docs")], frontend=frontend)) == []
