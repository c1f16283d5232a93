"""Rate limiter counting, window reset and failure policy tests."""

from __future__ import annotations

import time
import unittest
from concurrent.futures import ThreadPoolExecutor

from signage.adapters.auth import MockCredentialVerifier
from signage.adapters.rate_limit import RateLimitBackendError, RateLimitDecision, RateLimiter
from signage.core.config import Settings
from signage.pipeline import AuthModule, Endpoint, PipelineServices, RateLimitModule, RequestDescriptor
from signage.repositories.memory import InMemoryStore


class _UnavailableRateLimiter(RateLimiter):
    def hit(self, rate, *identifiers: str) -> RateLimitDecision:
        raise RateLimitBackendError("Rate limit storage unavailable")


def _services(rate_limiter: RateLimiter, **settings_overrides: object) -> PipelineServices:
    return PipelineServices(
        settings=Settings(**settings_overrides),
        verifier=MockCredentialVerifier(),
        rate_limiter=rate_limiter,
        store=InMemoryStore(),
    )


def _request(token: str | None = "test:user-1:editor", *, path: str = "/api/endpoint/limited", client_host: str = "10.0.0.1") -> RequestDescriptor:
    return RequestDescriptor(
        method="GET",
        path=path,
        headers={"auth-token": token} if token else {},
        client_host=client_host,
    )


class RateLimiterUnitTests(unittest.TestCase):
    def test_request_after_budget_is_rejected(self) -> None:
        limiter = RateLimiter()

        decisions = [limiter.hit("3/minute", "/route", "user:a") for _ in range(4)]

        self.assertEqual([d.allowed for d in decisions], [True, True, True, False])
        self.assertEqual(decisions[0].remaining, 2)
        self.assertEqual(decisions[0].limit, 3)

    def test_counters_are_scoped_per_route_and_caller(self) -> None:
        limiter = RateLimiter()

        self.assertTrue(limiter.hit("1/minute", "/route-a", "user:a").allowed)
        self.assertFalse(limiter.hit("1/minute", "/route-a", "user:a").allowed)
        self.assertTrue(limiter.hit("1/minute", "/route-b", "user:a").allowed)
        self.assertTrue(limiter.hit("1/minute", "/route-a", "user:b").allowed)

    def test_counter_resets_after_window(self) -> None:
        limiter = RateLimiter()

        self.assertTrue(limiter.hit("2/second", "/route", "user:a").allowed)
        self.assertTrue(limiter.hit("2/second", "/route", "user:a").allowed)
        self.assertFalse(limiter.hit("2/second", "/route", "user:a").allowed)

        time.sleep(1.2)

        self.assertTrue(limiter.hit("2/second", "/route", "user:a").allowed)

    def test_concurrent_hits_are_counted_exactly(self) -> None:
        limiter = RateLimiter()

        with ThreadPoolExecutor(max_workers=16) as pool:
            decisions = list(pool.map(lambda _: limiter.hit("10/minute", "/route", "user:a"), range(64)))

        self.assertEqual(sum(1 for d in decisions if d.allowed), 10)

    def test_busy_key_does_not_block_unrelated_keys(self) -> None:
        limiter = RateLimiter()
        item = limiter.parse_rate("5/minute")
        busy_lock = limiter._lock_for(item.key_for("/route", "user:a"))
        other = next(
            f"user:{i}"
            for i in range(1000)
            if limiter._lock_for(item.key_for("/route", f"user:{i}")) is not busy_lock
        )

        with ThreadPoolExecutor(max_workers=2) as pool:
            with busy_lock:
                blocked = pool.submit(limiter.hit, item, "/route", "user:a")
                unrelated = pool.submit(limiter.hit, item, "/route", other)

                self.assertTrue(unrelated.result(timeout=2).allowed)
                time.sleep(0.1)
                self.assertFalse(blocked.done())

            self.assertTrue(blocked.result(timeout=2).allowed)

    def test_reset_clears_all_counters(self) -> None:
        limiter = RateLimiter()
        limiter.hit("1/minute", "/route", "user:a")

        limiter.reset()

        self.assertTrue(limiter.hit("1/minute", "/route", "user:a").allowed)


class RateLimitModuleTests(unittest.TestCase):
    def test_n_plus_one_request_gets_429_with_retry_after(self) -> None:
        endpoint = Endpoint("GET", [AuthModule(), RateLimitModule("2/minute")], lambda context: {"ok": True})
        services = _services(RateLimiter())

        self.assertTrue(endpoint.run(_request(), services).ok)
        self.assertTrue(endpoint.run(_request(), services).ok)
        rejected = endpoint.run(_request(), services)

        self.assertEqual(rejected.error.status_code, 429)
        self.assertEqual(rejected.error.payload.code, "RATE_LIMITED")
        retry_after = int(rejected.error.headers["Retry-After"])
        self.assertGreaterEqual(retry_after, 1)
        self.assertLessEqual(retry_after, 60)

    def test_default_rate_comes_from_settings(self) -> None:
        endpoint = Endpoint("GET", [AuthModule(), RateLimitModule()], lambda context: {"ok": True})
        services = _services(RateLimiter(), rate_limit="1/minute")

        self.assertTrue(endpoint.run(_request(), services).ok)
        self.assertEqual(endpoint.run(_request(), services).error.status_code, 429)

    def test_principals_have_independent_budgets(self) -> None:
        endpoint = Endpoint("GET", [AuthModule(), RateLimitModule("1/minute")], lambda context: {"ok": True})
        services = _services(RateLimiter())

        self.assertTrue(endpoint.run(_request("test:user-1:editor"), services).ok)
        self.assertTrue(endpoint.run(_request("test:user-2:editor"), services).ok)
        self.assertEqual(endpoint.run(_request("test:user-1:editor"), services).error.status_code, 429)

    def test_anonymous_callers_are_keyed_by_client_host(self) -> None:
        endpoint = Endpoint("GET", [RateLimitModule("1/minute")], lambda context: {"ok": True})
        services = _services(RateLimiter())

        self.assertTrue(endpoint.run(_request(None, client_host="10.0.0.1"), services).ok)
        self.assertTrue(endpoint.run(_request(None, client_host="10.0.0.2"), services).ok)
        self.assertEqual(endpoint.run(_request(None, client_host="10.0.0.1"), services).error.status_code, 429)

    def test_backend_failure_fails_closed_by_default(self) -> None:
        endpoint = Endpoint("GET", [AuthModule(), RateLimitModule()], lambda context: {"ok": True})

        result = endpoint.run(_request(), _services(_UnavailableRateLimiter()))

        self.assertEqual(result.error.status_code, 503)
        self.assertEqual(result.error.payload.code, "SERVICE_UNAVAILABLE")

    def test_backend_failure_fails_open_when_configured(self) -> None:
        endpoint = Endpoint("GET", [AuthModule(), RateLimitModule()], lambda context: {"ok": True})

        with self.assertLogs("signage.pipeline.modules", level="WARNING"):
            result = endpoint.run(_request(), _services(_UnavailableRateLimiter(), rate_limit_fail_open=True))

        self.assertTrue(result.ok)
        self.assertEqual(result.payload, {"ok": True})
