"""
API tests for the compensation and analytics endpoints.
"""

import unittest
from unittest.mock import patch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient

from app import app


SHIFTS = [
    {"user": {"id": "P1", "summary": "Alice", "email": "alice@example.com"},
     "start": "2024-01-15T00:00:00Z", "end": "2024-01-18T23:59:59Z"},
    {"user": {"id": "P1", "summary": "Alice", "email": "alice@example.com"},
     "start": "2024-01-19T00:00:00Z", "end": "2024-01-21T23:59:59Z"},
    {"user": {"id": "P2", "summary": "Bob"},
     "start": "2024-01-22T09:00:00Z", "end": "2024-01-22T10:00:00Z"},
]


class TestHealthAndRates(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_rates(self):
        response = self.client.get("/api/rates")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            "weekday": 50.0, "weekend": 75.0, "currency": "GBP", "currency_symbol": "£",
        })


class TestCompensationEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_default_rates(self):
        response = self.client.post("/api/compensation", json={"shifts": SHIFTS})
        self.assertEqual(response.status_code, 200)
        data = response.json()

        self.assertEqual(data["total_compensation"], 425)
        self.assertEqual(data["total_compensation_display"], "£425.00")
        self.assertEqual([r["user"]["id"] for r in data["results"]], ["P1", "P2"])

        alice = data["results"][0]
        self.assertEqual(alice["weekday_days"], 4)
        self.assertEqual(alice["weekend_days"], 3)
        self.assertEqual(alice["total_compensation"], 425)
        self.assertEqual(len(alice["user"]["periods"]), 2)
        self.assertEqual(data["results"][1]["total_compensation"], 0)
        self.assertEqual(data["results"][1]["total_duration"], "01:00")

    def test_rate_override(self):
        response = self.client.post("/api/compensation",
                                    json={"shifts": SHIFTS, "weekday_rate": 100, "weekend_rate": 150})
        self.assertEqual(response.json()["total_compensation"], 850)
        self.assertEqual(response.json()["rates"]["weekday"], 100)

    def test_null_rates_use_defaults(self):
        response = self.client.post("/api/compensation",
                                    json={"shifts": SHIFTS, "weekday_rate": None, "weekend_rate": None})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["total_compensation"], 425)
        self.assertEqual(response.json()["rates"]["weekend"], 75.0)

    def test_user_timezone(self):
        # 12:00-15:00 UTC is 21:00-00:00 in Tokyo, crossing into Tuesday
        shifts = [{"user_id": "P3", "user_name": "Kenji",
                   "start": "2024-01-15T12:00:00Z", "end": "2024-01-15T15:00:00Z"}]
        utc = self.client.post("/api/compensation", json={"shifts": shifts}).json()
        tokyo = self.client.post("/api/compensation",
                                 json={"shifts": shifts, "user_timezones": {"P3": "Asia/Tokyo"}}).json()

        self.assertEqual(utc["total_compensation"], 0)
        self.assertEqual(tokyo["total_compensation"], 100)

    def test_empty_shifts(self):
        response = self.client.post("/api/compensation", json={"shifts": []})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["results"], [])
        self.assertEqual(response.json()["total_compensation"], 0)

    def test_invalid_rate(self):
        response = self.client.post("/api/compensation", json={"shifts": SHIFTS, "weekend_rate": 0})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "invalid_rate")

    def test_invalid_timezone(self):
        response = self.client.post("/api/compensation", json={"shifts": SHIFTS, "timezone": "Moon/Base"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "invalid_timezone")

    def test_invalid_period(self):
        shifts = [{"user_id": "P1", "start": "2024-01-15T10:00:00Z", "end": "2024-01-15T09:00:00Z"}]
        response = self.client.post("/api/compensation", json={"shifts": shifts})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "invalid_period")
        self.assertIn("error_id", response.json())

    def test_shifts_must_be_list(self):
        response = self.client.post("/api/compensation", json={"shifts": "none"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "validation_error")

    def test_body_must_be_json(self):
        response = self.client.post("/api/compensation", content=b"not json",
                                    headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "validation_error")


class TestAnalyticsEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_frequency(self):
        response = self.client.post("/api/analytics/frequency", json={"shifts": SHIFTS, "user_id": "P2"})
        self.assertEqual(response.status_code, 200)
        data = response.json()

        self.assertEqual(len(data["cells"]), 168)
        self.assertEqual(data["max_count"], 1)
        monday_nine = next(c for c in data["cells"] if c["day_of_week"] == 1 and c["hour"] == 9)
        self.assertEqual(monday_nine["count"], 1)
        self.assertEqual(monday_nine["label"], "Mon 9 AM")

    def test_burden(self):
        data = self.client.post("/api/analytics/burden", json={"shifts": SHIFTS}).json()
        self.assertEqual([row["user_id"] for row in data["distribution"]], ["P1", "P2"])
        self.assertAlmostEqual(sum(row["percentage"] for row in data["distribution"]), 100, delta=0.05)

    def test_interruptions(self):
        shifts = [{"user_id": "P1", "start": "2024-01-19T09:00:00Z", "end": "2024-01-19T11:00:00Z"}]
        data = self.client.post("/api/analytics/interruptions", json={"shifts": shifts}).json()
        self.assertEqual(data["correlation"][0]["total_pay"], 150.0)

    def test_interruptions_null_rate_uses_default(self):
        shifts = [{"user_id": "P1", "start": "2024-01-19T09:00:00Z", "end": "2024-01-19T11:00:00Z"}]
        response = self.client.post("/api/analytics/interruptions",
                                    json={"shifts": shifts, "weekend_rate": None})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["correlation"][0]["total_pay"], 150.0)

    def test_interruptions_invalid_rate(self):
        response = self.client.post("/api/analytics/interruptions",
                                    json={"shifts": [], "weekday_rate": -5})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error_type"], "invalid_rate")


class TestUnexpectedErrors(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app, raise_server_exceptions=False)

    def test_internal_error_is_generic(self):
        with patch("routes.compensation.build_users", side_effect=KeyError("boom")):
            response = self.client.post("/api/compensation", json={"shifts": SHIFTS})

        self.assertEqual(response.status_code, 500)
        data = response.json()
        self.assertEqual(data["error"], "An unexpected error occurred")
        self.assertEqual(data["error_type"], "internal_error")
        self.assertIn("error_id", data)
        self.assertNotIn("details", data)
        self.assertNotIn("boom", response.text)


if __name__ == "__main__":
    unittest.main(verbosity=2)
