"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test cache and occupied view
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from datetime import date, timedelta

from locust import HttpUser, task, between, tag

# Shared state
TURF_IDS = []
CONTESTED_TURF_ID = None
CONTESTED_DATE = (date.today() + timedelta(days=7)).isoformat()
PASSWORD = "loadtest123"


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase, k=6))
    return f"load_{random.randint(10000, 99999)}_{suffix}@test.com"


def random_date() -> str:
    return (date.today() + timedelta(days=random.randint(1, 30))).isoformat()


def register_and_login(client, role: str = "user", **turf) -> dict:
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "name": f"Load {role}",
        "email": email,
        "password": PASSWORD,
        "role": role,
        **turf,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code == 200:
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return {}


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users -> the same evening on one turf

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify no two intervals overlap:
      SELECT a.id, b.id FROM intervals a JOIN intervals b
        ON a.turf_id = b.turf_id AND a.date = b.date AND a.id < b.id
       AND a.start_hour < b.end_hour AND b.start_hour < a.end_hour;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONTESTED_TURF_ID
        if CONTESTED_TURF_ID is None:
            owner_headers = register_and_login(
                self.client,
                role="owner",
                turf_name="Contested Turf",
                location="Load Test",
                image_url="https://example.com/contested.jpg",
            )
            resp = self.client.get("/api/v1/turfs/mine", headers=owner_headers)
            if resp.status_code == 200 and resp.json():
                CONTESTED_TURF_ID = resp.json()[0]["id"]
                print(f"\n✓ Contested turf {CONTESTED_TURF_ID} on {CONTESTED_DATE}\n")
        self.headers = register_and_login(self.client)

    @tag("concurrency")
    @task
    def book_contested_evening(self):
        """Everyone wants a window between 17:00 and 22:00."""
        if not CONTESTED_TURF_ID or not self.headers:
            return

        start = random.randint(17, 21)
        with self.client.post("/api/v1/bookings/",
            json={
                "turf_id": CONTESTED_TURF_ID,
                "date": CONTESTED_DATE,
                "start_hour": start,
                "end_hour": min(start + random.randint(1, 2), 24),
            },
            headers=self.headers,
            name="/api/v1/bookings/ [contested]",
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: slot taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - turf list cache and occupied view

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: Stop Redis, run again
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_turfs_cached(self):
        resp = self.client.get("/api/v1/turfs/", name="/api/v1/turfs/ [cached]")
        if resp.status_code == 200:
            for turf in resp.json():
                if turf["id"] not in TURF_IDS:
                    TURF_IDS.append(turf["id"])

    @tag("throughput", "read")
    @task(5)
    def view_occupied(self):
        if TURF_IDS:
            self.client.get(
                f"/api/v1/turfs/{random.choice(TURF_IDS)}/occupied",
                params={"date": random_date()},
                name="/api/v1/turfs/{id}/occupied",
            )

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_and_login(self.client)

    def _expect(self, payload, expected, name, headers=None):
        with self.client.post("/api/v1/bookings/",
            json=payload,
            headers=self.headers if headers is None else headers,
            name=name,
            catch_response=True
        ) as resp:
            if resp.status_code in expected:
                resp.success()
            else:
                resp.failure(f"Expected {expected}, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_turf_id(self):
        self._expect(
            {"turf_id": 999999, "date": random_date(), "start_hour": 10, "end_hour": 11},
            [404], "[edge] unknown turf",
        )

    @tag("edge")
    @task
    def reversed_window(self):
        self._expect(
            {"turf_id": 1, "date": random_date(), "start_hour": 18, "end_hour": 16},
            [422], "[edge] reversed window",
        )

    @tag("edge")
    @task
    def out_of_day_hours(self):
        self._expect(
            {"turf_id": 1, "date": random_date(), "start_hour": 23, "end_hour": 26},
            [422], "[edge] past midnight",
        )

    @tag("edge")
    @task
    def garbage_date(self):
        self._expect(
            {"turf_id": 1, "date": "next friday", "start_hour": 10, "end_hour": 11},
            [422], "[edge] bad date",
        )

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            name="[edge] malformed json",
            catch_response=True
        ) as resp:
            if resp.status_code in [400, 422]:
                resp.success()
            else:
                resp.failure(f"Expected 400/422, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect(
            {"turf_id": 1, "date": random_date(), "start_hour": 10, "end_hour": 11},
            [401], "[edge] no auth", headers={},
        )

    @tag("edge")
    @task
    def block_foreign_turf(self):
        with self.client.post("/api/v1/blocks/",
            json={"turf_id": 1, "date": random_date(), "start_hour": 10, "end_hour": 11},
            headers=self.headers,
            name="[edge] block as user",
            catch_response=True
        ) as resp:
            if resp.status_code in [403, 404]:
                resp.success()
            else:
                resp.failure(f"Expected 403/404, got {resp.status_code}")


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing turfs and availability
      - Some bookings
      - Checking own bookings
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register_and_login(self.client)

    @task(30)
    def browse_turfs(self):
        resp = self.client.get("/api/v1/turfs/")
        if resp.status_code == 200:
            for turf in resp.json():
                if turf["id"] not in TURF_IDS:
                    TURF_IDS.append(turf["id"])

    @task(20)
    def check_availability(self):
        if TURF_IDS:
            self.client.get(
                f"/api/v1/turfs/{random.choice(TURF_IDS)}/occupied",
                params={"date": random_date()},
                name="/api/v1/turfs/{id}/occupied",
            )

    @task(10)
    def book_slot(self):
        if TURF_IDS and self.headers:
            start = random.randint(6, 22)
            with self.client.post("/api/v1/bookings/",
                json={
                    "turf_id": random.choice(TURF_IDS),
                    "date": random_date(),
                    "start_hour": start,
                    "end_hour": start + 1,
                },
                headers=self.headers,
                catch_response=True
            ) as resp:
                if resp.status_code in [201, 409]:
                    resp.success()
                else:
                    resp.failure(f"Unexpected: {resp.status_code}")

    @task(5)
    def my_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)
