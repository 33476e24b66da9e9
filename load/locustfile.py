import os
import uuid
import random
from typing import Any, Dict, Optional

from locust import HttpUser, task, between


RUN_ID = os.getenv("LOAD_RUN_ID", str(uuid.uuid4())[:8])  # used in pet names for later filtering
SERVICE_IDS = [int(x) for x in os.getenv("LOAD_SERVICE_IDS", "1,2,3").split(",")]
TIMES = ["08:00", "09:00", "10:30", "11:00", "14:00", "15:00", "16:30"]


def gql_payload(query: str, variables: Optional[Dict[str, Any]] = None, operation_name: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"query": query}
    if variables is not None:
        payload["variables"] = variables
    if operation_name is not None:
        payload["operationName"] = operation_name
    return payload


class ClinicUser(HttpUser):
    """
    Locust user mixing clinic reads with concurrent writes.

    Writes (new pets, bookings) hit the same JSON files from many users at
    once; 409 on a booking is an expected outcome, not a failure.
    """
    wait_time = between(0.1, 0.6)

    def on_start(self):
        self.pet_id = random.randint(10_000, 99_999)
        self.client.post(
            "/api/pets/new",
            json={"id": self.pet_id, "name": f"load_{RUN_ID}_{self.pet_id}"},
            headers=self._headers(),
            name="/api/pets/new",
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Request-Id": str(uuid.uuid4()),
        }

    @task(30)
    def list_pets(self):
        self.client.get("/api/pets", headers=self._headers(), name="/api/pets")

    @task(20)
    def list_appointments(self):
        self.client.get("/api/appointments", headers=self._headers(), name="/api/appointments")

    @task(15)
    def schedule_lookup(self):
        service_id = random.choice(SERVICE_IDS)
        with self.client.get(f"/api/schedule/{service_id}", headers=self._headers(),
                             name="/api/schedule/[id]", catch_response=True) as resp:
            if resp.status_code in (200, 404):
                resp.success()

    @task(10)
    def products(self):
        self.client.get("/api/store/products", headers=self._headers(), name="/api/store/products")

    @task(20)
    def book_appointment(self):
        payload = {
            "petId": self.pet_id,
            "serviceId": random.choice(SERVICE_IDS),
            "date": f"2025-0{random.randint(1, 9)}-1{random.randint(0, 9)}",
            "time": random.choice(TIMES),
        }
        with self.client.post("/api/scheduleService", json=payload, headers=self._headers(),
                              name="/api/scheduleService", catch_response=True) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"HTTP {resp.status_code}: {resp.text[:200]}")

    @task(5)
    def graphql_appointments(self):
        q = "query Appointments { appointments { petId petName date time } }"
        with self.client.post("/graphql", json=gql_payload(q, operation_name="Appointments"),
                              headers=self._headers(), name="gql:Appointments", catch_response=True) as resp:
            try:
                data = resp.json()
            except ValueError:
                resp.failure(f"Non-JSON response: {resp.text[:200]}")
                return
            if data.get("errors"):
                resp.failure(f"GraphQL errors: {str(data['errors'])[:200]}")
            else:
                resp.success()

    @task(1)
    def purchase(self):
        # slow on purpose: the server simulates payment latency
        self.client.post(
            "/api/purchase",
            json={
                "products": [{"id": 1}],
                "cartItems": [{"productId": 1, "quantity": 1}],
                "paymentData": {"method": "card"},
            },
            headers=self._headers(),
            name="/api/purchase",
        )


"""How to run

PETCLINIC_PURCHASE_DELAY=0.5 python app.py

python3 -m locust -f load/locustfile.py \
  --headless \
  -u 25 \
  -r 5 \
  --run-time 30s \
  --host http://127.0.0.1:3000 \
  --csv load/locust_results

"""
