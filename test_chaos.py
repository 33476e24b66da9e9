import pytest

import api_helpers
from document_store import APPOINTMENTS, LATEST_APPOINTMENT, PETS, PRODUCTS, PURCHASES, SCHEDULE

READ_ERROR = {"error": "Erro ao ler arquivo JSON"}


@pytest.fixture
def corrupt(data_dir):
    def _corrupt(name):
        (data_dir / name).write_text('[{"id": 1, "name": ', encoding="utf-8")
    return _corrupt


@pytest.mark.chaos
@pytest.mark.parametrize("name, path", [
    (PETS, "/api/pets"),
    (PETS, "/api/pets/1"),
    (APPOINTMENTS, "/api/appointments"),
    (PETS, "/api/appointments"),
    (SCHEDULE, "/api/schedule/1"),
    (PRODUCTS, "/api/store/products"),
])
def test_malformed_file_yields_generic_500(client, corrupt, name, path):
    corrupt(name)

    response = api_helpers.make_request(client, "GET", path)

    assert response.status_code == 500, f"Expected 500, got {response.status_code}. Body: {response.text}"
    assert response.json() == READ_ERROR


@pytest.mark.chaos
def test_add_pet_over_broken_file_reports_processing_error(client, corrupt, data_dir):
    corrupt(PETS)

    response = api_helpers.make_request(client, "POST", "/api/pets/new", json={"id": 2, "name": "Mia"})

    assert response.status_code == 500
    assert response.json() == {"error": "Erro ao processar pet"}
    # broken file is left as it was
    assert (data_dir / PETS).read_text(encoding="utf-8") == '[{"id": 1, "name": '


@pytest.mark.chaos
def test_schedule_over_broken_file_reports_processing_error(client, corrupt):
    corrupt(APPOINTMENTS)

    response = api_helpers.make_request(client, "POST", "/api/scheduleService",
                                        json={"petId": 1, "serviceId": 1, "date": "2024-06-01", "time": "09:00"})

    assert response.status_code == 500
    assert response.json() == {"error": "Erro ao processar agendamento"}


@pytest.mark.chaos
def test_unwritable_latest_appointment_reports_processing_error(client, data_dir):
    # a directory where the singleton file should be makes the replace fail
    (data_dir / LATEST_APPOINTMENT).mkdir()

    response = api_helpers.make_request(client, "POST", "/api/scheduleService",
                                        json={"petId": 1, "serviceId": 1, "date": "2024-06-01", "time": "09:00"})

    assert response.status_code == 500
    assert response.json() == {"error": "Erro ao processar agendamento"}


@pytest.mark.chaos
def test_purchase_over_broken_file_500(client, corrupt):
    corrupt(PURCHASES)

    response = api_helpers.make_request(client, "POST", "/api/purchase",
                                        json={"products": [1], "cartItems": [1], "paymentData": {"card": "x"}})

    assert response.status_code == 500
    assert response.json() == READ_ERROR


@pytest.mark.chaos
def test_validation_still_wins_over_broken_files(client, corrupt):
    corrupt(APPOINTMENTS)
    corrupt(PURCHASES)

    assert api_helpers.make_request(client, "POST", "/api/scheduleService", json={}).status_code == 400
    assert api_helpers.make_request(client, "POST", "/api/purchase", json={}).status_code == 400
