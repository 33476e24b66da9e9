from concurrent.futures import ThreadPoolExecutor

import jsonschema
import pytest
from hamcrest import assert_that, contains_string, is_

import api_helpers
import schemas
from app import create_app
from config import ClinicInfo, Settings
from document_store import APPOINTMENTS, LATEST_APPOINTMENT, PETS, SCHEDULE, DocumentStore
from errors import ConflictError
from services import ClinicService

BOOKING = {"petId": 1, "serviceId": 2, "date": "2024-06-01", "time": "10:00"}


def _book(client, payload):
    return api_helpers.make_request(client, "POST", "/api/scheduleService", json=payload)


def test_schedule_service_creates_appointment(client, read_collection):
    response = _book(client, BOOKING)

    assert response.status_code == 201, f"Expected 201, got {response.status_code}. Body: {response.text}"
    data = response.json()
    jsonschema.validate(instance=data, schema=schemas.appointment)
    assert data == {
        **BOOKING,
        "clinicName": "Pet Clinic",
        "clinicAddress": "123 Pet Street",
        "clinicPhone": "555-555-5555",
    }
    assert read_collection(APPOINTMENTS) == [data]
    assert read_collection(LATEST_APPOINTMENT) == data


def test_latest_appointment_is_overwritten_not_appended(client, read_collection):
    first = _book(client, BOOKING).json()
    second = _book(client, {**BOOKING, "time": "11:00"}).json()

    assert read_collection(APPOINTMENTS) == [first, second]
    assert read_collection(LATEST_APPOINTMENT) == second


@pytest.mark.parametrize("missing", ["petId", "serviceId", "date", "time"])
def test_schedule_service_missing_field_400(client, data_dir, missing):
    payload = {k: v for k, v in BOOKING.items() if k != missing}

    response = _book(client, payload)

    assert response.status_code == 400
    assert_that(response.json()["error"], contains_string("petId, serviceId, date, time"))
    assert list(data_dir.iterdir()) == []


def test_schedule_service_falsy_field_400(client, data_dir):
    response = _book(client, {**BOOKING, "petId": 0})

    assert response.status_code == 400
    assert list(data_dir.iterdir()) == []


def test_schedule_service_without_body_400(client):
    response = api_helpers.make_request(client, "POST", "/api/scheduleService")
    assert response.status_code == 400


def test_conflict_same_pet_date_time_regardless_of_service(client, read_collection):
    assert _book(client, BOOKING).status_code == 201
    before = read_collection(APPOINTMENTS)

    response = _book(client, {**BOOKING, "serviceId": 99})

    assert response.status_code == 409
    assert response.json() == {"error": "Conflito de horário"}
    assert read_collection(APPOINTMENTS) == before


def test_conflict_does_not_touch_latest_appointment(client, read_collection):
    first = _book(client, BOOKING).json()
    _book(client, BOOKING)

    assert read_collection(LATEST_APPOINTMENT) == first


@pytest.mark.parametrize("change", [{"petId": 2}, {"date": "2024-06-02"}, {"time": "10:30"}])
def test_different_slot_is_not_a_conflict(client, read_collection, change):
    _book(client, BOOKING)

    response = _book(client, {**BOOKING, **change})

    assert response.status_code == 201
    assert len(read_collection(APPOINTMENTS)) == 2


def test_clinic_info_comes_from_settings(data_dir, tmp_path):
    settings = Settings(
        data_dir=str(data_dir),
        purchase_delay=0,
        env="testing",
        log_path=str(tmp_path / "logs" / "clinic.log"),
        clinic=ClinicInfo(name="Vet Center", address="1 Main St", phone="000"),
    )
    with api_helpers.wsgi_client(create_app(settings)) as c:
        data = _book(c, BOOKING).json()

    assert (data["clinicName"], data["clinicAddress"], data["clinicPhone"]) == ("Vet Center", "1 Main St", "000")


def test_list_appointments_attaches_pet_names(client, write_collection):
    write_collection(PETS, [{"id": 1, "name": "Rex"}])
    _book(client, BOOKING)
    _book(client, {**BOOKING, "petId": 99})

    response = api_helpers.make_request(client, "GET", "/api/appointments")

    assert response.status_code == 200
    listing = response.json()
    for item in listing:
        jsonschema.validate(instance=item, schema=schemas.appointment_listing)
    assert [a["petName"] for a in listing] == ["Rex", "Pet não encontrado"]


def test_list_appointments_never_writes(client, write_collection, read_collection):
    write_collection(PETS, [{"id": 1, "name": "Rex"}])
    _book(client, BOOKING)
    before = read_collection(APPOINTMENTS)

    api_helpers.make_request(client, "GET", "/api/appointments")

    assert read_collection(APPOINTMENTS) == before
    assert "petName" not in read_collection(APPOINTMENTS)[0]


def test_list_appointments_empty(client):
    response = api_helpers.make_request(client, "GET", "/api/appointments")
    assert response.status_code == 200
    assert response.json() == []


def test_latest_appointment_endpoint(client):
    assert api_helpers.make_request(client, "GET", "/api/appointments/latest").status_code == 404

    created = _book(client, BOOKING).json()

    response = api_helpers.make_request(client, "GET", "/api/appointments/latest")
    assert response.status_code == 200
    assert response.json() == created


def test_get_schedule_by_service_id(client, write_collection):
    entries = [{"id": 1, "service": "Banho", "times": ["09:00"]}, {"id": 2, "service": "Consulta"}]
    write_collection(SCHEDULE, entries)

    response = api_helpers.make_request(client, "GET", "/api/schedule/2")

    assert response.status_code == 200
    jsonschema.validate(instance=response.json(), schema=schemas.schedule_entry)
    assert response.json() == entries[1]


def test_get_schedule_not_found(client, write_collection):
    write_collection(SCHEDULE, [{"id": 1}])

    response = api_helpers.make_request(client, "GET", "/api/schedule/5")

    assert response.status_code == 404
    assert_that(response.json()["error"], is_("Disponibilidade de serviço não encontrada"))


def test_concurrent_bookings_for_one_slot_admit_exactly_one(settings):
    """Same (petId, date, time) from many threads: one booking, the rest conflict."""
    service = ClinicService(DocumentStore(settings.data_dir), settings)

    def attempt(service_id):
        try:
            service.schedule_service({**BOOKING, "serviceId": service_id})
            return "created"
        except ConflictError:
            return "conflict"

    with ThreadPoolExecutor(max_workers=8) as executor:
        outcomes = list(executor.map(attempt, range(1, 17)))

    assert outcomes.count("created") == 1
    assert outcomes.count("conflict") == 15
    assert len(service.store.read(APPOINTMENTS)) == 1


def test_get_schedule_negative_service_id(client, write_collection):
    write_collection(SCHEDULE, [{"id": 2}, {"id": -2, "service": "Retorno"}])

    response = api_helpers.make_request(client, "GET", "/api/schedule/-2")

    assert response.status_code == 200
    assert response.json() == {"id": -2, "service": "Retorno"}


def test_get_schedule_non_numeric_id_is_json_404(client, write_collection):
    write_collection(SCHEDULE, [{"id": 1}])

    response = api_helpers.make_request(client, "GET", "/api/schedule/x")

    assert response.status_code == 404
    assert response.json() == {"error": "Disponibilidade de serviço não encontrada"}
