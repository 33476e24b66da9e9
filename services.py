import re
import time

from document_store import (
    APPOINTMENTS,
    LATEST_APPOINTMENT,
    PETS,
    PRODUCTS,
    PURCHASES,
    SCHEDULE,
    DocumentStore,
)
from errors import ConflictError, NotFoundError, ValidationError
from logging_helper import log_event
from records import Appointment, PurchaseConfirmation

PET_NOT_FOUND = "Pet não encontrado"
SCHEDULE_NOT_FOUND = "Disponibilidade de serviço não encontrada"
NO_APPOINTMENT = "Nenhum agendamento encontrado"
LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
SCHEDULE_FIELDS = ("petId", "serviceId", "date", "time")
PURCHASE_FIELDS = ("products", "cartItems", "paymentData")


def parse_id(raw):
    """Leading integer of a path segment, like JavaScript parseInt(raw, 10). None if there is none."""
    if isinstance(raw, int):
        return raw
    match = LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def _find_by_id(items: list, item_id: int, id_field: str = "id"):
    return next((x for x in items if isinstance(x, dict) and x.get(id_field) == item_id), None)


def _require(payload: dict, required: tuple, message: str) -> None:
    if not isinstance(payload, dict) or not all(payload.get(f) for f in required):
        raise ValidationError(message)


class ClinicService:
    """
    Operations behind the REST and GraphQL surfaces.

    Each write holds the store's per-file lock for the whole
    read -> compute -> write sequence.
    """

    def __init__(self, store: DocumentStore, settings):
        self.store = store
        self.settings = settings

    # ----------------------------
    # Pets
    # ----------------------------
    def list_pets(self) -> list:
        return self.store.read(PETS)

    def get_pet(self, pet_id) -> dict:
        pet_id = parse_id(pet_id)
        if pet_id is None:
            raise NotFoundError(PET_NOT_FOUND)
        pet = _find_by_id(self.store.read(PETS), pet_id)
        if pet is None:
            raise NotFoundError(PET_NOT_FOUND)
        return pet

    def add_pet(self, body) -> dict:
        if not isinstance(body, dict):
            raise ValidationError("O corpo da requisição deve ser um objeto JSON")

        with self.store.lock(PETS):
            pets = self.store.read(PETS)
            pets.append(body)
            self.store.write(PETS, pets)

        log_event("pet_added", pet_id=body.get("id"), total=len(pets))
        return {"message": "Pet registrado com sucesso", "pet": body}

    # ----------------------------
    # Scheduling
    # ----------------------------
    def schedule_service(self, payload) -> dict:
        _require(payload, SCHEDULE_FIELDS,
                 "Todos os parâmetros são necessários: petId, serviceId, date, time")

        appointment = Appointment.book(
            payload["petId"], payload["serviceId"], payload["date"], payload["time"],
            clinic=self.settings.clinic,
        )

        with self.store.lock(APPOINTMENTS):
            appointments = self.store.read(APPOINTMENTS)
            if any(appointment.conflicts_with(a) for a in appointments if isinstance(a, dict)):
                log_event("appointment_conflict", pet_id=appointment.petId,
                          date=appointment.date, time=appointment.time)
                raise ConflictError("Conflito de horário")

            created = appointment.to_dict()
            appointments.append(created)
            self.store.write(APPOINTMENTS, appointments)
            self.store.write(LATEST_APPOINTMENT, created)

        log_event("appointment_created", pet_id=appointment.petId,
                  service_id=appointment.serviceId, date=appointment.date, time=appointment.time)
        return created

    def list_appointments(self) -> list:
        appointments, pets = self.store.read_many(APPOINTMENTS, PETS)

        enriched = []
        for a in appointments:
            pet = _find_by_id(pets, a.get("petId"))
            enriched.append({**a, "petName": pet.get("name") if pet else PET_NOT_FOUND})
        return enriched

    def latest_appointment(self) -> dict:
        latest = self.store.read(LATEST_APPOINTMENT)
        # a missing file reads as an empty list
        if not isinstance(latest, dict) or not latest:
            raise NotFoundError(NO_APPOINTMENT)
        return latest

    def get_schedule(self, service_id) -> dict:
        service_id = parse_id(service_id)
        if service_id is None:
            raise NotFoundError(SCHEDULE_NOT_FOUND)
        entry = _find_by_id(self.store.read(SCHEDULE), service_id)
        if entry is None:
            raise NotFoundError(SCHEDULE_NOT_FOUND)
        return entry

    # ----------------------------
    # Store
    # ----------------------------
    def list_products(self) -> list:
        return self.store.read(PRODUCTS)

    def purchase(self, payload) -> dict:
        _require(payload, PURCHASE_FIELDS, "Todos os parâmetros são necessários")

        # simulated payment processing
        if self.settings.purchase_delay > 0:
            time.sleep(self.settings.purchase_delay)

        with self.store.lock(PURCHASES):
            purchases = self.store.read(PURCHASES)
            confirmation = PurchaseConfirmation(orderId=len(purchases) + 1,
                                                cartItems=payload["cartItems"])
            created = confirmation.to_dict()
            purchases.append(created)
            self.store.write(PURCHASES, purchases)

        log_event("purchase_completed", order_id=confirmation.orderId,
                  items=len(confirmation.cartItems) if isinstance(confirmation.cartItems, list) else None)
        return created
