from dataclasses import asdict, dataclass
from typing import Any

from config import ClinicInfo

PURCHASE_STATUS = "Compra finalizada com sucesso"


@dataclass
class Appointment:
    petId: Any
    serviceId: Any
    date: str
    time: str
    clinicName: str
    clinicAddress: str
    clinicPhone: str

    @classmethod
    def book(cls, petId, serviceId, date, time, clinic: ClinicInfo) -> "Appointment":
        return cls(petId=petId, serviceId=serviceId, date=date, time=time,
                   **clinic.as_appointment_fields())

    def slot(self) -> tuple:
        return (self.petId, self.date, self.time)

    def conflicts_with(self, existing: dict) -> bool:
        """Same pet, same date, same time. serviceId is not part of the slot."""
        return (existing.get("petId"), existing.get("date"), existing.get("time")) == self.slot()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PurchaseConfirmation:
    orderId: int
    cartItems: list
    status: str = PURCHASE_STATUS

    def to_dict(self) -> dict:
        return asdict(self)
