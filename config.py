import os
from dataclasses import dataclass, field


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ClinicInfo:
    name: str = "Pet Clinic"
    address: str = "123 Pet Street"
    phone: str = "555-555-5555"

    def as_appointment_fields(self) -> dict:
        return {
            "clinicName": self.name,
            "clinicAddress": self.address,
            "clinicPhone": self.phone,
        }


@dataclass
class Settings:
    """
    Runtime configuration handed to create_app() and ClinicService.

    Environment:
      - PETCLINIC_DATA_DIR=data              -> directory holding the JSON collections
      - PETCLINIC_PORT=3000                  -> port used by `python app.py`
      - PETCLINIC_PURCHASE_DELAY=3.0         -> simulated purchase latency (seconds)
      - PETCLINIC_CLINIC_NAME / _ADDRESS / _PHONE
      - FLASK_ENV=testing                    -> JSON log lines go to a file
      - PETCLINIC_LOG_PATH=logs/petclinic.log
      - PETCLINIC_DEBUG=1                    -> Flask debug mode
    """
    data_dir: str = "data"
    port: int = 3000
    purchase_delay: float = 3.0
    clinic: ClinicInfo = field(default_factory=ClinicInfo)
    env: str = ""
    log_path: str = "logs/petclinic.log"
    debug: bool = False

    @property
    def testing(self) -> bool:
        return self.env == "testing"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = ClinicInfo()
        clinic = ClinicInfo(
            name=os.getenv("PETCLINIC_CLINIC_NAME", defaults.name),
            address=os.getenv("PETCLINIC_CLINIC_ADDRESS", defaults.address),
            phone=os.getenv("PETCLINIC_CLINIC_PHONE", defaults.phone),
        )
        return cls(
            data_dir=os.getenv("PETCLINIC_DATA_DIR", "data"),
            port=int(os.getenv("PETCLINIC_PORT", "3000")),
            purchase_delay=_env_float("PETCLINIC_PURCHASE_DELAY", 3.0),
            clinic=clinic,
            env=(os.getenv("FLASK_ENV") or "").lower().strip(),
            log_path=os.getenv("PETCLINIC_LOG_PATH", "logs/petclinic.log"),
            debug=_env_bool("PETCLINIC_DEBUG"),
        )
