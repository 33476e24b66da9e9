class ClinicError(Exception):
    """Base error for the clinic API. Rendered as {"error": message}."""

    status_code = 500
    message = "Erro interno"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(ClinicError):
    status_code = 400
    message = "Requisição inválida"


class NotFoundError(ClinicError):
    status_code = 404
    message = "Recurso não encontrado"


class ConflictError(ClinicError):
    status_code = 409
    message = "Conflito de horário"


class StoreError(ClinicError):
    status_code = 500
    message = "Erro ao ler arquivo JSON"


class StoreReadError(StoreError):
    message = "Erro ao ler arquivo JSON"


class StoreWriteError(StoreError):
    message = "Erro ao gravar arquivo JSON"
