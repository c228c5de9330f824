"""
Sistema di gestione errori centralizzato per la sincronizzazione CSV verso Kontent.ai
"""
from abc import ABC
from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorCode(Enum):
    """Codici errore standardizzati"""
    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_HEADERS = "MISSING_HEADERS"
    EMPTY_DATA = "EMPTY_DATA"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"

    # Infrastructure errors
    READ_ERROR = "READ_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Errori Kontent.ai Management API
    ITEM_LOOKUP_ERROR = "ITEM_LOOKUP_ERROR"
    ITEM_CREATE_ERROR = "ITEM_CREATE_ERROR"
    VARIANT_ERROR = "VARIANT_ERROR"
    WORKFLOW_ERROR = "WORKFLOW_ERROR"
    PUBLISH_ERROR = "PUBLISH_ERROR"


class BaseApplicationException(Exception, ABC):
    """Eccezione base per l'applicazione"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400
    ):
        self.message = message
        self.error_code = error_code.value
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Converte l'eccezione in dizionario per la risposta API"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "status_code": self.status_code
        }


class ValidationException(BaseApplicationException):
    """Eccezione per errori di validazione"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 400)


class CsvValidationException(ValidationException):
    """Il CSV caricato non ha la struttura richiesta"""


class MissingHeadersError(CsvValidationException):
    """Mancano una o più colonne locale nell'header del CSV"""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required headers: {', '.join(self.missing)}",
            ErrorCode.MISSING_HEADERS,
            {"missing_headers": self.missing}
        )


class EmptyDataError(CsvValidationException):
    """Il CSV ha l'header ma nessuna riga di dati"""

    def __init__(self):
        super().__init__("CSV file has no data rows", ErrorCode.EMPTY_DATA)


class InfrastructureException(BaseApplicationException):
    """Eccezione per errori di infrastruttura"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message, error_code, details, status_code)


class CsvReadError(InfrastructureException):
    """Il file CSV non può essere letto o decodificato"""

    def __init__(self, file_path: str, error: Exception):
        super().__init__(
            f"Error reading CSV file: {error}",
            ErrorCode.READ_ERROR,
            {"file_path": str(file_path), "error": str(error)}
        )


class ConfigurationException(InfrastructureException):
    """L'ambiente di destinazione non è configurato"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class KontentApiException(InfrastructureException):
    """
    Chiamata alla Kontent.ai Management API fallita.

    Contiene lo status HTTP restituito da Kontent (None per errori di
    trasporto) e il payload di errore decodificato, se presente.
    """

    default_error_code = ErrorCode.EXTERNAL_SERVICE_ERROR

    def __init__(
        self,
        message: str,
        remote_status: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.remote_status = remote_status
        self.payload = payload or {}
        error_details = dict(details or {})
        error_details["remote_status"] = remote_status
        if self.payload:
            error_details["payload"] = self.payload
        super().__init__(message, self.default_error_code, error_details, 502)

    @property
    def reason(self) -> str:
        """Motivo leggibile: primo errore di validazione, poi il messaggio remoto"""
        validation_errors = self.payload.get("validation_errors") or []
        for error in validation_errors:
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
        remote_message = self.payload.get("message")
        if isinstance(remote_message, str) and remote_message:
            return remote_message
        return self.message


class ItemLookupError(KontentApiException):
    """Verifica di esistenza fallita per un motivo diverso da 404"""
    default_error_code = ErrorCode.ITEM_LOOKUP_ERROR


class ItemCreateError(KontentApiException):
    default_error_code = ErrorCode.ITEM_CREATE_ERROR


class VariantError(KontentApiException):
    default_error_code = ErrorCode.VARIANT_ERROR


class WorkflowError(KontentApiException):
    default_error_code = ErrorCode.WORKFLOW_ERROR


class WorkflowLookupError(WorkflowError):
    """Il workflow 'default' o il suo step 'review' non esiste"""


class PublishError(KontentApiException):
    default_error_code = ErrorCode.PUBLISH_ERROR
