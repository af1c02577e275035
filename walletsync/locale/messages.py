"""User-facing message catalog for the supported locales."""

import structlog

log = structlog.stdlib.get_logger()

FALLBACK_LOCALE = "en"

UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
INVALID_SYNC_FROM = "invalid_sync_from"
VALIDATION_FAILED = "validation_failed"
OPERATION_SUCCESSFUL = "operation_successful"
RESOURCE_NOT_FOUND = "resource_not_found"
METHOD_NOT_ALLOWED = "method_not_allowed"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        UNSUPPORTED_MEDIA_TYPE: "The Content-Type header must be application/json for this request.",
        INVALID_SYNC_FROM: "Invalid date format for sync_from parameter.",
        VALIDATION_FAILED: "Server failed to validate request.",
        OPERATION_SUCCESSFUL: "Operation successful",
        RESOURCE_NOT_FOUND: "The requested resource was not found.",
        METHOD_NOT_ALLOWED: "This method is not allowed for the requested resource.",
    },
    "fr": {
        UNSUPPORTED_MEDIA_TYPE: "L'en-tête Content-Type doit être application/json pour cette requête.",
        INVALID_SYNC_FROM: "Format de date invalide pour le paramètre sync_from.",
        VALIDATION_FAILED: "Le serveur n'a pas pu valider la requête.",
        OPERATION_SUCCESSFUL: "Opération réussie",
        RESOURCE_NOT_FOUND: "La ressource demandée est introuvable.",
        METHOD_NOT_ALLOWED: "Cette méthode n'est pas autorisée pour la ressource demandée.",
    },
    "es": {
        UNSUPPORTED_MEDIA_TYPE: "El encabezado Content-Type debe ser application/json para esta solicitud.",
        INVALID_SYNC_FROM: "Formato de fecha no válido para el parámetro sync_from.",
        VALIDATION_FAILED: "El servidor no pudo validar la solicitud.",
        OPERATION_SUCCESSFUL: "Operación exitosa",
        RESOURCE_NOT_FOUND: "No se encontró el recurso solicitado.",
        METHOD_NOT_ALLOWED: "Este método no está permitido para el recurso solicitado.",
    },
    "de": {
        UNSUPPORTED_MEDIA_TYPE: "Der Content-Type-Header muss für diese Anfrage application/json sein.",
        INVALID_SYNC_FROM: "Ungültiges Datumsformat für den Parameter sync_from.",
        VALIDATION_FAILED: "Der Server konnte die Anfrage nicht validieren.",
        OPERATION_SUCCESSFUL: "Vorgang erfolgreich",
        RESOURCE_NOT_FOUND: "Die angeforderte Ressource wurde nicht gefunden.",
        METHOD_NOT_ALLOWED: "Diese Methode ist für die angeforderte Ressource nicht erlaubt.",
    },
    "pt": {
        UNSUPPORTED_MEDIA_TYPE: "O cabeçalho Content-Type deve ser application/json para esta solicitação.",
        INVALID_SYNC_FROM: "Formato de data inválido para o parâmetro sync_from.",
        VALIDATION_FAILED: "O servidor não conseguiu validar a solicitação.",
        OPERATION_SUCCESSFUL: "Operação bem-sucedida",
        RESOURCE_NOT_FOUND: "O recurso solicitado não foi encontrado.",
        METHOD_NOT_ALLOWED: "Este método não é permitido para o recurso solicitado.",
    },
    "it": {
        UNSUPPORTED_MEDIA_TYPE: "L'intestazione Content-Type deve essere application/json per questa richiesta.",
        INVALID_SYNC_FROM: "Formato data non valido per il parametro sync_from.",
        VALIDATION_FAILED: "Il server non è riuscito a convalidare la richiesta.",
        OPERATION_SUCCESSFUL: "Operazione riuscita",
        RESOURCE_NOT_FOUND: "La risorsa richiesta non è stata trovata.",
        METHOD_NOT_ALLOWED: "Questo metodo non è consentito per la risorsa richiesta.",
    },
}


def available_locales() -> set[str]:
    """Locales that have a message catalog."""
    return set(MESSAGES)


def translate(message_id: str, locale: str) -> str:
    """
    Look up a message in the given locale.

    Falls back to English when the locale has no catalog or lacks the key.

    Args:
        message_id: Catalog key, e.g. ``INVALID_SYNC_FROM``
        locale: Negotiated locale tag

    Returns:
        Localized message text

    Raises:
        KeyError: If the message id is unknown in every catalog
    """
    catalog = MESSAGES.get(locale)
    if catalog is not None and message_id in catalog:
        return catalog[message_id]

    log.debug("message_translation_fallback", message_id=message_id, locale=locale)
    return MESSAGES[FALLBACK_LOCALE][message_id]
