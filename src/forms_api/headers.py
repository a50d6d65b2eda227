"""Entity alert headers attached to write responses.

A client UI reads ``X-<app>-alert`` (or ``X-<app>-error``) to show a toast
after a write, with ``X-<app>-params`` carrying the value to interpolate.
When translation is enabled the alert is a message key such as
``formsApp.insuranceForm.created``; otherwise it is a plain sentence.
"""

from urllib.parse import quote_plus


def create_alert(application_name: str, message: str, param: str) -> dict[str, str]:
    """Build the generic alert header pair.

    Args:
        application_name: Header prefix from configuration.
        message: Alert text or translation key.
        param: Value shown alongside the alert, URL-encoded.

    Returns:
        Header mapping to merge into a response.
    """
    return {
        f"X-{application_name}-alert": message,
        f"X-{application_name}-params": quote_plus(param),
    }


def create_entity_creation_alert(
    application_name: str, enable_translation: bool, entity_name: str, param: str
) -> dict[str, str]:
    message = (
        f"{application_name}.{entity_name}.created"
        if enable_translation
        else f"A new {entity_name} is created with identifier {param}"
    )
    return create_alert(application_name, message, param)


def create_entity_update_alert(
    application_name: str, enable_translation: bool, entity_name: str, param: str
) -> dict[str, str]:
    message = (
        f"{application_name}.{entity_name}.updated"
        if enable_translation
        else f"A {entity_name} is updated with identifier {param}"
    )
    return create_alert(application_name, message, param)


def create_entity_deletion_alert(
    application_name: str, enable_translation: bool, entity_name: str, param: str
) -> dict[str, str]:
    message = (
        f"{application_name}.{entity_name}.deleted"
        if enable_translation
        else f"A {entity_name} is deleted with identifier {param}"
    )
    return create_alert(application_name, message, param)


def create_failure_alert(
    application_name: str,
    enable_translation: bool,
    entity_name: str,
    error_key: str,
    default_message: str,
) -> dict[str, str]:
    """Build headers announcing a rejected write.

    Args:
        application_name: Header prefix from configuration.
        enable_translation: Emit ``error.<key>`` instead of the message.
        entity_name: Entity the request targeted.
        error_key: Machine-readable reason, e.g. ``idexists``.
        default_message: Human-readable reason.

    Returns:
        Header mapping to merge into a response.
    """
    message = f"error.{error_key}" if enable_translation else default_message
    return {
        f"X-{application_name}-error": message,
        f"X-{application_name}-params": entity_name,
    }
