"""
Alert headers attached to entity responses so clients can show a
translated notification (`<app>.<entity>.created`, ...).
"""
from typing import Dict

from invoice.config.settings import InvoiceConfigs
configs = InvoiceConfigs()

APPLICATION_NAME = configs.CLIENT_APP_NAME


def create_alert(message: str, param: str, application_name: str = APPLICATION_NAME) -> Dict[str, str]:
    return {
        f"X-{application_name}-alert": message,
        f"X-{application_name}-params": param,
    }


def create_entity_creation_alert(entity_name: str, param, application_name: str = APPLICATION_NAME) -> Dict[str, str]:
    return create_alert(f"{application_name}.{entity_name}.created", str(param), application_name)


def create_entity_update_alert(entity_name: str, param, application_name: str = APPLICATION_NAME) -> Dict[str, str]:
    return create_alert(f"{application_name}.{entity_name}.updated", str(param), application_name)


def create_entity_deletion_alert(entity_name: str, param, application_name: str = APPLICATION_NAME) -> Dict[str, str]:
    return create_alert(f"{application_name}.{entity_name}.deleted", str(param), application_name)


def create_failure_alert(entity_name: str, error_key: str, application_name: str = APPLICATION_NAME) -> Dict[str, str]:
    return {
        f"X-{application_name}-error": f"error.{error_key}",
        f"X-{application_name}-params": entity_name,
    }
