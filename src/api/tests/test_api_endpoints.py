import pytest
from django.conf import settings
from django.core.exceptions import ValidationError
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test import RequestFactory
from django.test.client import Client

from api.exception_handlers import (
    handle_django_validation_error,
    handle_not_found_error,
    handle_storage_error,
    obfuscate,
)
from common.exceptions import NotFoundError, StorageError


@pytest.mark.django_db
def test_version_endpoint(client: Client) -> None:
    response = client.get(reverse("api:version"))

    assert response.status_code == 200
    assert response.json() == {"version": settings.VERSION}


@pytest.mark.django_db
def test_healthcheck(client: Client) -> None:
    response = client.get(reverse("api:healthcheck"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_obfuscate() -> None:
    headers = {"Authorization": "Bearer secret", "Accept": "application/json"}

    assert obfuscate(headers) == {"Authorization": "********", "Accept": "application/json"}
    assert headers["Authorization"] == "Bearer secret"


def test_validation_error_with_fields(rf: RequestFactory) -> None:
    response = handle_django_validation_error(rf.get("/"), ValidationError({"price": ["Paid events need a price."]}))

    assert response.status_code == 400


def test_validation_error_without_fields(rf: RequestFactory) -> None:
    response = handle_django_validation_error(rf.get("/"), ValidationError("Broken."))

    assert response.status_code == 400


def test_domain_errors_map_to_statuses(rf: RequestFactory) -> None:
    assert handle_not_found_error(rf.get("/"), NotFoundError("missing")).status_code == 404
    assert handle_storage_error(rf.get("/"), StorageError("down")).status_code == 503
