# -*- coding: utf-8 -*-
"""
Tests de handle_messaging_webhook (sin capa HTTP): caminos de error.
"""

import json
from http import HTTPStatus
from unittest.mock import AsyncMock

from app.modules.messaging.enums import MessagingProvider
from app.modules.messaging.facades import handle_messaging_webhook
from app.modules.payments.enums import WebhookOutcome
from tests.factories import (
    DEEPLY_NESTED_JSON,
    build_evolution_message,
    create_instance,
    create_organization,
    webhook_logs,
)

JSON_HEADERS = {"content-type": "application/json"}


async def test_unexpected_error_is_audited_as_generic_500(db, session_factory):
    org_id = (await create_organization(db)).id
    await create_instance(db, org_id)
    service = AsyncMock()
    service.apply.side_effect = RuntimeError("pipeline caído")
    db.rollback = AsyncMock(wraps=db.rollback)

    result = await handle_messaging_webhook(
        db,
        session_factory=session_factory,
        provider=MessagingProvider.EVOLUTION,
        raw_body=json.dumps(build_evolution_message()).encode("utf-8"),
        headers=JSON_HEADERS,
        service=service,
    )

    assert result.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert result.body == {"error": "Internal server error"}
    db.rollback.assert_awaited()
    (log,) = await webhook_logs(db)
    assert log.outcome == WebhookOutcome.ERROR
    assert log.http_status == 500
    assert log.organization_id == org_id
    assert "RuntimeError" in log.error_message


async def test_deeply_nested_body_is_acknowledged_with_warning(db, session_factory):
    result = await handle_messaging_webhook(
        db,
        session_factory=session_factory,
        provider=MessagingProvider.META_CLOUD,
        raw_body=DEEPLY_NESTED_JSON,
        headers=JSON_HEADERS,
    )

    assert result.status_code == HTTPStatus.OK
    assert result.body == {"received": True, "warning": "Invalid payload"}
