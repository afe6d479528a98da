# -*- coding: utf-8 -*-
"""
Tests de MessagingEventService y del CAS de estado de instancia.
"""

from unittest.mock import AsyncMock

from sqlalchemy import select

from app.modules.messaging.enums import InstanceStatus, MessagingEventKind, MessagingProvider
from app.modules.messaging.models import WhatsAppInstance
from app.modules.messaging.repositories import WhatsAppInstanceRepository
from app.modules.messaging.schemas import MessagingEvent
from app.modules.messaging.services.messaging_event_service import (
    RESULT_MESSAGE_DISPATCHED,
    RESULT_NO_CHANGE,
    RESULT_STATUS_UPDATED,
    MessagingEventService,
)
from app.shared.config.logging_config import mask_phone
from tests.factories import create_instance, create_organization


def _connection(status: InstanceStatus) -> MessagingEvent:
    return MessagingEvent(
        provider=MessagingProvider.EVOLUTION,
        kind=MessagingEventKind.CONNECTION_UPDATE,
        instance_name="tienda-demo-wa",
        connection_status=status,
    )


async def _reload(db, instance_id: str) -> WhatsAppInstance:
    stmt = select(WhatsAppInstance).where(WhatsAppInstance.id == instance_id).execution_options(populate_existing=True)
    return (await db.execute(stmt)).scalar_one()


class TestConnectionUpdates:
    async def test_status_changes_and_connected_at_is_stamped(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id)

        result = await MessagingEventService().apply(db, instance, _connection(InstanceStatus.CONNECTED))
        await db.commit()

        assert result == RESULT_STATUS_UPDATED
        instance = await _reload(db, instance.id)
        assert instance.status == InstanceStatus.CONNECTED
        assert instance.connected_at is not None

    async def test_disconnect_clears_connected_at(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id)
        service = MessagingEventService()

        await service.apply(db, instance, _connection(InstanceStatus.CONNECTED))
        await db.commit()
        instance = await _reload(db, instance.id)
        await service.apply(db, instance, _connection(InstanceStatus.DISCONNECTED))
        await db.commit()

        instance = await _reload(db, instance.id)
        assert instance.status == InstanceStatus.DISCONNECTED
        assert instance.connected_at is None

    async def test_repeated_status_does_not_write(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id, status=InstanceStatus.CONNECTED)
        repo = WhatsAppInstanceRepository()
        repo.compare_and_set_status = AsyncMock(wraps=repo.compare_and_set_status)

        result = await MessagingEventService(instance_repo=repo).apply(db, instance, _connection(InstanceStatus.CONNECTED))

        assert result == RESULT_NO_CHANGE
        repo.compare_and_set_status.assert_not_awaited()

    async def test_stale_instance_is_reloaded_on_conflict(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id, status=InstanceStatus.DISCONNECTED)
        repo = WhatsAppInstanceRepository()
        # otra réplica conectó la instancia entre la lectura y la escritura
        await repo.compare_and_set_status(
            db, instance_id=instance.id, expected=InstanceStatus.DISCONNECTED, new_status=InstanceStatus.CONNECTING
        )
        await db.commit()

        result = await MessagingEventService(instance_repo=repo).apply(db, instance, _connection(InstanceStatus.CONNECTED))
        await db.commit()

        assert result == RESULT_STATUS_UPDATED
        assert (await _reload(db, instance.id)).status == InstanceStatus.CONNECTED

    async def test_cas_only_applies_from_expected_status(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id, status=InstanceStatus.CONNECTED)
        repo = WhatsAppInstanceRepository()

        applied = await repo.compare_and_set_status(
            db, instance_id=instance.id, expected=InstanceStatus.DISCONNECTED, new_status=InstanceStatus.CONNECTING
        )

        assert applied is False


class TestInboundMessages:
    async def test_message_is_dispatched_to_handler(self, db):
        org = await create_organization(db)
        instance = await create_instance(db, org.id)
        handler = AsyncMock()
        event = MessagingEvent(
            provider=MessagingProvider.EVOLUTION,
            kind=MessagingEventKind.MESSAGE_RECEIVED,
            instance_name=instance.instance_name,
            sender_phone="573001234567",
            message_id="3EB0",
            text="Hola",
        )

        result = await MessagingEventService(message_handler=handler).apply(db, instance, event)

        assert result == RESULT_MESSAGE_DISPATCHED
        handler.handle_message.assert_awaited_once_with(instance, event)


class TestMaskPhone:
    def test_mask(self):
        assert mask_phone("573001234567") == "********4567"
        assert mask_phone("123") == "***"
        assert mask_phone(None) == ""
