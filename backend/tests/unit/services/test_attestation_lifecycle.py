"""
Unit Tests for AttestationService and the attestation batch jobs
"""
from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from app.models.attestation import Attestation
from app.models.enums import AttestationStatus, RequestStatus
from app.schemas.attestation import AttestationCreate
from app.services.attestation_jobs import attestation_jobs
from app.services.attestation_service import attestation_service, reminder_due
from app.services.installation_service import installation_service
from app.services.installation_sync_service import load_request_graph

PERIOD_START = date(2025, 9, 1)
PERIOD_END = date(2026, 6, 30)


@pytest.fixture
def installed_request(db_session: AsyncSession, make_request, it_user):
    async def factory(academic_year: str = "2025"):
        request = await make_request(academic_year=academic_year)
        return await installation_service.install_all_rooms(
            db_session, request.id, request.items[0].id, it_user.id
        )
    return factory


async def create_attestation(db_session: AsyncSession, request_id: str, **overrides) -> Attestation:
    data = {
        "request_id": request_id,
        "academic_year": "2025",
        "period_start": PERIOD_START,
        "period_end": PERIOD_END,
    }
    data.update(overrides)
    return await attestation_service.create(db_session, AttestationCreate(**data))


class TestAttestationCreation:

    async def test_create_pending(self, db_session: AsyncSession, make_request):
        request = await make_request()

        attestation = await create_attestation(db_session, request.id)

        assert attestation.status == AttestationStatus.PENDING
        assert attestation.academic_year == "2025"
        assert attestation.confirmation_date is None
        assert (await attestation_service.get_by_request(db_session, request.id)).id == attestation.id

    async def test_one_attestation_per_request(self, db_session: AsyncSession, make_request):
        request = await make_request()
        await create_attestation(db_session, request.id)

        with pytest.raises(ConflictError) as exc_info:
            await create_attestation(db_session, request.id)
        assert exc_info.value.details == {"field": "request_id"}

    async def test_unknown_request(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await create_attestation(db_session, "00000000-0000-0000-0000-000000000000")

    async def test_period_must_be_ordered(self, db_session: AsyncSession, make_request):
        request = await make_request()

        with pytest.raises(ValidationError):
            await create_attestation(db_session, request.id, period_start=PERIOD_END, period_end=PERIOD_START)

    async def test_period_must_fit_the_academic_year(self, db_session: AsyncSession, make_request):
        request = await make_request()

        with pytest.raises(ValidationError) as exc_info:
            await create_attestation(db_session, request.id, period_end=date(2026, 9, 30))
        assert exc_info.value.details == {"field": "period_end"}

    async def test_cannot_be_created_confirmed(self, db_session: AsyncSession, make_request):
        request = await make_request()

        with pytest.raises(ValidationError):
            await create_attestation(db_session, request.id, status=AttestationStatus.CONFIRMED)

    async def test_not_required_is_accepted(self, db_session: AsyncSession, make_request):
        request = await make_request()

        attestation = await create_attestation(db_session, request.id, status=AttestationStatus.NOT_REQUIRED)

        assert attestation.status == AttestationStatus.NOT_REQUIRED


class TestAttestationConfirmation:

    async def test_confirm_extends_request(self, db_session: AsyncSession, installed_request):
        request = await installed_request()
        attestation = await create_attestation(db_session, request.id)

        confirmed = await attestation_service.confirm(db_session, attestation.id)

        assert confirmed.status == AttestationStatus.CONFIRMED
        assert confirmed.confirmation_date is not None
        request = await load_request_graph(db_session, request.id)
        assert request.expiration_date == PERIOD_END

    async def test_confirm_twice(self, db_session: AsyncSession, installed_request):
        request = await installed_request()
        attestation = await create_attestation(db_session, request.id)
        await attestation_service.confirm(db_session, attestation.id)

        with pytest.raises(InvalidTransitionError) as exc_info:
            await attestation_service.confirm(db_session, attestation.id)
        assert exc_info.value.details["entity"] == "Attestation"

    async def test_expire_leaves_confirmed_alone(self, db_session: AsyncSession, installed_request):
        request = await installed_request()
        attestation = await create_attestation(db_session, request.id)
        await attestation_service.confirm(db_session, attestation.id)

        result = await attestation_service.expire(db_session, attestation.id)

        assert result.status == AttestationStatus.CONFIRMED

    async def test_expired_cannot_be_confirmed(self, db_session: AsyncSession, make_request):
        request = await make_request()
        attestation = await create_attestation(db_session, request.id)
        await attestation_service.expire(db_session, attestation.id)

        with pytest.raises(InvalidTransitionError):
            await attestation_service.confirm(db_session, attestation.id)


class TestAttestationJobs:

    async def test_expire_due_only_touches_past_pending(self, db_session: AsyncSession, make_request):
        past = await create_attestation(db_session, (await make_request()).id)
        current = await create_attestation(
            db_session, (await make_request()).id, period_end=date(2026, 8, 31)
        )

        count = await attestation_jobs.run_expiration(db_session, today=date(2026, 7, 15))

        assert count == 1
        assert (await attestation_service.get(db_session, past.id)).status == AttestationStatus.EXPIRED
        assert (await attestation_service.get(db_session, current.id)).status == AttestationStatus.PENDING

    async def test_reminder_window(self, db_session: AsyncSession, make_request):
        soon = await create_attestation(db_session, (await make_request()).id)
        later = await create_attestation(
            db_session, (await make_request()).id, period_end=date(2026, 8, 31)
        )

        due = await attestation_jobs.run_reminder_check(db_session, window_days=30, today=date(2026, 6, 10))

        assert [a.id for a in due] == [soon.id]
        assert later.id not in {a.id for a in due}

    async def test_reminder_interval(self, db_session: AsyncSession, make_request):
        attestation = await create_attestation(db_session, (await make_request()).id)
        today = date(2026, 6, 10)
        await attestation_service.mark_reminder_sent(db_session, attestation.id, today=today)

        assert await attestation_service.list_reminders_due(db_session, 30, today + timedelta(days=3)) == []
        due = await attestation_service.list_reminders_due(db_session, 30, today + timedelta(days=7))
        assert [a.id for a in due] == [attestation.id]

    def test_reminder_due_rules(self):
        attestation = Attestation(
            status=AttestationStatus.PENDING,
            period_end=date(2026, 6, 30),
            reminder_sent_date=None,
        )
        assert reminder_due(attestation, date(2026, 6, 10), 30) is True
        assert reminder_due(attestation, date(2026, 5, 1), 30) is False

        attestation.reminder_sent_date = date(2026, 6, 8)
        assert reminder_due(attestation, date(2026, 6, 10), 30) is False

        attestation.status = AttestationStatus.CONFIRMED
        attestation.reminder_sent_date = None
        assert reminder_due(attestation, date(2026, 6, 10), 30) is False

    async def test_campaign_targets_installed_requests_once(
        self, db_session: AsyncSession, installed_request, make_request
    ):
        installed = await installed_request()
        await installed_request(academic_year="2024")
        pending = await make_request()
        assert installed.status == RequestStatus.INSTALLED

        assert await attestation_service.create_campaign(db_session, "2025") == 1
        assert await attestation_service.create_campaign(db_session, "2025") == 0

        attestation = await attestation_service.get_by_request(db_session, installed.id)
        assert attestation.period_start == date(2025, 9, 1)
        assert attestation.period_end == date(2026, 8, 31)
        with pytest.raises(NotFoundError):
            await attestation_service.get_by_request(db_session, pending.id)

    async def test_find_all_filters(self, db_session: AsyncSession, make_request):
        first = await create_attestation(db_session, (await make_request()).id)
        await create_attestation(
            db_session, (await make_request()).id, status=AttestationStatus.NOT_REQUIRED
        )

        pending = await attestation_service.find_all(db_session, academic_year="2025", status=AttestationStatus.PENDING)

        assert [a.id for a in pending] == [first.id]
        assert len(await attestation_service.find_all(db_session)) == 2
