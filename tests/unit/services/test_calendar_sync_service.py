"""
Tests for CalendarSyncService.

Runs the synchronizer against the real in-memory store with a fake remote
client. Open hours are converted using the fixed mid-January clock.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from ghl_calendar_sync.config import SyncConfig
from ghl_calendar_sync.db import CalendarRecord, OpenHoursEntry, TeamMemberAssignment
from ghl_calendar_sync.exceptions import RemoteFetchFailedError, RepositoryError
from ghl_calendar_sync.repositories import SyncRepository
from ghl_calendar_sync.schemas import SyncStatus
from ghl_calendar_sync.services import CalendarSyncService, TokenService
from tests.fixtures.factories import AccountCredentialFactory, AccountDetailsFactory
from tests.fixtures.fake_client import FakeRefresher, fixed_clock, make_calendar_payload


class TestSyncCalendar:
    """Happy path and idempotence."""

    def test_persists_calendar_open_hours_and_team(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert result.status == SyncStatus.SUCCESS
        assert result.saved_id is not None
        assert len(result.open_hours_ids) == 3
        assert len(result.team_member_ids) == 2

        record = repository.get(CalendarRecord, result.saved_id)
        assert record.ghl_calendar_id == calendar_id
        assert record.ghl_location_id == location_id
        assert record.slot_interval == 1800
        assert record.slot_duration == 3600
        assert record.pre_buffer_time == 600
        assert record.allow_booking_after == 86400
        assert record.allow_booking_for == 604800
        assert record.appointments_per_slot == 1
        assert record.appointments_per_day == 8
        assert record.allow_cancellation is True
        assert record.allow_reschedule is False

    def test_uses_stored_token(
        self, calendar_sync_service, fake_client, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert fake_client.calls[0] == ("get_calendar", calendar_id, "live-token")

    def test_resync_is_idempotent(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        first = calendar_sync_service.sync_calendar(calendar_id, location_id)
        second = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert second.saved_id == first.saved_id
        assert sorted(second.open_hours_ids) == sorted(first.open_hours_ids)
        assert sorted(second.team_member_ids) == sorted(first.team_member_ids)
        assert repository.count(CalendarRecord) == 1
        assert repository.count(OpenHoursEntry) == 3
        assert repository.count(TeamMemberAssignment) == 2

    def test_resync_applies_remote_changes(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)
        first = calendar_sync_service.sync_calendar(calendar_id, location_id)

        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id, location_id, name="Renamed", slotDuration=45, slotDurationUnit="mins"
        )
        calendar_sync_service.sync_calendar(calendar_id, location_id)

        record = repository.get(CalendarRecord, first.saved_id)
        assert record.name == "Renamed"
        assert record.slot_duration == 2700

    def test_no_team_members(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id, location_id, teamMembers=[]
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert result.team_member_ids == []
        assert repository.count(TeamMemberAssignment) == 0
        assert len(result.open_hours_ids) == 3

    def test_missing_units_default_to_minutes(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        payload = make_calendar_payload(calendar_id, location_id, slotDuration=30)
        payload.pop("slotDurationUnit")
        payload.pop("allowBookingFor")
        fake_client.calendars[calendar_id] = payload

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        record = repository.get(CalendarRecord, result.saved_id)
        assert record.slot_duration == 1800
        assert record.allow_booking_for == 0


class TestIsActive:
    def test_remote_inactive_flag_kept(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id, location_id, isActive=False
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert repository.get(CalendarRecord, result.saved_id).is_active is False

    def test_absent_flag_defaults_to_active(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        payload = make_calendar_payload(calendar_id, location_id)
        payload.pop("isActive")
        fake_client.calendars[calendar_id] = payload

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert repository.get(CalendarRecord, result.saved_id).is_active is True

    def test_preserve_always_active(
        self, repository, token_service, fake_client, credential, calendar_id, location_id
    ):
        service = CalendarSyncService(
            repository,
            token_service,
            client=fake_client,
            config=SyncConfig(preserve_always_active=True),
            clock=fixed_clock,
        )
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id, location_id, isActive=False
        )

        result = service.sync_calendar(calendar_id, location_id)

        assert repository.get(CalendarRecord, result.saved_id).is_active is True


class TestOpenHoursTimezone:
    def test_new_york_wall_clock_stored_in_utc(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        AccountDetailsFactory(ghl_id=location_id, timezone="America/New_York")
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            openHours=[
                {
                    "daysOfTheWeek": [1],
                    "hours": [{"openHour": 9, "openMinute": 0, "closeHour": 17, "closeMinute": 30}],
                }
            ],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        entry = repository.get(OpenHoursEntry, result.open_hours_ids[0])
        assert (entry.open_hour, entry.open_minute) == (14, 0)
        assert (entry.close_hour, entry.close_minute) == (22, 30)
        assert entry.day_of_week == 1
        assert entry.ghl_calendar_id == calendar_id

    def test_utc_location_stored_unchanged(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        AccountDetailsFactory(ghl_id=location_id, timezone="UTC")
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        for entry_id in result.open_hours_ids:
            entry = repository.get(OpenHoursEntry, entry_id)
            assert (entry.open_hour, entry.close_hour, entry.close_minute) == (9, 17, 30)

    def test_unknown_timezone_falls_back_to_utc(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        AccountDetailsFactory(ghl_id=location_id, timezone="Mars/Olympus_Mons")
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        entry = repository.get(OpenHoursEntry, result.open_hours_ids[0])
        assert entry.open_hour == 9

    def test_timezone_lookup_error_falls_back_to_default(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        AccountDetailsFactory(ghl_id=location_id, timezone="America/New_York")
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        with patch(
            "ghl_calendar_sync.repositories.sync_repository.get_account_timezone",
            side_effect=OperationalError("SELECT account_details", {}, Exception("db gone")),
        ):
            result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert repository.count(CalendarRecord) == 1
        entry = repository.get(OpenHoursEntry, result.open_hours_ids[0])
        assert (entry.open_hour, entry.close_hour) == (9, 17)

    def test_repository_wraps_timezone_lookup_error(self, repository, location_id):
        with patch(
            "ghl_calendar_sync.repositories.sync_repository.get_account_timezone",
            side_effect=OperationalError("SELECT account_details", {}, Exception("db gone")),
        ):
            with pytest.raises(RepositoryError) as exc_info:
                repository.get_account_timezone(location_id)

        assert exc_info.value.context["ghl_id"] == location_id

    def test_later_block_for_same_day_replaces_earlier(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            openHours=[
                {
                    "daysOfTheWeek": [4],
                    "hours": [
                        {"openHour": 8, "openMinute": 0, "closeHour": 12, "closeMinute": 0},
                        {"openHour": 13, "openMinute": 0, "closeHour": 18, "closeMinute": 0},
                    ],
                }
            ],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert repository.count(OpenHoursEntry) == 1
        entry = repository.get(OpenHoursEntry, result.open_hours_ids[0])
        assert (entry.open_hour, entry.close_hour) == (13, 18)


class TestPartialFailure:
    def test_failing_day_does_not_stop_other_days(
        self, db_session, token_service, fake_client, credential, calendar_id, location_id
    ):
        class FlakyRepository(SyncRepository):
            def insert_row(self, model_class, record):
                if model_class is OpenHoursEntry and record["day_of_week"] == 2:
                    raise RuntimeError("write rejected")
                return super().insert_row(model_class, record)

        repository = FlakyRepository(db_session)
        service = CalendarSyncService(
            repository, token_service, client=fake_client, config=SyncConfig(), clock=fixed_clock
        )
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        result = service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert result.status == SyncStatus.PARTIAL_SUCCESS
        assert result.failed_record_ids == ["day:2"]
        days = sorted(e.day_of_week for e in repository.list(OpenHoursEntry))
        assert days == [1, 3]
        assert len(result.team_member_ids) == 2

    def test_invalid_day_skipped(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            openHours=[
                {
                    "daysOfTheWeek": [9, 5],
                    "hours": [{"openHour": 9, "openMinute": 0, "closeHour": 17, "closeMinute": 0}],
                }
            ],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.failed_record_ids == ["day:9"]
        assert [e.day_of_week for e in repository.list(OpenHoursEntry)] == [5]

    def test_null_minute_fails_only_that_day(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            openHours=[
                {
                    "daysOfTheWeek": [1],
                    "hours": [
                        {"openHour": 9, "openMinute": None, "closeHour": 17, "closeMinute": 0}
                    ],
                },
                {
                    "daysOfTheWeek": [2, 3],
                    "hours": [{"openHour": 8, "openMinute": 0, "closeHour": 12, "closeMinute": 0}],
                },
            ],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert result.failed_record_ids == ["day:1"]
        assert repository.count(CalendarRecord) == 1
        assert sorted(e.day_of_week for e in repository.list(OpenHoursEntry)) == [2, 3]
        assert len(result.team_member_ids) == 2

    def test_malformed_open_hours_entry_skipped(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            openHours=[
                "9-5 weekdays",
                {
                    "daysOfTheWeek": [4],
                    "hours": [{"openHour": 10, "openMinute": 0, "closeHour": 14, "closeMinute": 0}],
                },
            ],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.failed_record_ids == ["open_hours:0"]
        assert [e.day_of_week for e in repository.list(OpenHoursEntry)] == [4]

    def test_non_numeric_priority_fails_only_that_member(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            teamMembers=[{"userId": "u1", "priority": "high"}, {"userId": "u2", "priority": 1}],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is True
        assert result.failed_record_ids == ["user:u1"]
        assert repository.count(CalendarRecord) == 1
        assert [m.user_id for m in repository.list(TeamMemberAssignment)] == ["u2"]
        assert len(result.open_hours_ids) == 3

    def test_team_member_without_user_id_skipped(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id,
            location_id,
            teamMembers=[{"priority": 1}, {"userId": "user-9", "isPrimary": True}],
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.is_partial
        assert result.failed_record_ids == ["team_member:0"]
        assert [m.user_id for m in repository.list(TeamMemberAssignment)] == ["user-9"]


class TestSyncCalendarFailures:
    def test_missing_token_makes_no_remote_call(
        self, calendar_sync_service, fake_client, repository, calendar_id, location_id
    ):
        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is False
        assert result.error_code == "TOKEN_UNAVAILABLE"
        assert fake_client.calls == []
        assert repository.count(CalendarRecord) == 0

    def test_unrefreshable_token_makes_no_remote_call(
        self, repository, fake_client, calendar_id, location_id
    ):
        AccountCredentialFactory(account_id=location_id, expires_in=0)
        service = CalendarSyncService(
            repository,
            TokenService(repository, FakeRefresher(token=None), clock=fixed_clock),
            client=fake_client,
            config=SyncConfig(),
            clock=fixed_clock,
        )

        result = service.sync_calendar(calendar_id, location_id)

        assert result.error_code == "TOKEN_UNAVAILABLE"
        assert fake_client.calls == []

    def test_remote_calendar_not_found(
        self, calendar_sync_service, repository, credential, calendar_id, location_id
    ):
        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is False
        assert result.error_code == "REMOTE_CALENDAR_NOT_FOUND"
        assert repository.count(CalendarRecord) == 0

    def test_remote_fetch_failure(
        self, calendar_sync_service, fake_client, credential, calendar_id, location_id
    ):
        fake_client.fail_with = RemoteFetchFailedError("GET /calendars failed", http_status=503)

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is False
        assert result.error_code == "REMOTE_FETCH_FAILED"
        assert result.details["context"]["http_status"] == 503

    def test_unknown_duration_unit_fails_sync(
        self, calendar_sync_service, fake_client, repository, credential, calendar_id, location_id
    ):
        fake_client.calendars[calendar_id] = make_calendar_payload(
            calendar_id, location_id, slotDurationUnit="fortnights"
        )

        result = calendar_sync_service.sync_calendar(calendar_id, location_id)

        assert result.success is False
        assert result.error_code == "INVALID_FORMAT"
        assert repository.count(CalendarRecord) == 0

    def test_calendar_persist_failure(
        self, db_session, token_service, fake_client, credential, calendar_id, location_id
    ):
        class ReadOnlyRepository(SyncRepository):
            def insert_row(self, model_class, record):
                raise RuntimeError("read-only replica")

        service = CalendarSyncService(
            ReadOnlyRepository(db_session),
            token_service,
            client=fake_client,
            config=SyncConfig(),
            clock=fixed_clock,
        )
        fake_client.calendars[calendar_id] = make_calendar_payload(calendar_id, location_id)

        result = service.sync_calendar(calendar_id, location_id)

        assert result.success is False
        assert result.error_code == "CALENDAR_PERSIST_FAILED"
        assert result.open_hours_ids == []

    def test_missing_arguments(self, calendar_sync_service, fake_client):
        result = calendar_sync_service.sync_calendar("", "loc-1")

        assert result.success is False
        assert result.error_code == "MISSING_REQUIRED"
        assert fake_client.calls == []
