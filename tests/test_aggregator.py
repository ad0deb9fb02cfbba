"""
Tests for the flight aggregator.

Tests cover:
- Sub-window orchestration (sequential, one call per window)
- Bound normalization (swap, minute truncation)
- Chronological own-direction UTC ordering, unparseable times last
- Additivity of the merge
- Partial failures, deadline, cancellation
- Default 12 hour window
"""

import threading
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from flightboard.ingestion.aerodatabox_client import AeroDataBoxClient
from flightboard.ingestion.aggregator import FlightAggregator, chronological_key
from flightboard.ingestion.windows import TimeWindow
from flightboard.models.schedule import Direction

START = datetime(2024, 1, 1, 0, 0)
END = datetime(2024, 1, 1, 15, 0)
SECOND_WINDOW_START = datetime(2024, 1, 1, 12, 1)


@pytest.fixture
def departure(record_factory, leg_factory):
    def build(number, utc, local=None):
        return record_factory(
            number=number,
            direction=Direction.DEPARTURE,
            departure=leg_factory('LHR', 'EGLL', 'London Heathrow', local=local, utc=utc),
        )
    return build


@pytest.fixture
def arrival(record_factory, leg_factory):
    def build(number, utc):
        return record_factory(
            number=number,
            direction=Direction.ARRIVAL,
            arrival=leg_factory('LHR', 'EGLL', 'London Heathrow', utc=utc),
        )
    return build


class TestFetchWindow:

    def test_egll_fifteen_hours_uses_two_windows(self, scripted_client):
        aggregator = FlightAggregator(client=scripted_client)

        aggregator.fetch_window('EGLL', START, END)

        assert scripted_client.calls == [
            TimeWindow(START, datetime(2024, 1, 1, 12, 0)),
            TimeWindow(SECOND_WINDOW_START, END),
        ]

    def test_inverted_bounds_are_swapped(self, scripted_client):
        aggregator = FlightAggregator(client=scripted_client)

        aggregator.fetch_window('EGLL', END, START)

        assert scripted_client.calls[0].start == START
        assert scripted_client.calls[-1].end == END

    def test_bounds_truncated_to_minutes(self, scripted_client):
        aggregator = FlightAggregator(client=scripted_client)

        aggregator.fetch_window('EGLL', START.replace(second=42), END.replace(second=5, microsecond=9))

        assert scripted_client.calls[0].start == START
        assert scripted_client.calls[-1].end == END

    def test_merges_and_sorts_by_own_direction_utc(self, scripted_client_factory, departure, arrival):
        client = scripted_client_factory({
            START: [
                departure('BA 3', '2024-01-01 11:00Z'),
                arrival('EK 1', '2024-01-01 06:25Z'),
            ],
            SECOND_WINDOW_START: [
                departure('BA 9', '2024-01-01 14:00Z'),
                arrival('AA 100', '2024-01-01 09:10Z'),
            ],
        })
        aggregator = FlightAggregator(client=client)

        flights = aggregator.fetch_window('EGLL', START, END)

        assert [f.number for f in flights] == ['EK 1', 'AA 100', 'BA 3', 'BA 9']

    def test_arrival_sorted_by_arrival_leg_not_departure_leg(
        self, scripted_client_factory, record_factory, leg_factory, departure
    ):
        # Departed early from origin, lands late at the home airport
        long_haul = record_factory(
            number='QF 1',
            direction=Direction.ARRIVAL,
            departure=leg_factory('SYD', 'YSSY', 'Sydney', utc='2023-12-31 09:00Z'),
            arrival=leg_factory('LHR', 'EGLL', 'London Heathrow', utc='2024-01-01 13:00Z'),
        )
        client = scripted_client_factory({START: [long_haul, departure('BA 3', '2024-01-01 11:00Z')]})

        flights = FlightAggregator(client=client).fetch_window('EGLL', START, END)

        assert [f.number for f in flights] == ['BA 3', 'QF 1']

    def test_unparseable_time_sorts_last(self, scripted_client_factory, departure, record_factory):
        broken = departure('XX 1', 'not-a-time')
        no_leg = record_factory(number='XX 2', direction=Direction.ARRIVAL)
        client = scripted_client_factory({
            START: [broken, departure('BA 9', '2024-01-01 23:59Z')],
            SECOND_WINDOW_START: [no_leg, departure('BA 1', '2024-01-01 00:01Z')],
        })

        flights = FlightAggregator(client=client).fetch_window('EGLL', START, END)

        assert [f.number for f in flights] == ['BA 1', 'BA 9', 'XX 1', 'XX 2']

    def test_merge_is_additive(self, scripted_client_factory, departure, arrival):
        script = {
            START: [departure('BA 3', '2024-01-01 11:00Z'), arrival('EK 1', '2024-01-01 06:25Z')],
            SECOND_WINDOW_START: [departure('BA 9', '2024-01-01 14:00Z')],
        }
        aggregator = FlightAggregator(client=scripted_client_factory(script))

        full = aggregator.fetch_window('EGLL', START, END)

        pieces = []
        for window in aggregator.client.calls[:2]:
            pieces.extend(FlightAggregator(client=scripted_client_factory(script)).fetch_window(
                'EGLL', window.start, window.end
            ))
        assert sorted(pieces, key=chronological_key) == full

    def test_failed_window_contributes_nothing(
        self, mock_session, response_factory, airport_payload
    ):
        # First window fails upstream, second succeeds
        mock_session.get.side_effect = [
            response_factory(status_code=500, text='Internal Server Error'),
            response_factory(json_data=airport_payload),
        ]
        client = AeroDataBoxClient(api_key='k', api_host='h', session=mock_session)

        flights = FlightAggregator(client=client).fetch_window('EGLL', START, END)

        assert mock_session.get.call_count == 2
        assert sorted(f.number for f in flights) == ['BA 1234', 'EK 1', 'LH 200']

    def test_missing_credentials_short_circuit(self, scripted_client_factory):
        client = scripted_client_factory(configured=False)

        flights = FlightAggregator(client=client).fetch_window('EGLL', START, END)

        assert flights == []
        assert client.calls == []

    def test_unexpected_error_returns_empty(self):
        client = MagicMock()
        client.is_configured = True
        client.fetch_window.side_effect = RuntimeError('boom')

        assert FlightAggregator(client=client).fetch_window('EGLL', START, END) == []


class TestDeadlineAndCancellation:

    def test_cancel_event_returns_partial_results(self, scripted_client_factory, departure):
        client = scripted_client_factory({
            START: [departure('BA 3', '2024-01-01 11:00Z')],
            SECOND_WINDOW_START: [departure('BA 9', '2024-01-01 14:00Z')],
        })
        cancel = threading.Event()
        client.on_fetch = lambda window: cancel.set()

        flights = FlightAggregator(client=client).fetch_window(
            'EGLL', START, END, cancel_event=cancel
        )

        assert len(client.calls) == 1
        assert [f.number for f in flights] == ['BA 3']

    def test_expired_deadline_skips_remaining_windows(self, scripted_client_factory):
        client = scripted_client_factory()

        flights = FlightAggregator(client=client).fetch_window(
            'EGLL', START, END, deadline_seconds=0
        )

        assert flights == []
        assert client.calls == []

    def test_request_timeout_clamped_to_budget(self, scripted_client_factory):
        client = scripted_client_factory(timeout=30.0)

        FlightAggregator(client=client).fetch_window('EGLL', START, END, deadline_seconds=5)

        assert all(t is not None and 0 < t <= 5 for t in client.timeouts)

    def test_no_deadline_uses_client_default(self, scripted_client):
        FlightAggregator(client=scripted_client).fetch_window('EGLL', START, END)
        assert scripted_client.timeouts == [None, None]


class TestFetchDefault:

    def test_twelve_hour_lookahead(self, scripted_client):
        as_of = datetime(2024, 1, 1, 14, 37)

        FlightAggregator(client=scripted_client).fetch_default('EGLL', as_of)

        assert scripted_client.calls == [TimeWindow(as_of, as_of + timedelta(hours=12))]

    def test_excludes_cancelled(self):
        client = MagicMock()
        client.is_configured = True
        client.fetch_window.return_value = []

        FlightAggregator(client=client).fetch_default('EGLL', datetime(2024, 1, 1, 9, 0))

        args = client.fetch_window.call_args.args
        assert args[2] is False
