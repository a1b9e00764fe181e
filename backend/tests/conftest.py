"""
Theme Park Wait Times - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Sample ThemeParks.wiki payloads (destinations, live data)
- Mock API clients serving busy and quiet resorts

Payload builders live in live_payloads.py.
Note: Database fixtures are in tests/integration/conftest.py
"""

import pytest

from live_payloads import (
    RESORT, build_mock_client, make_attraction, make_live_response, make_park_rides
)


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_destinations():
    """Destination list with the resort and one unrelated destination."""
    return [
        {
            'id': 'wdw',
            'name': 'Walt Disney World® Resort',
            'slug': 'waltdisneyworldresort',
            'parks': [{'id': 'mk', 'name': 'Magic Kingdom Park'}],
        },
        {
            'id': 'dlr',
            'name': RESORT,
            'slug': 'disneylandresort',
            'parks': [
                {'id': 'dl', 'name': 'Disneyland Park'},
                {'id': 'dca', 'name': 'Disney California Adventure Park'},
            ],
        },
    ]


@pytest.fixture
def sample_live_response():
    """Live data for one park mixing attractions, shows and restaurants."""
    return make_live_response('dl', 'Disneyland Park', [
        make_attraction('space', 'Space Mountain', status='OPERATING', wait=45),
        make_attraction('matterhorn', 'Matterhorn Bobsleds', status='DOWN'),
        make_attraction('fantasmic', 'Fantasmic!', status='OPERATING', entity_type='SHOW'),
        make_attraction('bengal', 'Bengal Barbecue', status='OPERATING', entity_type='RESTAURANT'),
    ])


@pytest.fixture
def busy_client():
    """Three parks with 10 operating rides in total."""
    return build_mock_client([
        ('dl', 'Disneyland Park', make_park_rides('dl', 4)),
        ('dca', 'Disney California Adventure Park', make_park_rides('dca', 3)),
        ('dtd', 'Downtown Disney District', make_park_rides('dtd', 3)),
    ])


@pytest.fixture
def quiet_client():
    """Two parks with only 4 operating rides in total."""
    return build_mock_client([
        ('dl', 'Disneyland Park', make_park_rides('dl', 2) + make_park_rides('dlc', 3, status='CLOSED')),
        ('dca', 'Disney California Adventure Park', make_park_rides('dca', 2)),
    ])
