"""
Test Suite for the InfluxDB Time Series Storage.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Store, list, fetch and delete against an in-memory backend
    - fixtures/: Shared fakes and sample data

Running Tests:
    pytest tests/                               # All tests
    pytest tests/unit/                          # Unit tests only
    pytest tests/integration/                   # Integration tests only
    pytest --cov=src/timeseries_influxdb        # With coverage
"""
