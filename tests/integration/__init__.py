"""
Integration Tests - End-to-End Storage Tests.

These tests verify that all components work together correctly.
They use the FakeInfluxBackend to avoid a running InfluxDB while
exercising the real encoding, query and catalog code.

Test Files:
    - test_store_fetch_roundtrip.py: Store, list, fetch and delete
"""
