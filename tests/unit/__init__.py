"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked dependencies.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_tag_codec.py: Tag value and metric key encoding
    - test_query_builder.py: Flux query construction
    - test_cache_manager.py: TTL cache and single-flight loading
    - test_metric_catalog.py: Catalog scan, filtering and caching
    - test_influxdb_storage.py: Store, fetch and delete
    - test_config_loader.py: Configuration loading/validation
"""
