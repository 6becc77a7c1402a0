"""
Codec Layer.

Lossless mapping between the metric model and InfluxDB identifiers:
    - encode_metric_key / decode_metric_key: metric key <-> measurement
    - encode_tag_value / decode_tag_value: escaping of tag values
    - classify_tag_key / unclassify_tag_key: classification prefixes
"""

from timeseries_influxdb.codec.tag_codec import (
    TAG_KEY_SEPARATOR,
    MeasurementName,
    classify_tag_key,
    decode_metric_key,
    decode_tag_value,
    encode_metric_key,
    encode_tag_value,
    unclassify_tag_key,
)

__all__ = [
    "TAG_KEY_SEPARATOR",
    "MeasurementName",
    "classify_tag_key",
    "decode_metric_key",
    "decode_tag_value",
    "encode_metric_key",
    "encode_tag_value",
    "unclassify_tag_key",
]
