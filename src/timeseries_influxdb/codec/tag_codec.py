"""
Tag Codec - Mapping Between Metrics and InfluxDB Identifiers.

Design Notes:
    - The metric key becomes the _measurement of every point
    - Tag keys are prefixed with their classification ("intrinsic_" or
      "meta_"), so intrinsic and meta tags with the same key never clash
      and never shadow InfluxDB columns such as _measurement or _time
    - Colons in tag values break InfluxDB filtering; they are replaced by
      a percent escape, and "%" itself is escaped so decoding is exact
    - All functions are pure
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple
from urllib.parse import quote, unquote

from timeseries_influxdb.domain.entities import Tag, TagType

logger = logging.getLogger(__name__)

TAG_KEY_SEPARATOR = "_"

# Characters kept verbatim in measurement names. Quotes, backslashes, "$",
# "%" and whitespace are percent-encoded so the name can be interpolated
# into Flux string literals and delete predicates.
_MEASUREMENT_SAFE_CHARS = "!#&'()*+,/:;<=>?@[]^`{|}"

_ESCAPE = "%"
_VALUE_ESCAPES = {"%": "%25", ":": "%3A"}
_VALUE_UNESCAPES = {v[1:]: k for k, v in _VALUE_ESCAPES.items()}
_ESCAPE_PATTERN = re.compile(r"%(25|3A)")
_MALFORMED_ESCAPE_PATTERN = re.compile(r"%(?!25|3A)")


class MeasurementName(str):
    """A metric key that has been encoded for use as an InfluxDB measurement."""

    __slots__ = ()


def encode_metric_key(key: str) -> MeasurementName:
    """
    Encode a metric key into a measurement name.

    The mapping is stable and injective; unsafe characters are
    percent-encoded rather than dropped.
    """
    return MeasurementName(quote(key, safe=_MEASUREMENT_SAFE_CHARS))


def decode_metric_key(measurement: str) -> str:
    """Restore the metric key from a measurement name."""
    return unquote(measurement)


def encode_tag_value(value: str) -> str:
    """Escape a tag value so it can be stored and filtered in InfluxDB."""
    return "".join(_VALUE_ESCAPES.get(ch, ch) for ch in value)


def decode_tag_value(value: str) -> str:
    """
    Reverse encode_tag_value().

    A value containing an escape that encode_tag_value() never produces
    was not written by this adapter; it is returned unchanged.
    """
    if _ESCAPE in value and _MALFORMED_ESCAPE_PATTERN.search(value):
        logger.debug(f"Tag value {value!r} is not validly encoded, keeping it as is")
        return value
    return _ESCAPE_PATTERN.sub(lambda m: _VALUE_UNESCAPES[m.group(1)], value)


def classify_tag_key(tag_type: TagType, tag: Tag) -> str:
    """Build the InfluxDB tag key for a tag of the given classification."""
    return f"{tag_type.value}{TAG_KEY_SEPARATOR}{tag.key}"


def unclassify_tag_key(classified_key: str) -> Optional[Tuple[TagType, str]]:
    """
    Split an InfluxDB tag key into classification and raw tag key.

    Returns:
        (TagType, raw key), or None if the key is not one of ours
        (an InfluxDB column like _measurement, or an empty raw key)
    """
    for tag_type in TagType:
        prefix = f"{tag_type.value}{TAG_KEY_SEPARATOR}"
        if classified_key.startswith(prefix) and len(classified_key) > len(prefix):
            return tag_type, classified_key[len(prefix):]
    return None
