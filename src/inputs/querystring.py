"""
Querystring payload extraction.

Turns the querystring of a tracker GET request into a non-empty, ordered
list of name-value pairs, or a diagnostic failure.

Background on the percent handling: on 17th August 2013 CloudFront changed
its access log format without notice. It went from always encoding ``%``
characters to only encoding the ``%`` characters which were not already
encoded. To stay backwards compatible with logs written before the change,
every singly-encoded ``%`` is "double-encoded" before decoding:

    "page=Celestial%2520Tarot"     -> unchanged
    "page=Dreaming%20Way%20Tarot"  -> "page=Dreaming%2520Way%2520Tarot"

so ``Dreaming%20Way%20Tarot`` decodes to the literal text ``%20`` rather
than to spaces, exactly as the older logs did. Downstream enrichment is
expected to decode values a second time.
"""

import re
from typing import List, Union
from urllib.parse import parse_qsl

from src.inputs.results import (
    ExtractionError,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
)
from src.schemas.canonical_input import NameValueNel, NameValuePair, NVGetPayload

# A % which is not the start of an escaped %
_SINGLY_ENCODED_PCT = re.compile(r"%(?!25)")


def normalize(qs: str) -> str:
    """
    Double-encode every % in the querystring that is only singly encoded.

    Only ``%`` characters not followed by ``25`` are touched, so text that
    is already correctly double-encoded passes through unchanged. The
    transform is not safe against being applied twice to input where a bare
    ``%25`` was meant as a literal ``%`` followed by ``25``.

    Args:
        qs: Raw querystring (may be empty)

    Returns:
        The querystring with %s double-encoded
    """
    return _SINGLY_ENCODED_PCT.sub("%25", qs)


def _parse_qs(qs: str, encoding: str) -> List[NameValuePair]:
    """
    Decode the querystring into pairs.

    Raises on an unknown encoding or any decode error, so it must only be
    called from code that turns exceptions into failures.
    """
    # unquote skips decoding entirely when there are no escapes left,
    # so resolve the codec up front. Decoding empty bytes also rejects
    # codecs that are not text encodings (rot13, hex, ...)
    b"".decode(encoding)
    return [
        NameValuePair(name, value)
        for name, value in parse_qsl(
            normalize(qs),
            keep_blank_values=True,
            encoding=encoding,
            errors="strict",
        )
    ]


def extract(qs: str, encoding: str) -> ExtractionResult:
    """
    Extract the name-value pairs of a GET payload from a querystring.

    Args:
        qs: The querystring to extract name-value pairs from
        encoding: The encoding used by this querystring, e.g. "UTF-8"

    Returns:
        ExtractionSuccess with a NameValueNel, or ExtractionFailure whose
        error names the original querystring and encoding
    """
    # Nothing to decode, so the encoding is never consulted
    if qs == "":
        return ExtractionFailure(ExtractionError.empty_payload(qs, encoding))

    try:
        pairs = _parse_qs(qs, encoding)
    except Exception as e:
        return ExtractionFailure(ExtractionError.decode_fault(qs, encoding, str(e)))

    if not pairs:
        return ExtractionFailure(ExtractionError.empty_payload(qs, encoding))

    return ExtractionSuccess(NameValueNel(*pairs))


def extract_nv_get_payload(
    qs: str, encoding: str
) -> Union[NVGetPayload, ExtractionFailure]:
    """Extract pairs and wrap them as an NVGetPayload, passing failures through."""
    result = extract(qs, encoding)
    if isinstance(result, ExtractionSuccess):
        return result.to_payload()
    return result
