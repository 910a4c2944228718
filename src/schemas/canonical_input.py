# src/schemas/canonical_input.py
"""
Canonical Input Schema for tracker events.

Every collector input format (CloudFront access logs, Clojure collector logs,
etc.) is converted into this unified record before the collector-agnostic
enrichment stage runs. The record is built once by a collector adapter and
never mutated afterwards.

Tracker payloads form a closed tagged union discriminated by ``kind``:
- NVGetPayload: name-value pairs taken from a GET querystring
- JsonGetPayload: a raw JSON string delivered via a GET parameter
"""

from collections.abc import Sequence
from typing import (
    Annotated,
    Iterator,
    List,
    Literal,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, PlainSerializer


class NameValuePair(NamedTuple):
    """A single decoded querystring parameter."""

    name: str
    value: str


class NameValueNel(Sequence):
    """
    Immutable, non-empty, ordered sequence of NameValuePairs.

    The constructor takes the first pair separately from the rest, so an
    empty instance cannot be built. Order and duplicate names are kept as
    they appeared in the querystring.

    Example:
        >>> nel = NameValueNel(("e", "pv"), ("page", "home"))
        >>> nel.head
        NameValuePair(name='e', value='pv')
    """

    __slots__ = ("_pairs",)

    def __init__(self, head: Tuple[str, str], *tail: Tuple[str, str]):
        pairs = (head,) + tail
        object.__setattr__(
            self, "_pairs", tuple(NameValuePair(*pair) for pair in pairs)
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, index):
        return self._pairs[index]

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[NameValuePair]:
        return iter(self._pairs)

    def __eq__(self, other) -> bool:
        if isinstance(other, NameValueNel):
            return self._pairs == other._pairs
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __repr__(self) -> str:
        return f"NameValueNel{self._pairs!r}"

    @property
    def head(self) -> NameValuePair:
        """First pair (always present)."""
        return self._pairs[0]

    @property
    def tail(self) -> Tuple[NameValuePair, ...]:
        """All pairs after the first (possibly empty)."""
        return self._pairs[1:]

    def to_list(self) -> List[NameValuePair]:
        return list(self._pairs)

    def get(self, name: str) -> Optional[str]:
        """
        Get the first value for a parameter name.

        Args:
            name: Parameter name

        Returns:
            The first value, or None if the name is absent
        """
        for pair in self._pairs:
            if pair.name == name:
                return pair.value
        return None

    def get_all(self, name: str) -> List[str]:
        """Get every value for a parameter name, in querystring order."""
        return [pair.value for pair in self._pairs if pair.name == name]


# Dumped as [[name, value], ...] so the record can be written as JSON
SerializableNel = Annotated[
    NameValueNel,
    PlainSerializer(
        lambda nel: [list(pair) for pair in nel], return_type=List[List[str]]
    ),
]


# ============================================================================
# TRACKER PAYLOADS
# ============================================================================


class NVGetPayload(BaseModel):
    """
    A tracker payload for a single event, delivered as a set of
    name-value pairs on the querystring of a GET.

    Built from the output of ``src.inputs.querystring.extract``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["nv_get"] = "nv_get"
    payload: SerializableNel


class JsonGetPayload(BaseModel):
    """
    A tracker payload for a single event, delivered via a ``data=``
    parameter on the querystring of a GET.

    The JSON is passed through unparsed.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["json_get"] = "json_get"
    payload: str


# All GET payloads. Every payload sent today arrives via GET.
GetPayload = Union[NVGetPayload, JsonGetPayload]

TrackerPayload = Annotated[GetPayload, Field(discriminator="kind")]


# ============================================================================
# CANONICAL INPUT
# ============================================================================


class InputSource(BaseModel):
    """Unambiguously identifies the collector source of an input line."""

    model_config = ConfigDict(frozen=True)

    collector: str = Field(
        ..., min_length=1, description="Collector name/version, e.g. 'cloudfront'"
    )
    hostname: Optional[str] = Field(
        default=None, description="Host the collector ran on"
    )


class CanonicalInput(BaseModel):
    """
    The canonical input format for the enrichment process.

    It should be possible to convert any collector input format to this
    format, ready for the collector-agnostic stage of the pipeline.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime = Field(..., description="Collector timestamp")
    payload: TrackerPayload
    source: InputSource
    encoding: str = Field(..., min_length=1)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referer_uri: Optional[str] = None
    # May be empty, unlike the payload pairs
    headers: Tuple[str, ...] = ()
    user_id: Optional[str] = None
