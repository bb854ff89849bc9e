"""Repository base class used by all concrete repositories."""
import datetime
import logging
from typing import Any, Callable, Dict, List, Optional


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def normalize_timestamp(value: Any) -> str:
    """Coerce a caller-supplied timestamp to an aware UTC ISO-8601 string.

    Accepts ``datetime`` instances and ISO-8601 strings (a trailing ``Z`` is
    understood).  Naive values are assumed to already be UTC.

    Raises:
        ValueError: If *value* is neither a datetime nor a parseable string.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        value = datetime.datetime.fromisoformat(text)
    if not isinstance(value, datetime.datetime):
        raise ValueError(f"Not a timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime.datetime:
    """Inverse of :func:`normalize_timestamp`, used as a sort key."""
    return datetime.datetime.fromisoformat(value)


class BaseRepository:
    """Holds one entity collection in memory, keyed by integer id.

    Ids come from a per-repository counter that starts at 1 and only moves
    forward, so an id is never handed out twice.  Records are plain dicts
    whose keys are the client-facing field names; callers that hand records
    to the outside world should copy them first.

    Iteration order is insertion order (``dict`` preserves it).
    """

    def __init__(self) -> None:
        self.data: Dict[int, Dict] = {}
        self._next_id = 1
        self._log = logging.getLogger(f'playhub.repository.{type(self).__name__}')

    # ------------------------------------------------------------------
    # Internals for sub-classes
    # ------------------------------------------------------------------

    def _insert(self, record: Dict) -> Dict:
        """Assign the next id to *record*, store it and return it."""
        record['id'] = self._next_id
        self._next_id += 1
        self.data[record['id']] = record
        self._log.debug("Inserted id=%s", record['id'])
        return record

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def find(self, record_id: int) -> Optional[Dict]:
        """Return the live record for *record_id*, or ``None``."""
        return self.data.get(record_id)

    def all(self) -> List[Dict]:
        """Return all records in insertion order."""
        return list(self.data.values())

    def filter(self, predicate: Callable[[Dict], bool]) -> List[Dict]:
        """Return records for which *predicate* is true, in insertion order."""
        return [r for r in self.data.values() if predicate(r)]

    def __len__(self) -> int:
        return len(self.data)
