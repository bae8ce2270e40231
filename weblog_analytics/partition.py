"""Web Log Analytics - Status-code partitioning"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from .errors import InvalidArgumentError, PartitionModeError
from .models import LogRecord, PartitionIndex

logger = logging.getLogger(__name__)


def build_partition_index(records: Iterable[LogRecord], strict: bool = False,
                          static_status: Optional[int] = None) -> PartitionIndex:
    """Group well-formed records by status code.

    Without ``static_status`` every distinct status becomes a partition and
    each record lands in exactly one of them. Strict mode refuses that fully
    dynamic build; with ``static_status`` only the named partition is built.

    Raises:
        PartitionModeError: strict mode without a static partition key.
        InvalidArgumentError: ``static_status`` is not an integer.
    """
    if static_status is not None and (not isinstance(static_status, int) or isinstance(static_status, bool)):
        raise InvalidArgumentError(f"static_status must be an integer, got {static_status!r}")
    if strict and static_status is None:
        raise PartitionModeError(
            "strict partition mode requires a static status; "
            "use nonstrict mode for a fully dynamic build")

    buckets = defaultdict(list)
    for record in records:
        if not record.is_well_formed:
            continue
        if static_status is not None and record.status != static_status:
            continue
        buckets[record.status].append(record)

    index = PartitionIndex(buckets)
    logger.debug("Built %d partition(s) over %d record(s)", len(index), index.record_count)
    return index
