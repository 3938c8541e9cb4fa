"""Gap synthesizer: offline markers between widely spaced reports.

History plots connect consecutive points, so a device that went silent for
an hour would otherwise look online the whole time. Each gap longer than the
staleness threshold gets one synthetic ``offline`` entry at its midpoint.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from status_monitor.schemas.report import HistoryEntry
from status_monitor.services.liveness import OFFLINE

MARKER_ID_PREFIX = "offline_"


def synthesize_gaps(entries: Sequence[HistoryEntry], threshold_seconds: float) -> list[HistoryEntry]:
    """Insert gap markers into ``entries`` and return them oldest first.

    ``entries`` must be ordered by ``server_timestamp`` descending, as the
    history query returns them. Pairs that already involve a marker are left
    alone, so feeding the output back in (re-sorted) adds nothing.
    """
    processed: list[HistoryEntry] = []
    for i, current in enumerate(entries):
        processed.append(current)
        if i + 1 >= len(entries):
            break
        following = entries[i + 1]
        if current.is_offline_marker or following.is_offline_marker:
            continue

        gap = (current.server_timestamp - following.server_timestamp).total_seconds()
        if gap > threshold_seconds:
            processed.append(
                HistoryEntry(
                    id=f"{MARKER_ID_PREFIX}{i}",
                    device_id=current.device_id,
                    status=OFFLINE,
                    server_timestamp=current.server_timestamp - timedelta(seconds=gap / 2),
                    is_offline_marker=True,
                )
            )

    processed.reverse()
    return processed
