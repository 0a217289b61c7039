"""Per-host metadata log of completed snapshots.

Each archived host has ``<data_dir>/<hostname>/metadata.json``: a JSON array
with one entry per completed snapshot, in completion order.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections import defaultdict
from pathlib import Path

from sitesnap.services.models import HostSummary, MetadataEntry

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"


class MetadataRecorder:
    """Append-only host history backed by one JSON file per host.

    Appends for the same host are serialized with a per-host asyncio.Lock, so
    two jobs finishing at nearly the same time both land in the log. The file
    is rewritten through a temporary file and an atomic replace, so readers
    never observe a half-written array.

    Args:
        data_dir: Root directory holding one subdirectory per host
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def metadata_path(self, hostname: str) -> Path:
        return self.data_dir / hostname / METADATA_FILENAME

    async def record(self, hostname: str, entry: MetadataEntry) -> None:
        """Append ``entry`` to the host's log.

        Args:
            hostname: Archived host
            entry: Summary of the completed snapshot

        Raises:
            OSError: If the log cannot be written
            ValueError: If the existing log is not valid JSON
        """
        async with self._locks[hostname]:
            path = self.metadata_path(hostname)
            entries = self._load(path)
            entries.append(entry.to_json())
            self._write(path, entries)
        logger.info(
            "Recorded snapshot %s for %s (%d entries)",
            entry.snapshot_id,
            hostname,
            len(entries),
        )

    def read(self, hostname: str) -> list[MetadataEntry]:
        """Return the host's log in append order, empty if none exists."""
        return [MetadataEntry.from_json(item) for item in self._load(self.metadata_path(hostname))]

    def list_hosts(self) -> list[HostSummary]:
        """Summarize every host with at least one recorded snapshot.

        Returns:
            HostSummary list, most recently archived host first. Hosts whose
            metadata cannot be read are logged and left out.
        """
        if not self.data_dir.is_dir():
            return []

        summaries: list[HostSummary] = []
        for host_dir in sorted(self.data_dir.iterdir()):
            if not host_dir.is_dir() or not (host_dir / METADATA_FILENAME).exists():
                continue
            try:
                entries = self.read(host_dir.name)
            except (OSError, ValueError, KeyError) as exc:
                logger.error("Error reading metadata for host %s: %s", host_dir.name, exc)
                continue
            if not entries:
                continue

            by_date = sorted(entries, key=lambda e: e.created_at)
            summaries.append(
                HostSummary(
                    host=host_dir.name,
                    latest_archive=by_date[-1],
                    total_archives=len(entries),
                    first_archived=by_date[0].created_at,
                    last_archived=by_date[-1].created_at,
                )
            )

        summaries.sort(key=lambda s: s.last_archived, reverse=True)
        return summaries

    def _load(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Metadata log is not a JSON array: {path}")
        return data

    def _write(self, path: Path, entries: list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".metadata-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
