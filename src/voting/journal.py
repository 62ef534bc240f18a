"""
Transaction journal v1 (append-only, hash-chained)

Every committed contract transaction becomes one entry:
  {index, method, sender, args, events, recorded_at, prev_seal, seal}
where seal = sha256(canonical JSON of the entry without "seal").

Optional JSONL persistence: one canonical line per entry, BOM-tolerant reads.
A journal bound to an existing file continues that file's chain.
Checkpoints carry a deterministic Merkle root over the seals of a range.
"""
from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence


GENESIS_SEAL = "0" * 64


class JournalIntegrityError(ValueError):
    pass


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _canonical_dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), sort_keys=True)


def compute_seal(entry: Dict[str, Any]) -> str:
    body = dict(entry)
    body.pop("seal", None)
    return hashlib.sha256(_canonical_dumps(body).encode("utf-8")).hexdigest()


def seal_merkle_root(seals: Sequence[str]) -> str:
    """
    Merkle root over hex seals, returned as hex.
    An odd level pairs its last seal with itself; an empty range hashes b"".
    """
    if not seals:
        return hashlib.sha256(b"").hexdigest()
    level = [bytes.fromhex(s) for s in seals]
    while len(level) > 1:
        if len(level) % 2:
            level.append(level[-1])
        level = [hashlib.sha256(left + right).digest() for left, right in zip(level[::2], level[1::2])]
    return level[0].hex()


def _read_entries(path: Path) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for line in path.read_text(encoding="utf-8-sig").splitlines():
        line = line.strip()
        if line:
            entries.append(json.loads(line))
    return entries


class Journal:
    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path else None
        self._entries: List[Dict[str, Any]] = []
        if self.path is not None and self.path.is_file():
            self._entries = _read_entries(self.path)
            self.verify()

    @classmethod
    def load(cls, path: Path) -> "Journal":
        return cls(path=path)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> List[Dict[str, Any]]:
        return [dict(e) for e in self._entries]

    def last_seal(self) -> str:
        return self._entries[-1]["seal"] if self._entries else GENESIS_SEAL

    def append(
        self,
        *,
        method: str,
        sender: str,
        args: List[Any],
        events: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "index": len(self._entries),
            "method": method,
            "sender": sender,
            "args": list(args),
            "events": list(events),
            "recorded_at": _utc_now_iso(),
            "prev_seal": self.last_seal(),
        }
        entry["seal"] = compute_seal(entry)

        # disk first: a failed write must not leave a sealed entry in memory
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8", newline="\n") as f:
                f.write(_canonical_dumps(entry) + "\n")
        self._entries.append(entry)
        return dict(entry)

    def verify(self) -> None:
        prev = GENESIS_SEAL
        for i, e in enumerate(self._entries):
            if e.get("index") != i:
                raise JournalIntegrityError(f"entry {i}: index mismatch ({e.get('index')})")
            if e.get("prev_seal") != prev:
                raise JournalIntegrityError(f"entry {i}: prev_seal does not link to previous entry")
            if e.get("seal") != compute_seal(e):
                raise JournalIntegrityError(f"entry {i}: seal mismatch")
            prev = e["seal"]

    def merkle_root(self, start_index: int = 0, end_index: Optional[int] = None) -> str:
        if end_index is None:
            end_index = len(self._entries)
        if not (0 <= start_index <= end_index <= len(self._entries)):
            raise ValueError("invalid checkpoint range")
        return seal_merkle_root([e["seal"] for e in self._entries[start_index:end_index]])

    def checkpoint(self, start_index: int = 0, end_index: Optional[int] = None) -> Dict[str, Any]:
        self.verify()
        if end_index is None:
            end_index = len(self._entries)
        root = self.merkle_root(start_index, end_index)
        window = self._entries[start_index:end_index]
        return {
            "version": 1,
            "created_at": _utc_now_iso(),
            "range": {"start_index": start_index, "end_index": end_index, "count": len(window)},
            "leaf_mode": "seal",
            "hash_alg": "sha256",
            "merkle_root": root,
            "last_seal_in_range": (window[-1]["seal"] if window else None),
        }
