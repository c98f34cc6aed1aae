"""
Key-value blob stores for the learning agent's saved state.

The agent only ever calls load(key), save(key, blob) and delete(key), and
treats the blob as an opaque string.
"""

import json
import os
from typing import Dict, Optional


class MemoryStorage:
    """Keeps blobs in a dict. Nothing survives the process."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, blob: str):
        self.data[key] = blob

    def delete(self, key: str):
        self.data.pop(key, None)


class JsonFileStorage:
    """
    Keeps blobs in a single JSON file mapping key -> blob.

    The whole file is rewritten on every save, so a save either lands
    completely or leaves the previous file in place.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self, key: str) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        return self._read().get(key)

    def save(self, key: str, blob: str):
        data = self._read() if os.path.exists(self.path) else {}
        data[key] = blob
        self._write(data)

    def delete(self, key: str):
        if not os.path.exists(self.path):
            return
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> Dict[str, str]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)
