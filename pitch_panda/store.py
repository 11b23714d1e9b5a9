"""JSON file store of completed analyses, keyed by domain."""

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from . import config
from .schemas import StartupAnalysis
from .utils import ensure_scheme, get_domain

logger = config.logger


class AnalysisStore:
    """Persist one record per domain: the analysis, its memo and timestamps."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or config.DB_PATH

    def all(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Could not read analysis store {self.path}: {exc}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Analysis store {self.path} is not a JSON object, ignoring it")
            return {}
        return data

    def get(self, url: str) -> Optional[Dict[str, Any]]:
        return self.all().get(get_domain(url))

    def exists(self, url: str) -> bool:
        return get_domain(url) in self.all()

    def save(self, url: str, analysis: StartupAnalysis, memo: Optional[str] = None) -> Dict[str, Any]:
        """Insert or update the record for the URL's domain."""
        data = self.all()
        domain = get_domain(url)
        now = datetime.now(timezone.utc).isoformat()

        homepage = ensure_scheme(url)
        sources = list(dict.fromkeys([homepage, *analysis.sources]))
        analysis = analysis.model_copy(update={"sources": sources})

        previous = data.get(domain) or {}
        record = {
            "url": homepage,
            "name": analysis.name,
            "analysis": analysis.model_dump(mode="json"),
            "memo": memo,
            "created_at": previous.get("created_at", now),
            "updated_at": now,
        }
        data[domain] = record
        self._write(data)
        logger.info(f"[OK] Saved analysis for {domain}")
        return record

    def delete(self, url: str) -> bool:
        data = self.all()
        if data.pop(get_domain(url), None) is None:
            return False
        self._write(data)
        return True

    def clear(self) -> None:
        self._write({})

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".pitchpanda-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(data, file, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
