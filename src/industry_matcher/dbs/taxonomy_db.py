"""
taxonomy_db.py

Loads the industry code taxonomy once:
    1. Enriched dataset (code, name, description, keywords) if present
    2. Otherwise the basic dataset (code, name), with description and
       keywords synthesized from the name

The loaded taxonomy is read-only for the lifetime of the instance.
"""

import json
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from industry_matcher.exception import CustomException
from industry_matcher.logger import get_logger
from industry_matcher.models import TaxonomyEntry

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_ENRICHED_PATH = DATA_DIR / "enriched_industry_codes.json"
DEFAULT_BASIC_PATH = DATA_DIR / "industry_codes.json"

# Sample fixture with the documented codes only, for tests and local runs.
# The full datasets are built by scripts/extract_industry_codes.py and
# scripts/enrich_industry_codes.py.
SAMPLE_ENRICHED_PATH = DATA_DIR / "sample_enriched_industry_codes.json"
SAMPLE_BASIC_PATH = DATA_DIR / "sample_industry_codes.json"

_NAME_SPLIT = re.compile(r"[,\s-]+")


def synthesize_keywords(name: str) -> List[str]:
    """Lower-cased name tokens longer than 2 characters, in order."""
    return [w for w in _NAME_SPLIT.split(name.lower()) if len(w) > 2]


class TaxonomyDB:
    def __init__(
        self,
        enriched_path: Optional[str] = None,
        basic_path: Optional[str] = None,
        prefer_enriched: bool = True,
    ):
        self.enriched_path = Path(enriched_path) if enriched_path else DEFAULT_ENRICHED_PATH
        self.basic_path = Path(basic_path) if basic_path else DEFAULT_BASIC_PATH
        self.source_path: Optional[Path] = None
        self.enriched = False
        self.prefer_enriched = prefer_enriched

        entries = self._load()
        self._entries: Tuple[TaxonomyEntry, ...] = tuple(entries)
        self._by_code: Dict[str, TaxonomyEntry] = {e.code: e for e in self._entries}

        logger.info(
            f"Loaded {len(self._entries)} {'enriched' if self.enriched else 'basic'} "
            f"industry codes from {self.source_path}"
        )

    # ----------------------------------------------------------------------
    # LOADING
    # ----------------------------------------------------------------------
    def _load(self) -> List[TaxonomyEntry]:
        try:
            if self.prefer_enriched and self.enriched_path.exists():
                self.source_path = self.enriched_path
                self.enriched = True
                records = self._read_records(self.enriched_path)
                entries = [TaxonomyEntry.model_validate(r) for r in records]
            else:
                if self.prefer_enriched:
                    logger.warning(
                        f"Enriched industry codes not found at {self.enriched_path}, falling back to basic codes."
                    )
                if not self.basic_path.exists():
                    raise CustomException(
                        f"No industry code dataset found at {self.basic_path}. "
                        "Build it with scripts/extract_industry_codes.py."
                    )
                self.source_path = self.basic_path
                records = self._read_records(self.basic_path)
                entries = [self._from_basic(r) for r in records]

            entries = self._dedupe(entries)
            if not entries:
                raise CustomException(f"Industry code dataset {self.source_path} is empty.")
            return entries

        except CustomException:
            logger.error("Failed to load industry codes.")
            raise
        except (OSError, ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.error(f"Failed to load industry codes: {e}")
            raise CustomException(e, sys)

    @staticmethod
    def _read_records(path: Path) -> List[dict]:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array, got {type(data).__name__}")
        return data

    @staticmethod
    def _from_basic(record: dict) -> TaxonomyEntry:
        name = str(record.get("name") or "").strip()
        return TaxonomyEntry(
            code=record.get("code"),
            name=name,
            description=name,
            keywords=synthesize_keywords(name),
        )

    @staticmethod
    def _dedupe(entries: List[TaxonomyEntry]) -> List[TaxonomyEntry]:
        seen = set()
        unique = []
        for entry in entries:
            if entry.code in seen:
                logger.warning(f"Duplicate industry code '{entry.code}' ignored.")
                continue
            seen.add(entry.code)
            unique.append(entry)
        return unique

    # ----------------------------------------------------------------------
    # LOOKUPS
    # ----------------------------------------------------------------------
    @property
    def entries(self) -> Tuple[TaxonomyEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get_entry(self, code: str) -> Optional[TaxonomyEntry]:
        return self._by_code.get(code)

    def get_name(self, code: str) -> str:
        entry = self._by_code.get(code)
        return entry.name if entry else "Unknown"

    def validate_code(self, code: str) -> bool:
        """Check if an industry code exists."""
        exists = code in self._by_code
        if not exists:
            logger.warning(f"Unknown industry code '{code}'.")
        return exists

    def searchable_texts(self) -> List[str]:
        """Embedding input for every entry, aligned with `entries`."""
        return [e.searchable_text for e in self._entries]
