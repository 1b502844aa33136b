"""
taxonomy_extraction.py

Offline build step, the first half of the dataset pipeline:
    1. Read a saved copy of the listing site's industry selector (HTML)
    2. Pull every (code, name) pair out of its tree items
    3. Write the basic dataset that taxonomy_enrichment.py enriches

Tree items look like <li id=":rd:-10002115"> with the display name in a
descendant `.MuiTreeItem-label`.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from industry_matcher.dbs.taxonomy_db import DEFAULT_BASIC_PATH
from industry_matcher.exception import CustomException
from industry_matcher.logger import get_logger

logger = get_logger(__name__)

TREE_ITEM_ID_PREFIX = ":rd:-"
TREE_ITEM_SELECTOR = f'li[id*="{TREE_ITEM_ID_PREFIX}"]'
LABEL_SELECTOR = ".MuiTreeItem-label"


def parse_industry_codes(html: str) -> List[Dict[str, str]]:
    """
    Extracts `{code, name}` records from the selector markup, sorted by name.
    Items without a code or a label are skipped; repeated codes keep the first.
    """
    soup = BeautifulSoup(html, "html.parser")

    records: List[Dict[str, str]] = []
    seen = set()
    for item in soup.select(TREE_ITEM_SELECTOR):
        code = item.get("id", "").replace(TREE_ITEM_ID_PREFIX, "").strip()
        label = item.select_one(LABEL_SELECTOR)
        name = label.get_text(strip=True) if label else ""
        if not code or not name:
            continue
        if code in seen:
            logger.warning(f"Duplicate industry code '{code}' in selector markup ignored.")
            continue
        seen.add(code)
        records.append({"code": code, "name": name})

    records.sort(key=lambda r: r["name"].casefold())
    return records


class TaxonomyExtraction:
    def __init__(self, html_path: str, output_path: Optional[str] = None):
        self.html_path = Path(html_path)
        self.output_path = Path(output_path) if output_path else DEFAULT_BASIC_PATH

    def run(self) -> int:
        """
        Extract the industry codes and write the basic dataset.
        Returns the number of codes written.
        """
        try:
            logger.info(f"Extracting industry codes from {self.html_path}...")
            with open(self.html_path, "r", encoding="utf-8") as f:
                records = parse_industry_codes(f.read())

            if not records:
                raise CustomException(f"No industry codes found in {self.html_path}")

            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.output_path, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)

            logger.info(f"Extracted {len(records)} industry codes -> {self.output_path}")
            return len(records)

        except CustomException:
            raise
        except Exception as e:
            logger.error(f"Industry code extraction failed: {e}")
            raise CustomException(e, sys)
