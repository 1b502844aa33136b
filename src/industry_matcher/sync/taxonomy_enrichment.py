"""
taxonomy_enrichment.py

Offline build step:
    1. Read the basic dataset (code, name)
    2. Ask the LLM for an English description and keywords, in batches
    3. Write the enriched dataset the matcher loads at startup

Batches the LLM gets wrong keep the synthesized description/keywords.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from industry_matcher.dbs.taxonomy_db import DEFAULT_BASIC_PATH, DEFAULT_ENRICHED_PATH, TaxonomyDB
from industry_matcher.exception import CustomException
from industry_matcher.logger import get_logger
from industry_matcher.models import EnrichmentBatch, TaxonomyEntry

logger = get_logger(__name__)

ENRICHMENT_PROMPT = """
You are an expert in Swedish business classifications. For each industry code below, provide:
1. A clear English description of what this industry/business type does
2. 3-5 relevant keywords in English (things someone might search for)

Swedish industry codes:
{industry_list}

Copy every code and name exactly as given. Focus on:
- What services/products this industry provides
- What type of work/business it represents
- Common search terms someone might use
- Keep descriptions concise but informative
"""


class TaxonomyEnrichment:
    def __init__(
        self,
        llm_client,
        basic_path: Optional[str] = None,
        output_path: Optional[str] = None,
        batch_size: int = 20,
        save_every: int = 5,
    ):
        self.llm_client = llm_client
        self.basic_path = Path(basic_path) if basic_path else DEFAULT_BASIC_PATH
        self.output_path = Path(output_path) if output_path else DEFAULT_ENRICHED_PATH
        self.batch_size = batch_size
        self.save_every = save_every

    # ------------------------------------------------------
    # MAIN
    # ------------------------------------------------------
    def run(self) -> int:
        """
        Enrich every basic code and write the enriched dataset.
        Returns the number of entries written.
        """
        try:
            # Load through the basic path only so synthesized fields act as fallback
            source = TaxonomyDB(basic_path=str(self.basic_path), prefer_enriched=False)
            entries = list(source.entries)
            total_batches = (len(entries) + self.batch_size - 1) // self.batch_size
            logger.info(f"Enriching {len(entries)} industry codes in {total_batches} batches...")

            enriched: List[TaxonomyEntry] = []
            for batch_num, start in enumerate(range(0, len(entries), self.batch_size), start=1):
                batch = entries[start : start + self.batch_size]
                logger.info(f"Processing batch {batch_num}/{total_batches} ({len(batch)} codes)")
                enriched.extend(self.enrich_batch(batch))

                if batch_num % self.save_every == 0:
                    self._write(enriched)
                    logger.info(f"Saved progress: {len(enriched)} codes processed")

            self._write(enriched)
            logger.info(f"Successfully enriched {len(enriched)} industry codes -> {self.output_path}")
            return len(enriched)

        except CustomException:
            raise
        except Exception as e:
            logger.error(f"Industry code enrichment failed: {e}")
            raise CustomException(e, sys)

    # ------------------------------------------------------
    # HELPERS
    # ------------------------------------------------------
    def enrich_batch(self, batch: List[TaxonomyEntry]) -> List[TaxonomyEntry]:
        industry_list = "\n".join(f"{e.code}: {e.name}" for e in batch)
        try:
            response = self.llm_client.generate(
                prompt=ENRICHMENT_PROMPT.format(industry_list=industry_list),
                response_model=EnrichmentBatch,
            )
            content = response.content
            if isinstance(content, str):
                content = EnrichmentBatch.model_validate(json.loads(content))
            if not isinstance(content, EnrichmentBatch):
                raise ValueError(f"Unexpected content type: {type(content)}")
        except Exception as e:
            logger.warning(f"Batch enrichment failed, keeping synthesized fields: {e}")
            return list(batch)

        by_code: Dict[str, TaxonomyEntry] = {}
        for item in content.enriched:
            by_code[item.code.strip()] = TaxonomyEntry(
                code=item.code,
                name=item.name,
                description=item.description,
                keywords=item.keywords,
            )

        result = []
        for entry in batch:
            enriched_entry = by_code.get(entry.code)
            if enriched_entry is None:
                logger.warning(f"No enrichment returned for {entry.code}, keeping synthesized fields.")
                result.append(entry)
            else:
                # Code and name always come from the source dataset
                result.append(enriched_entry.model_copy(update={"name": entry.name}))
        return result

    def _write(self, entries: List[TaxonomyEntry]):
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w", encoding="utf-8") as f:
            json.dump([e.model_dump() for e in entries], f, ensure_ascii=False, indent=2)
