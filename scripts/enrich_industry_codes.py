from industry_matcher.sync.taxonomy_enrichment import TaxonomyEnrichment
from industry_matcher.llm.openai_client import OpenAIClient
from industry_matcher.utils.load_config import load_config_file
from industry_matcher.logger import get_logger
import sys
from dotenv import load_dotenv

# Load env vars (API key)
load_dotenv()

logger = get_logger(__name__)

def run_enrichment():
    try:
        logger.info("Starting industry code enrichment (basic -> enriched dataset)...")

        llm_config = load_config_file().get("llm", {})
        client = OpenAIClient(model=llm_config.get("enrichment_model"), llm_config=llm_config)

        count = TaxonomyEnrichment(llm_client=client).run()

        logger.info(f"Enriched {count} industry codes.")
        print(f"SUCCESS: {count} industry codes enriched.")

    except Exception as e:
        logger.error(f"Failed to enrich industry codes: {e}")
        print(f"ERROR: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run_enrichment()
