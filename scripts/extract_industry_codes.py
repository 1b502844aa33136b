from industry_matcher.sync.taxonomy_extraction import TaxonomyExtraction
from industry_matcher.logger import get_logger
import sys

logger = get_logger(__name__)

# Saved from the listing site's industry filter (the proffIndustryCode selector)
DEFAULT_HTML_PATH = "tmp_proffIndustryCodeSelector.html"

def run_extraction():
    html_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_HTML_PATH
    try:
        logger.info("Starting industry code extraction (selector HTML -> basic dataset)...")

        count = TaxonomyExtraction(html_path=html_path).run()

        logger.info(f"Extracted {count} industry codes.")
        print(f"SUCCESS: {count} industry codes extracted. Next: scripts/enrich_industry_codes.py")

    except Exception as e:
        logger.error(f"Failed to extract industry codes: {e}")
        print(f"ERROR: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run_extraction()
