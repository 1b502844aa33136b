from industry_matcher.agents.industry_matcher import build_default_matcher
from industry_matcher.logger import get_logger
from dotenv import load_dotenv

load_dotenv()
logger = get_logger(__name__)

def test_matcher():
    # Strategy and capabilities come from config.yaml; without OPENAI_API_KEY
    # the refine strategy runs on keywords only.
    matcher = build_default_matcher()

    test_cases = [
        "software development and programming",
        "web development",
        "artificial intelligence and AI",
        "restaurant and food service",
        "construction and building",
    ]

    print("\n--- Starting Industry Matching Test ---\n")

    for description in test_cases:
        result = matcher.match(description)
        print(f"Input: '{description}' | Stage: {result.stage}")
        if result.degraded_reason:
            print(f"  Degraded: {result.degraded_reason}")
        if not result.matches:
            print("  No matches found.")
        for m in result.matches:
            print(f"  {m.code}: {m.name} ({m.score:.3f})")
        print("-" * 30)

if __name__ == "__main__":
    test_matcher()
