# scripts/smoke_test_youtube.py
"""
External API Smoke Test
Checks configuration, API keys and live connectivity of both gateways

Run: python scripts/smoke_test_youtube.py [VIDEO_URL] [--generate]
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.append(str(ROOT_DIR))

from dotenv import load_dotenv

dotenv_path = ROOT_DIR / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)
    print(f"✅ Loaded .env from: {dotenv_path}")
else:
    print(f"⚠️  .env file not found at: {dotenv_path}")

from commentlens.app.config import get_config
from commentlens.infrastructure.clients import create_gemini_client, create_youtube_client
from commentlens.services.exceptions import ServiceError
from commentlens.utils.validators import extract_video_id, filter_valid_comments

DEFAULT_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def print_section(title: str):
    """Print formatted section header"""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def test_config():
    print_section("1️⃣  Configuration Test")
    config = get_config()
    print("✅ Configuration loaded successfully")
    print(f"   Comments per analysis: {config.analysis.max_comments}")
    print(f"   Page size: {config.youtube_api.comments_page_size}")
    print(f"   Comment order: {config.youtube_api.comment_order}")
    print(f"   Model: {config.gemini.model}")
    return True


def test_api_keys():
    print_section("2️⃣  API Key Test")
    config = get_config()
    ok = True
    for name, key in (("YOUTUBE_API_KEY", config.youtube_api_key),
                      ("GEMINI_API_KEY", config.gemini_api_key)):
        if not key:
            print(f"❌ {name} not found in environment")
            ok = False
        else:
            print(f"✅ {name} found ({len(key)} characters)")
    return ok


async def test_youtube(url: str):
    print_section("3️⃣  YouTube Data API Test")

    video_id = extract_video_id(url)
    if not video_id:
        print(f"❌ Could not extract a video id from {url}")
        return False, None

    if not get_config().youtube_api_key:
        print("⏭️  Skipping (no API key)")
        return None, None

    try:
        async with create_youtube_client() as client:
            print(f"🔄 Fetching {video_id} with up to 20 comments...")
            data = await client.fetch_analysis_data(video_id, 20)
    except ServiceError as e:
        print(f"❌ API error: {e.message}")
        return False, None

    details = data.video_details
    valid, removed = filter_valid_comments(data.comments)
    print("✅ API call successful!")
    print(f"   Title: {details.title}")
    print(f"   Channel: {details.channel_title}")
    print(f"   Views: {details.view_count:,}")
    print(f"   Comments fetched: {len(data.comments)} ({removed} invalid)")
    return True, (details, valid)


async def test_gemini(fetched):
    print_section("4️⃣  Gemini API Test")

    if fetched is None:
        print("⏭️  Skipping (no video data)")
        return None
    if not get_config().gemini_api_key:
        print("⏭️  Skipping (no API key)")
        return None

    details, comments = fetched
    try:
        async with create_gemini_client() as client:
            print(f"🔄 Generating report from {len(comments)} comments...")
            report = await client.generate(details.title, details.description, comments)
    except ServiceError as e:
        print(f"❌ Generation failed: {e.message}")
        return False

    print("✅ Report generated")
    print(f"   Sentiment: {report.at_a_glance_summary.overall_sentiment}")
    print(f"   Themes: {', '.join(report.at_a_glance_summary.top_themes[:5])}")
    print(f"   Community health: {report.audience_insights.community_health_score}")
    return True


def generate_report(results: dict):
    """Generate final test report"""
    print_section("📊 Test Summary")

    passed = sum(1 for v in results.values() if v is True)
    failed = sum(1 for v in results.values() if v is False)
    skipped = sum(1 for v in results.values() if v is None)

    print(f"\n   Total Tests: {len(results)}")
    print(f"   ✅ Passed: {passed}")
    print(f"   ❌ Failed: {failed}")
    print(f"   ⏭️  Skipped: {skipped}")

    if failed == 0:
        print("\n   🎉 All checks passed!")
        return True
    print("\n   ⚠️  Some checks failed. See errors above.")
    return False


async def run(url: str, generate: bool) -> dict:
    results = {
        "Configuration": test_config(),
        "API Keys": test_api_keys(),
    }
    results["YouTube"], fetched = await test_youtube(url)
    if generate:
        results["Gemini"] = await test_gemini(fetched)
    return results


def main():
    """Run all smoke tests"""
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    url = args[0] if args else DEFAULT_URL

    print("\n" + "=" * 60)
    print("  🧪 CommentLens - External API Smoke Test")
    print("  " + datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
    print("=" * 60)

    results = asyncio.run(run(url, "--generate" in sys.argv))
    sys.exit(0 if generate_report(results) else 1)


if __name__ == "__main__":
    main()
