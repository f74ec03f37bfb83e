"""
Site Search - Command Line Entry Point

Runs one search against the Site Search API and prints the sanitized,
display-ready results.
"""

import argparse
import asyncio

from dotenv import load_dotenv

from site_search import QueryConnector, SearchSession, get_settings, setup_logging
from site_search.processing import render_view
from site_search.types import SearchStatus


async def main():
    """
    Run a search for the user-provided query
    """
    parser = argparse.ArgumentParser(
        description="Documentation Site Search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli/main.py "infrastructure agent"
  python cli/main.py "alerts" --page 2
        """,
    )
    parser.add_argument("query", help="Search term")
    parser.add_argument("--page", type=int, default=1, help="Result page (default: 1)")

    args = parser.parse_args()

    load_dotenv()
    settings = get_settings()
    setup_logging(settings.log_dir)

    session = SearchSession(
        QueryConnector(settings),
        current_origin=settings.site_origin,
        debounce_seconds=settings.debounce_seconds,
    )

    print(f"🔍 Searching for: {args.query}")
    print("=" * 50)

    session.submit(args.query, args.page)
    await session.drain()

    state = session.state
    view = render_view(
        state, settings.results_per_page, source_suffix=settings.source_tag_suffix
    )

    if state.status == SearchStatus.ERROR:
        print(f"❌ Search failed: {view.error}")
        return
    if state.status == SearchStatus.IDLE:
        print("Nothing to search for.")
        return

    paging = view.paging
    if paging is not None:
        print(
            f"Showing {paging.start} - {paging.end} out of {paging.total_results} "
            f"for: {paging.search_term}"
        )

    for i, result in enumerate(view.results, paging.start if paging else 1):
        tag = f"[{result.source_tag.upper()}] " if result.source_tag else ""
        print(f"\n{i}. {tag}{result.title}")
        if result.url:
            print(f"   URL: {result.url}")
        if result.body_html:
            print(f"   {result.body_html[:200]}")

    if state.total_pages > 1:
        print(f"\nPage {state.page} of {state.total_pages}")


if __name__ == "__main__":
    asyncio.run(main())
