#!/usr/bin/env python3
"""
Diagnostic script to check what the content API will serve to the site.
"""
import json
import sys
from pathlib import Path

import requests

# Configuration
API_URL = "http://127.0.0.1:5005"
FALLBACK_IDS = {"portfolio-website", "sample-project-1", "sample-project-2"}


def get_json(path):
    """GET a path from the API, returning (status, body) or None if unreachable."""
    try:
        response = requests.get(f"{API_URL}{path}", timeout=60)
        return response.status_code, response.json()
    except requests.exceptions.RequestException as e:
        print(f"Error fetching {path}: {e}")
        return None


def main():
    print("=" * 70)
    print("Portfolio Content Diagnostic")
    print("=" * 70)

    print("\n🌐 Checking API...")
    status = get_json("/status")
    if status is None:
        print("  ❌ Could not reach the API")
        print("  Make sure it is running: python -m portfolio_sync.server")
        sys.exit(1)
    _, info = status
    print(f"  Version: {info['version']}")
    print(f"  GitHub account: {info['github_account']}")
    print(f"  Medium account: {info['medium_account']}")

    print("\n🔌 Upstream sources:")
    _, upstream = get_json("/status/upstream")
    for name, ok in upstream.items():
        print(f"  {'✅' if ok else '❌'} {name}")

    print("\n📦 Projects:")
    _, projects = get_json("/projects")
    if {p["id"] for p in projects} == FALLBACK_IDS:
        print("  ⚠️  Serving fallback projects (GitHub fetch failed, check the API log)")
    for project in projects:
        star = "★ " if project["featured"] else ""
        print(f"  • {star}{project['name']} ({project['language']}) - {project.get('stars') or 0} stars")

    print("\n📰 Articles:")
    articles_status, articles = get_json("/articles")
    if articles_status != 200:
        print(f"  ❌ {articles['detail']}")
        articles = []
    elif not articles:
        print("  (none)")
    for article in articles:
        star = "★ " if article["featured"] else ""
        print(f"  • {star}{article['title']} - {article['read_time']} min read")

    # Export for inspection
    output_file = Path("content_snapshot.json")
    with open(output_file, 'w') as f:
        json.dump({
            'projects': projects,
            'articles': articles,
        }, f, indent=2)

    print(f"\n💾 Content exported to: {output_file}")


if __name__ == "__main__":
    main()
