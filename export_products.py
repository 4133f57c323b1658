#!/usr/bin/env python3
"""
Export Adobe Commerce products as a RECS upload CSV.

Fetches every product over the Commerce REST API, enriches it with category
names and aggregated inventory, and writes the Recommendations CSV.

Credentials come from .env / environment (COMMERCE_BASE_URL,
COMMERCE_ADMIN_USERNAME, COMMERCE_ADMIN_PASSWORD); everything else from
config/commerce.yaml.

Usage:
    python3 export_products.py
    python3 export_products.py --output output/recs.csv
    python3 export_products.py --no-cache --verbose
"""

import argparse
import asyncio
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from dotenv import load_dotenv

from src.cache import create_cache
from src.commerce import CommerceAPIClient, CommerceIntegrationError
from src.common import ConfigError, load_export_config, setup_logging
from src.enrichment import ProductEnrichmentPipeline
from src.export import RecsCSVExporter

logger = logging.getLogger("src.export_products")


async def run_export(config, output_path: str) -> int:
    cache = create_cache(
        backend=config.cache_backend,
        bypass=config.cache_bypass,
        default_ttl=config.api_response_ttl,
        redis_url=config.redis_url,
    )
    try:
        with CommerceAPIClient(config.base_url, config.api_version, config.timeout) as client:
            pipeline = ProductEnrichmentPipeline.from_config(config, client, cache)
            result = await pipeline.run()
    finally:
        await cache.close()

    exporter = RecsCSVExporter(store_url=config.store_url)
    count = exporter.export(result.products, output_path)

    metrics = result.metrics.to_dict()
    api_calls = metrics["api_calls"]
    print(f"\nExported {count} products to {output_path}")
    print(f"  API calls:   {api_calls['total']} "
          f"(token {api_calls['admin_token']}, products {api_calls['products']}, "
          f"categories {api_calls['categories']}, inventory {api_calls['inventory']})")
    print(f"  Cache hits:  {metrics['cache_hits']}")
    if metrics["token_retries"]:
        print(f"  Token retries: {metrics['token_retries']}")
    if result.warnings:
        print(f"  Warnings:    {len(result.warnings)}")
        for warning in result.warnings:
            print(f"    - {warning}")
    return count


def main():
    parser = argparse.ArgumentParser(
        description="Export Adobe Commerce products to a RECS CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export with settings from config/commerce.yaml
  python3 export_products.py

  # Custom output path, skip the cache
  python3 export_products.py --output output/recs.csv --no-cache
"""
    )
    parser.add_argument('--output', '-o', type=str,
                        help='Output CSV file (default: export.output from config)')
    parser.add_argument('--no-cache', action='store_true',
                        help='Bypass the API response cache')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true',
                           help='Enable debug logging')
    verbosity.add_argument('--quiet', '-q', action='store_true',
                           help='Only log warnings and errors')

    args = parser.parse_args()

    load_dotenv()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = load_export_config()
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.no_cache:
        config.cache_bypass = True
    output_path = args.output or config.output_path

    try:
        asyncio.run(run_export(config, output_path))
    except CommerceIntegrationError as e:
        logger.error("Export failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
