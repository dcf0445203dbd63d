#!/usr/bin/env python3
"""
archivestats - Strategy comparison example

This example demonstrates:
- Connecting to the store from a connection string
- Computing the archive's page count locally and with two aggregations
- Timing each strategy with the @timed decorator
"""

from archivestats import Client, PageCountAggregator, timed
from archivestats.aggregator import page_count_pipeline
from archivestats.config import configure_logging


def main():
    configure_logging("INFO")

    print("=" * 60)
    print("archivestats - Strategy comparison")
    print("=" * 60)

    client = Client.from_url("http://localhost:8080", database="local")

    if not client.ping():
        print("✗ Failed to connect to the store")
        return

    print("✓ Connected to the store")

    entries = client.collection("ArchiveEntry")
    aggregator = PageCountAggregator(entries)
    print(f"\n{entries.count()} entries in {entries.full_name}")

    print("\nPipeline sent by the 'pipeline' strategy:")
    for stage in page_count_pipeline():
        print(f"  {stage}")

    @timed("local")
    def local():
        return aggregator.local_total()

    @timed("pipeline")
    def pipeline():
        return aggregator.pipeline_total()

    @timed("queryable")
    def queryable():
        return aggregator.queryable_total()

    print("\nResults")
    print("-" * 60)
    measurements = [local(), pipeline(), queryable()]
    for m in measurements:
        print(f"  {m.label:<10} {m.result:>10} pages  {m.elapsed_ms:8.2f} ms")

    if len({m.result for m in measurements}) == 1:
        print("\n✓ All strategies agree")
    else:
        print("\n✗ Strategies disagree")

    client.close()


if __name__ == "__main__":
    main()
