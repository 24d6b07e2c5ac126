"""Run all performance benchmarks and generate report."""

import json
from pathlib import Path

from benchmark_predicates import run_all_predicate_benchmarks


def main():
    """Run all benchmarks and save results."""
    print("=" * 60)
    print("LUCSMITH PERFORMANCE BENCHMARK SUITE")
    print("=" * 60)
    print()

    all_results = {}

    print("\n[1/1] Predicate Benchmarks")
    print("-" * 60)
    all_results["predicates"] = run_all_predicate_benchmarks()

    output_file = Path("benchmarks/results.json")
    output_file.parent.mkdir(exist_ok=True)

    # Convert numpy types to native Python types for JSON serialization
    def convert_to_native(obj):
        """Convert numpy types to native Python types."""
        if isinstance(obj, dict):
            return {k: convert_to_native(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert_to_native(item) for item in obj]
        elif hasattr(obj, "item"):  # numpy scalar
            return obj.item()
        else:
            return obj

    with open(output_file, "w") as f:
        json.dump(convert_to_native(all_results), f, indent=2)

    print(f"\n✓ Results saved to {output_file}")

    print("\n" + "=" * 60)
    print("BENCHMARK SUMMARY")
    print("=" * 60)

    holds_results = all_results["predicates"]["holds_scalability"]
    print("\nHOLDS (11 dates):")
    print(f"  Small (10k pixels):  {holds_results['small']['holds_time_seconds']*1000:8.2f} ms")
    print(f"  Large (1M pixels):   {holds_results['large']['holds_time_seconds']*1000:8.2f} ms")

    sweep_results = all_results["predicates"]["convert_sweep_scalability"]
    print("\nCONVERT sweep (10 pairs):")
    print(f"  Small (10k pixels):  {sweep_results['small']['sweep_time_seconds']:8.2f} s")
    print(f"  Large (250k pixels): {sweep_results['large']['sweep_time_seconds']:8.2f} s")


if __name__ == "__main__":
    main()
