import time
import statistics
import random
import psutil
from src.adocean.adapter import AdoceanAdapter

EMITERS = ["myao.adocean.pl", "pl.adocean.pl", "ua.adocean.pl"]


def generate_random_request(i):
    return {
        "bidder": "adocean",
        "params": {
            "masterId": f"master{random.randint(1, 5)}",
            "slaveId": f"adoceanmyao{random.randint(0, 10**9):010d}",
            "emiter": random.choice(EMITERS),
        },
        "adUnitCode": f"adunit-{i}",
        "mediaTypes": {"banner": {"sizes": [[300, 250], [300, 600]]}},
        "bidId": f"bench_{i}",
    }


def benchmark(n=2000, batch=20):
    print("Initializing adapter...")
    adapter = AdoceanAdapter()
    bidder_request = {"gdprConsent": {"consentString": "BOQHk-4OSlWKFBoABBPLBd", "gdprApplies": True}}

    print(f"Generating {n} batches of {batch} requests...")
    batches = [[generate_random_request(i * batch + j) for j in range(batch)] for i in range(n)]

    print("Warming up...")
    for _ in range(100):
        adapter.build_requests(batches[0], bidder_request)

    print("Running benchmark...")
    latencies = []
    start_mem = psutil.Process().memory_info().rss / 1024 / 1024

    for bids in batches:
        t0 = time.perf_counter_ns()
        adapter.build_requests(bids, bidder_request)
        t1 = time.perf_counter_ns()
        latencies.append((t1 - t0) / 1_000_000.0)  # ms

    end_mem = psutil.Process().memory_info().rss / 1024 / 1024

    avg = statistics.mean(latencies)
    p50 = statistics.median(latencies)
    p99 = sorted(latencies)[int(n * 0.99)]

    print("\n" + "=" * 30)
    print(" BENCHMARK RESULTS")
    print("=" * 30)
    print(f"Batches processed:  {n}")
    print(f"Average Latency:    {avg:.4f} ms")
    print(f"P50 Latency:        {p50:.4f} ms")
    print(f"P99 Latency:        {p99:.4f} ms")
    print("-" * 30)
    print(f"Memory Usage:       {end_mem:.2f} MB")
    print(f"Memory Growth:      {end_mem - start_mem:.2f} MB")
    print("=" * 30)


if __name__ == "__main__":
    import logging
    logging.basicConfig(level=logging.WARNING)
    benchmark()
