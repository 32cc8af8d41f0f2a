import asyncio
import random
import time
import statistics
import tracemalloc
from httpx import AsyncClient, ASGITransport
from main import app, app_state
from algorithms.indexed_heap import IndexedMinHeap


class PerformanceBenchmark:
    def __init__(self, seed: int = 0):
        self.latencies = []
        self.successful_operations = 0
        self.failed_operations = 0
        self.rng = random.Random(seed)

    def _timed(self, operation, *args):
        start_time = time.perf_counter()
        operation(*args)
        self.latencies.append((time.perf_counter() - start_time) * 1_000_000)
        self.successful_operations += 1

    async def single_request(self, client: AsyncClient, method: str, url: str, **kwargs):
        start_time = time.perf_counter()

        try:
            response = await client.request(method, url, **kwargs)

            latency = (time.perf_counter() - start_time) * 1_000_000
            self.latencies.append(latency)

            if response.status_code < 400:
                self.successful_operations += 1
            else:
                self.failed_operations += 1

        except Exception:
            self.failed_operations += 1
            latency = (time.perf_counter() - start_time) * 1_000_000
            self.latencies.append(latency)

    def _report_metrics(self, test_name: str, duration: float, num_operations: int):
        throughput = num_operations / duration
        avg_latency = statistics.mean(self.latencies)
        p50 = statistics.median(self.latencies)
        p95 = statistics.quantiles(self.latencies, n=20)[18] if len(self.latencies) >= 20 else max(self.latencies)
        p99 = statistics.quantiles(self.latencies, n=100)[98] if len(self.latencies) >= 100 else max(self.latencies)

        print(f"\n{'=' * 60}")
        print(f"  {test_name}")
        print(f"{'=' * 60}")
        print(f"  Operations:  {num_operations}")
        print(f"  Duration:    {duration:.3f}s")
        print(f"  Throughput:  {throughput:,.0f} ops/s")
        print(f"  Succeeded:   {self.successful_operations}")
        print(f"  Failed:      {self.failed_operations}")
        print(f"  Avg Latency: {avg_latency:.2f}us")
        print(f"  p50 Latency: {p50:.2f}us")
        print(f"  p95 Latency: {p95:.2f}us")
        print(f"  p99 Latency: {p99:.2f}us")
        print(f"{'=' * 60}")

        return {
            "throughput": throughput,
            "avg_latency": avg_latency,
            "p50": p50,
            "p95": p95,
            "p99": p99,
        }

    def _reset(self):
        self.latencies.clear()
        self.successful_operations = 0
        self.failed_operations = 0

    def run_insert_test(self, num_items: int = 100000):
        self._reset()
        heap = IndexedMinHeap()

        start_time = time.perf_counter()
        for i in range(num_items):
            self._timed(heap.insert, i, self.rng.random())
        duration = time.perf_counter() - start_time

        return heap, self._report_metrics(f"Insert Test ({num_items} items)", duration, num_items)

    def run_update_test(self, heap: IndexedMinHeap, num_updates: int = 100000):
        self._reset()
        elements = list(heap.index)

        start_time = time.perf_counter()
        for _ in range(num_updates):
            self._timed(heap.update_priority, self.rng.choice(elements), self.rng.random())
        duration = time.perf_counter() - start_time

        return self._report_metrics(f"Update Test ({num_updates} random re-prioritizations)", duration, num_updates)

    def run_extract_test(self, heap: IndexedMinHeap):
        self._reset()
        num_items = heap.size()

        start_time = time.perf_counter()
        while not heap.is_empty():
            self._timed(heap.extract_min)
        duration = time.perf_counter() - start_time

        return self._report_metrics(f"Extract Test ({num_items} items)", duration, num_items)

    async def run_http_test(self, num_requests: int = 2000, concurrency: int = 50):
        self._reset()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            start_time = time.time()

            semaphore = asyncio.Semaphore(concurrency)

            async def bounded_insert(i):
                async with semaphore:
                    await self.single_request(
                        client, "PUT", "/v1/queues/benchmark/items",
                        json={"element": f"item_{i}", "priority": self.rng.random()}
                    )

            await asyncio.gather(*[bounded_insert(i) for i in range(num_requests)])

            for _ in range(num_requests):
                await self.single_request(client, "POST", "/v1/queues/benchmark/pop")

            duration = time.time() - start_time

        return self._report_metrics("HTTP Test (insert + pop)", duration, num_requests * 2)

    async def run_all_benchmarks(self):
        print("\n" + "#" * 60)
        print("  INDEXED PRIORITY QUEUE: PERFORMANCE BENCHMARK")
        print("#" * 60)

        # Memory tracking
        tracemalloc.start()

        results = {}
        heap, results["insert"] = self.run_insert_test()
        results["update"] = self.run_update_test(heap)
        results["extract"] = self.run_extract_test(heap)
        results["http"] = await self.run_http_test()

        mem_after = tracemalloc.get_traced_memory()
        peak_memory = mem_after[1]
        tracemalloc.stop()

        print(f"\n{'=' * 60}")
        print(f"  MEMORY")
        print(f"{'=' * 60}")
        print(f"  Peak Memory Usage: {peak_memory / 1024:.1f} KB ({peak_memory / (1024*1024):.2f} MB)")
        print(f"{'=' * 60}")

        print(f"\n{'#' * 60}")
        print(f"  SUMMARY")
        print(f"{'#' * 60}")
        for name in ("insert", "update", "extract", "http"):
            print(f"  {name:<8} {results[name]['throughput']:>12,.0f} ops/s  p99 {results[name]['p99']:.2f}us")
        print(f"{'#' * 60}\n")

        return results


async def main():
    app_state["queues"].clear()

    benchmark = PerformanceBenchmark()
    await benchmark.run_all_benchmarks()


if __name__ == "__main__":
    asyncio.run(main())
