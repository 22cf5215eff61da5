# tools/profile_search.py
"""
Small profiling harness for EmojiSearchEngine.search.
Usage:
  python tools/profile_search.py --warm 100 --iters 1000 --query "thum"

Prints mean/median/std latency with and without the result cache and a
sample of results.
"""
import argparse
import random
import statistics
from statistics import median

from emoji_search.core.search_engine import EmojiSearchEngine
from emoji_search.utils.cache_utils import timed
from emoji_search.utils.config_manager import Config
from emoji_search.utils.logger_utils import Log

# mix of exact, prefix, romaji, kana and typo queries
QUERIES = [
    "thumbsup",
    "thum",
    "+1",
    "arigatou",
    "ありがとう",
    "otsukare",
    "tsuka",
    "thumsbup",
    "heart",
    "smil",
    "ok",
    "",
]


def synthetic_custom(n: int):
    words = ["otsukare", "arigatou", "yoroshiku", "ohayo", "sumimasen", "party", "ship", "lgtm", "wip"]
    return {f"{random.choice(words)}_{i}": f"https://emoji.example/{i}.png" for i in range(n)}


@timed
def _search(engine: EmojiSearchEngine, q: str):
    return engine.search(q)


def measure(engine: EmojiSearchEngine, queries, iterations: int, flush: bool):
    times = []
    for _ in range(iterations):
        q = random.choice(queries)
        if flush:
            engine.cache.invalidate_all()
        _res, elapsed = _search(engine, q)
        times.append(elapsed * 1000.0)  # ms
    return times


def summarize(times):
    times_sorted = sorted(times)
    return {
        "count": len(times_sorted),
        "mean_ms": round(statistics.mean(times_sorted), 4),
        "median_ms": round(median(times_sorted), 4),
        "stdev_ms": round(statistics.pstdev(times_sorted), 4),
        "p90_ms": round(times_sorted[max(0, int(0.9 * len(times_sorted)) - 1)], 4),
        "max_ms": round(max(times_sorted), 4),
    }


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--warm", type=int, default=50, help="warmup iterations")
    parser.add_argument("--iters", type=int, default=500, help="measured iterations")
    parser.add_argument("--custom", type=int, default=500, help="synthetic custom emoji count")
    parser.add_argument("--query", type=str, default=None, help="profile a single query")
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()

    random.seed(args.seed)
    Log.configure(path=None)
    engine = EmojiSearchEngine.from_catalog(synthetic_custom(args.custom), config=Config())
    queries = [args.query] if args.query is not None else QUERIES

    print("Warming up...")
    measure(engine, queries, args.warm, flush=False)

    print("Measuring...")
    print("cold (cache flushed):", summarize(measure(engine, queries, args.iters, flush=True)))
    print("warm (cache on):     ", summarize(measure(engine, queries, args.iters, flush=False)))
    print("index:", engine.index.stats())

    sample = queries[0]
    print(f"Sample results for {sample!r}:")
    for res in engine.search(sample, limit=5):
        print("  ", res.as_dict())


if __name__ == "__main__":
    main()
