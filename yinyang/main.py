# main.py
from pathlib import Path
import argparse
import json
from multiprocessing import cpu_count

import numpy as np

from yinyang.core.lloyd import KMeansLloyd
from yinyang.core.parallel import MultiprocessingConfig
from yinyang.core.yinyang import KMeansYinyang, YinyangConfig
from yinyang.data.dataset import Dataset, DatasetConfig
from yinyang.data.validation import validate_dataset
from yinyang.experiments.runner import ExperimentRunner
from yinyang.metrics.metrics import efficiency, speedup
from yinyang.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Сравнение Yinyang k-means с точным алгоритмом Ллойда "
        "на синтетических данных make_blobs.",
    )
    parser.add_argument("--n", type=int, default=20_000, help="Количество точек N.")
    parser.add_argument("--d", type=int, default=10, help="Размерность D.")
    parser.add_argument("--k", type=int, default=64, help="Количество кластеров K.")
    parser.add_argument(
        "--processes",
        type=int,
        default=min(4, cpu_count()),
        help="Количество процессов для фаз Yinyang.",
    )
    parser.add_argument(
        "--divider",
        type=int,
        default=7,
        help="Делитель числа групп: t = max(1, K // divider).",
    )
    parser.add_argument(
        "--no-auto",
        action="store_true",
        help="Отключить группировку (одна группа, t = 1).",
    )
    parser.add_argument("--n-iters", type=int, default=300, help="Лимит итераций.")
    parser.add_argument("--tol", type=float, default=1e-6, help="Порог сходимости.")
    parser.add_argument("--repeats", type=int, default=3, help="Число измеряемых прогонов.")
    parser.add_argument("--warmup", type=int, default=1, help="Число разогревочных прогонов.")
    parser.add_argument("--seed", type=int, default=42, help="Seed генерации данных.")
    parser.add_argument(
        "--max-seconds",
        type=float,
        default=None,
        help="Лимит времени (в секундах) на прогоны одной реализации.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Файл NDJSON для сохранения результатов.",
    )
    return parser


def run_benchmark(args: argparse.Namespace, logger) -> dict:
    """Прогоны Ллойда и Yinyang на одном датасете и сводка сравнения."""
    dataset = Dataset.from_config(
        DatasetConfig(N=args.n, D=args.d, K=args.k, seed=args.seed, purpose="benchmark")
    )
    validate_dataset(dataset)

    config = YinyangConfig(auto=not args.no_auto, divider=args.divider)
    mp = MultiprocessingConfig(n_processes=args.processes)

    lloyd_stats = ExperimentRunner(
        dataset,
        model_factory=lambda **kw: KMeansLloyd(n_iters=args.n_iters, tol=args.tol, **kw),
        logger=logger,
        name="lloyd",
    ).run(repeats=args.repeats, warmup=args.warmup, max_seconds=args.max_seconds)

    yinyang_stats = ExperimentRunner(
        dataset,
        model_factory=lambda **kw: KMeansYinyang(
            n_iters=args.n_iters, tol=args.tol, config=config, mp=mp, **kw
        ),
        logger=logger,
        name="yinyang",
    ).run(repeats=args.repeats, warmup=args.warmup, max_seconds=args.max_seconds)

    lloyd_result = lloyd_stats.pop("result")
    yinyang_result = yinyang_stats.pop("result")

    s = speedup(lloyd_stats["T_fit_min"], yinyang_stats["T_fit_min"])
    summary = {
        "N": args.n,
        "D": args.d,
        "K": args.k,
        "processes": mp.n_processes,
        "divider": args.divider,
        "auto": not args.no_auto,
        "speedup": s,
        "efficiency": efficiency(s, mp.n_processes),
        "labels_agree": float(np.mean(lloyd_result.labels == yinyang_result.labels)),
        "inertia_lloyd": lloyd_result.inertia,
        "inertia_yinyang": yinyang_result.inertia,
        "lloyd": lloyd_stats,
        "yinyang": yinyang_stats,
    }

    logger.info(
        f"Speedup over Lloyd: {s:.2f}x "
        f"(pruning_ratio={yinyang_stats['pruning_ratio_avg']:.3f}, "
        f"labels_agree={summary['labels_agree']:.4f})"
    )

    if args.output is not None:
        with open(args.output, "a", encoding="utf-8") as f:
            f.write(json.dumps(summary, ensure_ascii=False))
            f.write("\n")
        logger.info(f"Results saved to {args.output}")

    return summary


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logger = setup_logger()
    run_benchmark(args, logger)


if __name__ == "__main__":
    main()
