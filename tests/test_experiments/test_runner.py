"""
Тесты серии прогонов и CLI сравнения с Ллойдом.
"""

import json
import logging

import pytest

from yinyang.core.lloyd import KMeansLloyd
from yinyang.core.parallel import MultiprocessingConfig
from yinyang.core.yinyang import KMeansYinyang
from yinyang.data.dataset import Dataset, DatasetConfig
from yinyang.errors import InvalidConfigError
from yinyang.experiments.runner import ExperimentRunner
from yinyang.main import build_parser, run_benchmark


@pytest.fixture
def tiny_dataset():
    return Dataset.from_config(DatasetConfig(N=300, D=3, K=14, seed=3, purpose="test"))


class TestExperimentRunner:
    def test_lloyd_stats(self, tiny_dataset):
        runner = ExperimentRunner(tiny_dataset, KMeansLloyd, name="lloyd")

        stats = runner.run(repeats=2, warmup=0)

        assert stats["repeats_done"] == 2
        assert len(stats["runs"]) == 2
        assert stats["T_fit_min"] <= stats["T_fit_avg"]
        # точный алгоритм ничего не отсекает
        assert stats["pruning_ratio_avg"] == 0.0
        assert stats["result"].labels.shape == (300,)

    def test_yinyang_counts_distance_evaluations(self, tiny_dataset):
        runner = ExperimentRunner(
            tiny_dataset,
            lambda **kw: KMeansYinyang(mp=MultiprocessingConfig(n_processes=1), **kw),
            name="yinyang",
        )

        stats = runner.run(repeats=1, warmup=0)

        run = stats["runs"][0]
        n_passes = run["n_iters_actual"] + 1
        assert 0 < run["distance_evals"] <= 300 * 14 * n_passes
        assert 0.0 <= run["pruning_ratio"] < 1.0

    def test_time_limit_stops_early(self, tiny_dataset):
        runner = ExperimentRunner(tiny_dataset, KMeansLloyd)

        stats = runner.run(repeats=50, warmup=0, max_seconds=0.0)

        assert stats["estimated"]
        assert stats["repeats_done"] == 1
        assert stats["repeats_requested"] == 50

    def test_repeats_must_be_positive(self, tiny_dataset):
        with pytest.raises(InvalidConfigError):
            ExperimentRunner(tiny_dataset, KMeansLloyd).run(repeats=0)


class TestBenchmark:
    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        assert args.k == 64
        assert args.divider == 7
        assert not args.no_auto
        assert args.output is None

    def test_run_benchmark_writes_ndjson(self, tmp_path):
        output = tmp_path / "results.ndjson"
        args = build_parser().parse_args(
            [
                "--n", "400", "--d", "3", "--k", "14",
                "--processes", "1", "--repeats", "1", "--warmup", "0", "--tol", "0",
                "--output", str(output),
            ]
        )
        logger = logging.getLogger("yinyang.tests")

        summary = run_benchmark(args, logger)

        assert summary["labels_agree"] == 1.0
        assert summary["inertia_yinyang"] == pytest.approx(summary["inertia_lloyd"], rel=1e-9)
        assert summary["speedup"] > 0

        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["K"] == 14
        assert record["yinyang"]["repeats_done"] == 1
