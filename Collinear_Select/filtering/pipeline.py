"""
CollinearSelect (CSEL) - Selection Pipeline

Two-stage variable selection over one prepared matrix:
- Stage 0: Numeric matrix preparation (omit / select / complete cases)
- Stage 1: Correlation dendrogram selection (max |r| <= max_cor)
- Stage 2: Iterative VIF selection over the stage-1 survivors

Each stage can be switched off; with checkpointing enabled the results are
written to io.output_dir.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from Collinear_Select.config.settings import Config
from Collinear_Select.filtering.io.table_reader import read_table
from Collinear_Select.filtering.passes.cluster_selection import ClusterSelector
from Collinear_Select.filtering.passes.pass0_prepare import Dataset, prepare_numeric_matrix
from Collinear_Select.filtering.passes.vif_iterative import VIFPolicy, VIFSelector
from Collinear_Select.filtering.ranking import ranking_from_table
from Collinear_Select.filtering.render import plot_dendrogram
from Collinear_Select.filtering.result import SelectionResult
from Collinear_Select.filtering.utils.logging import log


class SelectionPipeline:
    """
    Cluster pre-filter followed by VIF refinement

    Usage:
        pipeline = SelectionPipeline(load_config("settings.yaml"))
        results = pipeline.run()
        results["selected"]
    """

    def __init__(self, config: Config):
        self.config = config

        self.io_cfg = config.io
        self.filtering_cfg = config.filtering
        self.plot_cfg = config.plot
        self.system_cfg = config.system

        self.output_dir = Path(self.io_cfg.output_dir)

        self.cluster_selector = ClusterSelector(
            max_cor=self.filtering_cfg.max_cor,
            n_steps=self.filtering_cfg.height_steps,
            exploratory_linkage=self.filtering_cfg.exploratory_linkage,
            ranked_linkage=self.filtering_cfg.ranked_linkage,
            verbose=self.system_cfg.verbose,
            log_file=self.system_cfg.log_file,
        )
        self.vif_selector = VIFSelector(
            vif_threshold=self.filtering_cfg.vif_threshold,
            singular_vif=self.filtering_cfg.singular_vif,
            verbose=self.system_cfg.verbose,
            log_file=self.system_cfg.log_file,
        )

        self.columns: Optional[List[str]] = None
        self.final_columns: Optional[List[str]] = None

    def _log(self, msg: str):
        log(msg, self.system_cfg.verbose, self.system_cfg.log_file)

    def _load_dataset(self) -> pd.DataFrame:
        if not self.io_cfg.input_path:
            raise ValueError("No dataset given and io.input_path is empty")
        self._log(f"Input: {self.io_cfg.input_path}")
        return read_table(self.io_cfg.input_path)

    def _load_ranking(self) -> Optional[Dict[str, float]]:
        if not self.io_cfg.ranking_path:
            return None
        self._log(f"Ranking: {self.io_cfg.ranking_path}")
        return ranking_from_table(
            read_table(self.io_cfg.ranking_path),
            variable_col=self.io_cfg.ranking_variable_col,
            score_col=self.io_cfg.ranking_score_col,
        )

    def _save_intermediate_columns(self, filename: str, columns: Sequence[str]):
        with open(self.output_dir / filename, 'w', encoding='utf-8') as f:
            f.write("\n".join(columns))

    def _save_dendrogram(self, result: SelectionResult) -> Optional[Path]:
        if result.render is None:
            return None
        fig = plot_dendrogram(result.render, text_size=self.plot_cfg.text_size)
        path = self.output_dir / f"dendrogram.{self.plot_cfg.format}"
        fig.savefig(path, dpi=self.plot_cfg.dpi, bbox_inches="tight")
        return path

    def run(
        self,
        dataset: Optional[Dataset] = None,
        ranking: Optional[Mapping[str, float]] = None,
        preference_order: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """
        Run the enabled stages

        Args:
            dataset: Training table (None = read io.input_path)
            ranking: Variable → score (None = read io.ranking_path, if set)
            preference_order: Explicit VIF order (None = io.preference_order)

        Returns:
            Dict with 'selected', 'cluster' and 'vif' results and timings
        """
        t_start = time.time()
        self._log("=" * 70)
        self._log("CollinearSelect - Multicollinearity Reduction")
        self._log("=" * 70)

        if dataset is None:
            dataset = self._load_dataset()
        if ranking is None:
            ranking = self._load_ranking()
        if preference_order is None:
            preference_order = self.io_cfg.preference_order

        matrix = prepare_numeric_matrix(
            dataset,
            omit_columns=self.io_cfg.omit_columns,
            select_columns=self.io_cfg.select_columns,
            verbose=self.system_cfg.verbose,
        )
        self.columns = [str(c) for c in matrix.columns]
        current = list(self.columns)

        if self.system_cfg.checkpoint:
            self.output_dir.mkdir(parents=True, exist_ok=True)

        results: Dict[str, Any] = {"candidates": list(self.columns), "cluster": None, "vif": None}

        # ===== Stage 1: Correlation dendrogram =====
        if self.filtering_cfg.run_cluster:
            cluster_result = self.cluster_selector.select(matrix, ranking=ranking)
            current = list(cluster_result.selected)
            results["cluster"] = cluster_result

            if self.system_cfg.checkpoint:
                cluster_result.save(self.output_dir / "cluster_selection.json")
                if self.plot_cfg.plot:
                    figure_path = self._save_dendrogram(cluster_result)
                    self._log(f"Dendrogram saved: {figure_path}")

        # ===== Stage 2: Iterative VIF =====
        if self.filtering_cfg.run_vif:
            if len(current) < 2:
                self._log(f"\nVIF stage skipped: {len(current)} variable(s) left")
            else:
                policy = VIFPolicy(self.filtering_cfg.vif_policy) if self.filtering_cfg.vif_policy else None
                vif_result = self.vif_selector.select(
                    matrix[current],
                    ranking=ranking,
                    preference_order=preference_order,
                    policy=policy,
                )
                current = list(vif_result.selected)
                results["vif"] = vif_result

                if self.system_cfg.checkpoint:
                    vif_result.save(self.output_dir / "vif_selection.json")

        self.final_columns = current
        results["selected"] = list(current)
        results["elapsed_sec"] = time.time() - t_start

        if self.system_cfg.checkpoint:
            self._save_intermediate_columns("selected_variables.txt", current)
            self._log(f"\nResults saved to: {self.output_dir}")

        self._log("\n" + "=" * 70)
        self._log(f"Candidates: {len(self.columns)}")
        self._log(f"Selected: {len(current)}")
        self._log(f"Elapsed: {results['elapsed_sec']:.2f}s")
        self._log("=" * 70)

        return results
