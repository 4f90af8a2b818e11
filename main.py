#!/usr/bin/env python
"""
Evolutionary Hyperparameter Tuning - Main Entry Point
Loads a tabular dataset, tunes one model family with the configured
evolution strategy and exports the tuning report.
"""
import sys
import logging
import argparse
import traceback
from pathlib import Path

import pandas as pd

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from modules.config_manager import ConfigurationManager
from modules.logging_config import LoggingConfigurator
from modules.evolution_engine import TuningEngine
from modules.reporting_engine import ReportExporter
from modules.trainer import SklearnTrainer
from utils.exceptions import DataValidationError, TuningException
from utils.file_io import read_dataframe


def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Evolutionary Hyperparameter Tuning (batch or continuous)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.json",
        help="Path to the configuration JSON file"
    )
    parser.add_argument(
        "--schema",
        type=str,
        default="config/schema.json",
        help="Path to the configuration JSON schema"
    )
    parser.add_argument(
        "--run-id",
        type=str,
        default=None,
        help="Optional run identifier (defaults to timestamp if not provided)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and setup without evaluating any candidate"
    )
    return parser.parse_args(argv)


def setup_run_directory(config: dict, run_id: str, logger: logging.Logger) -> Path:
    """Create '<base_results_dir>/<run_id>' and point the outputs section at it."""
    base_results_dir = config.setdefault('outputs', {}).get('base_results_dir', 'results')
    run_dir = (Path(base_results_dir) / run_id).absolute()
    run_dir.mkdir(parents=True, exist_ok=True)
    config['outputs']['base_results_dir'] = str(run_dir)
    logger.info(f"Created run directory: {run_dir}")
    return run_dir


def load_training_data(config: dict, logger: logging.Logger):
    """
    Load the dataset named in the 'data' section and split features from the label.

    Raises:
        DataValidationError: missing file, missing label column or empty feature set.
    """
    data_cfg = config.get('data', {})
    file_path = data_cfg.get('file_path')
    label_column = data_cfg.get('label_column')
    if not file_path or not label_column:
        raise DataValidationError("data.file_path and data.label_column must be specified.")
    if not Path(file_path).exists():
        raise DataValidationError(f"Data file not found: {file_path}")

    try:
        df = read_dataframe(Path(file_path))
    except ValueError as e:
        raise DataValidationError(str(e)) from e

    if label_column not in df.columns:
        raise DataValidationError(f"Label column '{label_column}' not found in {file_path}")

    feature_columns = data_cfg.get('feature_columns') or [c for c in df.columns if c != label_column]
    missing = [c for c in feature_columns if c not in df.columns]
    if missing:
        raise DataValidationError(f"Feature columns not found in {file_path}: {missing}")

    df = df.dropna(subset=feature_columns + [label_column])
    if df.empty:
        raise DataValidationError(f"No complete rows left in {file_path} after dropping missing values")

    X = df[feature_columns]
    if data_cfg.get('one_hot_encode', True):
        X = pd.get_dummies(X, drop_first=False, dtype=float)
    logger.info(f"Data loaded: {len(df)} samples, {X.shape[1]} features, label '{label_column}'")
    return X, df[label_column]


def main(argv=None):
    """
    Tuning orchestration.

    Returns:
        int: Exit code (0 for success, 1 for errors, 130 on interrupt)
    """
    logger = None

    try:
        args = parse_arguments(argv)

        print("\n" + "=" * 80)
        print("    EVOLUTIONARY HYPERPARAMETER TUNING")
        print("=" * 80 + "\n")

        # 1. Load and validate configuration
        config_manager = ConfigurationManager(config_path=args.config, schema_path=args.schema)
        config = config_manager.load_and_validate()

        if args.verbose:
            config.setdefault('logging', {})['level'] = 'DEBUG'

        # 2. Setup logging
        logging_configurator = LoggingConfigurator(config)
        logging_configurator.setup()
        logger = logging_configurator.get_logger('tuning')
        logger.info(f"Configuration loaded from: {args.config}")

        # 3. Run directory and configuration artifacts
        config_manager.run_id = args.run_id
        run_id = config_manager.generate_run_id()
        run_dir = setup_run_directory(config, run_id, logger)
        config_manager.save_artifacts(str(run_dir))

        tuning = config['tuning']
        logger.info(
            f"Run ID: {run_id} | family {tuning['model_family']} | "
            f"{tuning['evolution_strategy']} evolution, {tuning['scoring_optimization_strategy']}"
        )

        if args.dry_run:
            logger.info("Dry run mode: validation complete. Exiting without evaluating candidates.")
            print("\n[SUCCESS] Configuration validated successfully.")
            return 0

        # 4. Data and trainer
        X, y = load_training_data(config, logger)
        trainer_cfg = config.get('trainer', {})
        artifact_dir = run_dir / "models" if trainer_cfg.get('save_models', False) else None
        trainer = SklearnTrainer(
            X, y,
            model_family=tuning['model_family'],
            model_type=tuning['model_type'],
            scoring=trainer_cfg.get('scoring'),
            cv_folds=trainer_cfg.get('cv_folds', 3),
            seed=tuning['_internal_seeds']['trainer'],
            n_jobs=trainer_cfg.get('n_jobs', 1),
            fit_final_model=trainer_cfg.get('fit_final_model', False) or artifact_dir is not None,
            artifact_dir=artifact_dir,
            logger=logging.getLogger('trainer'),
        )

        # 5. Tune
        engine = TuningEngine(config, logging.getLogger('evolution'), trainer)
        report = engine.execute()

        # 6. Export
        exporter = ReportExporter(config, logging.getLogger('reporting'))
        exporter.execute(report, run_id)

        logger.info("-" * 60)
        logger.info("TUNING COMPLETED SUCCESSFULLY")
        logger.info(f"Stop reason: {report.stop_reason}")
        if report.best is not None:
            logger.info(f"Best score: {report.best.score:.6g} -> {report.best.candidate.as_dict()}")
        logger.info(f"Output Directory: {run_dir}")
        logger.info("-" * 60)

        print(f"\n[SUCCESS] Tuning completed. Results saved to: {run_dir}")
        return 0

    except TuningException as e:
        msg = f"Tuning Error: {str(e)}"
        print(f"\n[ERROR] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        else:
            traceback.print_exc()
        return 1

    except KeyboardInterrupt:
        print("\n[INTERRUPTED] Tuning interrupted by user.")
        if logger:
            logger.warning("Tuning interrupted by user (Ctrl+C)")
        return 130

    except Exception as e:
        msg = f"Unexpected Error: {str(e)}"
        print(f"\n[CRITICAL] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        else:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
