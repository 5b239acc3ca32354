"""
Analyze every pose CSV in a directory.

Usage:
    python -m rallylens.batch data/extracted_poses --fps 30
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
from tqdm import tqdm

from .config import AnalysisConfig, DEFAULT_CONFIG
from .analyzer import RallyAnalyzer
from .pose.loader import load_pose_csv

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['clip', 'frames', 'total_shots', 'overall_technique', 'key_moments']


def clip_name(csv_path: Path) -> str:
    """'rally_001_poses.csv' -> 'rally_001'"""
    name = csv_path.name
    return name[:-len('_poses.csv')] if name.endswith('_poses.csv') else csv_path.stem


def analyze_directory(directory, pattern: str = '*_poses.csv', fps: Optional[float] = None,
                      normalized: bool = False, config: AnalysisConfig = DEFAULT_CONFIG,
                      show_progress: bool = True) -> pd.DataFrame:
    """
    Analyze all pose CSVs matching a pattern.

    Args:
        directory: Folder holding pose CSVs
        pattern: Glob pattern for pose files
        fps: Frame rate for timestamp derivation
        normalized: True if coordinates are in [0, 1]
        config: Analysis settings (frame size used for normalized input)
        show_progress: Show a tqdm progress bar

    Returns:
        DataFrame with one row per clip, sorted by file name
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Pose directory not found: {directory}")

    csv_files = sorted(directory.glob(pattern))
    logger.info("Found %d pose files in %s", len(csv_files), directory)

    analyzer = RallyAnalyzer(config)
    frame_size = (config.frame_width, config.frame_height)
    rows = []

    for csv_path in tqdm(csv_files, desc="Analyzing clips", disable=not show_progress):
        frames = load_pose_csv(csv_path, fps=fps, normalized=normalized, frame_size=frame_size)
        analysis = analyzer.analyze(frames)
        rows.append({
            'clip': clip_name(csv_path),
            'frames': analysis.frame_count,
            'total_shots': analysis.total_shots,
            'overall_technique': analysis.technique.overall_technique,
            'key_moments': len(analysis.key_moments),
        })

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Analyze a directory of pose CSVs')
    parser.add_argument('directory', help='Folder with pose CSVs')
    parser.add_argument('--pattern', default='*_poses.csv', help='Glob pattern (default: *_poses.csv)')
    parser.add_argument('--fps', type=float, default=None)
    parser.add_argument('--normalized', action='store_true')
    parser.add_argument('--output', '-o', default=None, help='Save the summary as CSV')
    args = parser.parse_args(argv)

    summary = analyze_directory(args.directory, args.pattern, fps=args.fps, normalized=args.normalized)

    print(f"\n{'='*60}")
    print("BATCH SUMMARY")
    print(f"{'='*60}")
    if summary.empty:
        print("❌ No pose files found")
    else:
        print(summary.to_string(index=False))
        print(f"\n✓ {len(summary)} clips, {summary['total_shots'].sum()} shots, "
              f"mean technique {summary['overall_technique'].mean():.1f}")

    if args.output:
        summary.to_csv(args.output, index=False)
        print(f"✓ Saved summary to {args.output}")


if __name__ == "__main__":
    main()
