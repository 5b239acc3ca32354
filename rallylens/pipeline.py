"""
RallyLens - Analysis Pipeline
=============================
End-to-end pickleball technique analysis for one pose CSV.

Input: Pose CSV (frame, <landmark>_x, <landmark>_y, <landmark>_visibility)
Output: Shot list, clip technique scores and a benchmark report

Pipeline Steps:
1. Load poses (CSV -> PoseFrames)
2. Analyze clip (shots, technique, key moments)
3. Compare against a skill-level benchmark
4. Print report (optionally save the per-frame technique timeline)

Usage:
    python -m rallylens.pipeline <poses_csv>
    python -m rallylens.pipeline data/rally_001_poses.csv --level advanced
    python -m rallylens.pipeline poses.csv --normalized --width 1280 --height 720 --fps 30
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import AnalysisConfig, DEFAULT_CONFIG
from .constants import SKILL_LEVELS
from .pose.loader import load_pose_csv
from .analyzer import RallyAnalyzer
from .biomechanics.comparator import BenchmarkComparator
from .biomechanics.technique import technique_timeline


class RallyAnalysisPipeline:
    """
    Unified pipeline for rally technique analysis.

    Takes a pose CSV and produces:
    - ClipAnalysis (shots, technique, key moments, shot statistics)
    - BenchmarkComparison against the chosen skill level
    - Text report
    - Technique timeline CSV (optional)
    """

    def __init__(self, level: str = 'intermediate', config: AnalysisConfig = DEFAULT_CONFIG,
                 output_dir=None):
        """
        Initialize pipeline.

        Args:
            level: Benchmark skill level
            config: Analysis settings
            output_dir: Directory for the timeline CSV (None = don't save)
        """
        self.level = level
        self.config = config
        self.output_dir = Path(output_dir) if output_dir else None

        self.analyzer = RallyAnalyzer(config)
        self.comparator = BenchmarkComparator()

        # Pipeline state
        self.clip_name = None
        self.frames = []
        self.analysis = None
        self.comparison = None
        self.timeline_csv_path = None

    def run(self, csv_path, fps: Optional[float] = None, normalized: bool = False) -> Dict:
        """
        Run the complete pipeline.

        Args:
            csv_path: Path to pose CSV
            fps: Frame rate used to derive timestamps when the CSV has none
            normalized: True if the CSV holds [0, 1] coordinates

        Returns:
            dict: analysis, comparison, report and output path
        """
        csv_path = Path(csv_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"Pose CSV not found: {csv_path}")

        self.clip_name = csv_path.stem

        print("\n" + "=" * 70)
        print("🏓 RALLYLENS - TECHNIQUE ANALYSIS PIPELINE")
        print("=" * 70)
        print(f"📄 Input: {csv_path}")
        print(f"🎯 Benchmark: {self.level}")
        print("=" * 70 + "\n")

        print("📋 STEP 1/3: Loading Poses...")
        self._load_poses(csv_path, fps, normalized)

        print("\n📋 STEP 2/3: Analyzing Shots & Technique...")
        self._analyze()

        print("\n📋 STEP 3/3: Comparing Against Benchmark...")
        self._compare()

        report = self.comparator.generate_report(self.comparison)
        print("\n" + report)

        self._print_summary()
        return self._get_results(report)

    def _load_poses(self, csv_path: Path, fps: Optional[float], normalized: bool):
        frame_size = (self.config.frame_width, self.config.frame_height)
        self.frames = load_pose_csv(csv_path, fps=fps, normalized=normalized, frame_size=frame_size)
        print(f"   ✓ Loaded {len(self.frames)} frames")

    def _analyze(self):
        self.analysis = self.analyzer.analyze(self.frames)
        print(f"   ✓ {self.analysis.total_shots} shots detected")
        for shot_type, stats in self.analysis.shot_statistics.items():
            print(f"      • {shot_type:<10} x{stats['count']:<3d} "
                  f"quality {stats['avg_quality']:5.1f}  speed {stats['avg_speed']:4.1f} mph")
        if self.analysis.unreliable_frames:
            print(f"   ⚠️  {self.analysis.unreliable_frames} frames with low-confidence poses")

        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.timeline_csv_path = self.output_dir / f"{self.clip_name}_technique.csv"
            technique_timeline(self.frames, config=self.config).to_csv(self.timeline_csv_path, index=False)
            print(f"   ✓ Technique timeline saved to: {self.timeline_csv_path}")

    def _compare(self):
        self.comparison = self.comparator.compare(self.analysis.technique, self.level)
        print(f"   ✓ Overall percentile vs {self.comparison.level}: "
              f"{self.comparison.overall.percentile:.0f}")

    def _print_summary(self):
        """Print pipeline completion summary."""
        print("\n" + "=" * 70)
        print("✅ PIPELINE COMPLETE!")
        print("=" * 70)

        print(f"\n📊 Overall Technique: {self.analysis.technique.overall_technique:.1f}/100")

        if self.analysis.key_moments:
            print("\n⭐ KEY MOMENTS:")
            for moment in self.analysis.key_moments:
                print(f"   • Frame {moment.frame_index:>5d} → {moment.description}")

        print("\n" + "=" * 70 + "\n")

    def _get_results(self, report: str) -> Dict:
        return {
            'clip_name': self.clip_name,
            'analysis': self.analysis,
            'comparison': self.comparison,
            'report': report,
            'timeline_csv': str(self.timeline_csv_path) if self.timeline_csv_path else None,
        }


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the analysis pipeline.

    Usage:
        python -m rallylens.pipeline <poses_csv> [--level LEVEL] [--width W --height H]
                                     [--fps F] [--normalized] [--output DIR] [--verbose]
    """
    parser = argparse.ArgumentParser(description='RallyLens - Pickleball Technique Analysis Pipeline')
    parser.add_argument('poses', help='Path to pose CSV file')
    parser.add_argument('--level', '-l', default='intermediate',
                        help=f"Benchmark level: {', '.join(SKILL_LEVELS)} (default: intermediate)")
    parser.add_argument('--width', type=float, default=DEFAULT_CONFIG.frame_width, help='Frame width')
    parser.add_argument('--height', type=float, default=DEFAULT_CONFIG.frame_height, help='Frame height')
    parser.add_argument('--fps', type=float, default=None, help='Frame rate (for timestamps)')
    parser.add_argument('--normalized', action='store_true', help='Coordinates are in [0, 1]')
    parser.add_argument('--output', '-o', default=None, help='Directory for the technique timeline CSV')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    try:
        config = DEFAULT_CONFIG.with_frame_size(args.width, args.height)
        pipeline = RallyAnalysisPipeline(level=args.level, config=config, output_dir=args.output)
        results = pipeline.run(args.poses, fps=args.fps, normalized=args.normalized)
    except FileNotFoundError as e:
        print(f"\n❌ ERROR: {e}")
        print("Please check the pose CSV path and try again.")
        return 1
    except ValueError as e:  # RallyLensError and bad settings
        print(f"\n❌ ERROR: {e}")
        return 1

    print(f"🎉 Success! {results['analysis'].total_shots} shots analyzed for {results['clip_name']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
