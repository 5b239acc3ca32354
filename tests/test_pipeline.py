import pytest

from rallylens.batch import analyze_directory, clip_name
from rallylens.pipeline import RallyAnalysisPipeline, main


@pytest.fixture
def rally_csv(tmp_path, rally_frames, write_pose_csv):
    return write_pose_csv(tmp_path / 'rally_001_poses.csv', rally_frames)


def test_pipeline_run(rally_csv, tmp_path, capsys):
    pipeline = RallyAnalysisPipeline(level='advanced', output_dir=tmp_path / 'out')
    results = pipeline.run(rally_csv, fps=30)

    assert results['clip_name'] == 'rally_001_poses'
    assert results['analysis'].total_shots == 2
    assert results['comparison'].level == 'advanced'
    assert 'PICKLEBALL TECHNIQUE REPORT' in results['report']
    assert (tmp_path / 'out' / 'rally_001_poses_technique.csv').exists()
    assert 'PIPELINE COMPLETE' in capsys.readouterr().out


def test_main_success(rally_csv, capsys):
    assert main([str(rally_csv), '--fps', '30', '--level', 'beginner']) == 0
    out = capsys.readouterr().out
    assert '🎉 Success! 2 shots analyzed' in out
    assert 'Excellent dink with 100% quality' in out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.csv')]) == 1
    assert '❌ ERROR' in capsys.readouterr().out


def test_main_unknown_level(rally_csv, capsys):
    assert main([str(rally_csv), '--level', 'atlantis']) == 1
    assert 'Benchmark not found' in capsys.readouterr().out


def test_analyze_directory(tmp_path, rally_frames, make_frame, write_pose_csv):
    write_pose_csv(tmp_path / 'b_poses.csv', rally_frames)
    write_pose_csv(tmp_path / 'a_poses.csv', [make_frame(i) for i in range(3)])
    write_pose_csv(tmp_path / 'ignored.csv', rally_frames)

    summary = analyze_directory(tmp_path, fps=30, show_progress=False)

    assert list(summary['clip']) == ['a', 'b']
    assert list(summary['frames']) == [3, 6]
    assert list(summary['total_shots']) == [0, 2]
    assert list(summary['key_moments']) == [0, 1]


def test_analyze_empty_directory(tmp_path):
    summary = analyze_directory(tmp_path, show_progress=False)
    assert summary.empty
    assert list(summary.columns) == ['clip', 'frames', 'total_shots', 'overall_technique', 'key_moments']


def test_analyze_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        analyze_directory(tmp_path / 'missing')


def test_clip_name(tmp_path):
    assert clip_name(tmp_path / 'rally_001_poses.csv') == 'rally_001'
    assert clip_name(tmp_path / 'rally.csv') == 'rally'
