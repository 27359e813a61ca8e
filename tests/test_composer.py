"""Tests for composer invocations."""

from conftest import FakeRunner
from repo_outdated.auditor.composer import Composer
from repo_outdated.auditor.process import ProcessResult


def test_install_runs_quietly_in_manifest_dir(tmp_path, fake_runner):
    composer = Composer("/usr/bin/composer", runner=fake_runner)
    result = composer.install(tmp_path)

    assert result.is_successful
    assert fake_runner.calls == [(["/usr/bin/composer", "-q", "install"], tmp_path)]


def test_outdated_reports_direct_json(tmp_path, fake_runner):
    Composer("composer", runner=fake_runner).outdated(tmp_path)
    args, cwd = fake_runner.calls[0]
    assert args == ["composer", "outdated", "-f", "json", "--direct"]
    assert cwd == tmp_path


def test_outdated_minor_only(tmp_path, fake_runner):
    Composer("composer", runner=fake_runner).outdated(tmp_path, minor_only=True)
    args, _ = fake_runner.calls[0]
    assert args[-1] == "-m"


def test_nonzero_exit_is_returned_not_raised(tmp_path):
    runner = FakeRunner({"install": ProcessResult(args=[], returncode=2, stderr="boom")})
    result = Composer("composer", runner=runner).install(tmp_path)

    assert not result.is_successful
    assert result.stderr == "boom"


def test_missing_executable_is_a_failed_result(tmp_path):
    class Missing:
        def run(self, args, cwd=None):
            raise FileNotFoundError(2, "No such file or directory", args[0])

    result = Composer("/nope/composer", runner=Missing()).outdated(tmp_path)
    assert result.returncode == 127
    assert not result.is_successful
