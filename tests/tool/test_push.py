"""Tests for the push command."""

import pathlib

import pytest
import yaml

from chart_repo.tool.chart_repo import main

from .. import build_archive
from . import write_archive


def test_push(
    storage_dir: pathlib.Path,
    upload_dir: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test pushing chart archives into an empty repository directory."""
    main(
        [
            "push",
            str(upload_dir / "tomcat-0.4.1.tgz"),
            str(upload_dir / "tomcat-0.5.0.tgz"),
            "--storage-dir",
            str(storage_dir),
            "--base-url",
            "https://example.com/charts/",
        ]
    )
    assert capsys.readouterr().out.splitlines() == [
        "Pushed tomcat 0.4.1 as tomcat-0.4.1.tgz",
        "Pushed tomcat 0.5.0 as tomcat-0.5.0.tgz",
    ]
    assert sorted(p.name for p in storage_dir.iterdir()) == [
        "index.yaml",
        "tomcat-0.4.1.tgz",
        "tomcat-0.5.0.tgz",
    ]
    assert (storage_dir / "tomcat-0.5.0.tgz").read_bytes() == (
        upload_dir / "tomcat-0.5.0.tgz"
    ).read_bytes()

    doc = yaml.safe_load((storage_dir / "index.yaml").read_text())
    assert [r["version"] for r in doc["entries"]["tomcat"]] == ["0.4.1", "0.5.0"]
    assert doc["entries"]["tomcat"][1]["urls"] == [
        "https://example.com/charts/tomcat-0.5.0.tgz"
    ]


def test_push_again(
    storage_dir: pathlib.Path,
    upload_dir: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test pushing a chart that is already in the index."""
    args = [
        "push",
        str(upload_dir / "tomcat-0.4.1.tgz"),
        "--storage-dir",
        str(storage_dir),
    ]
    main(args)
    index = (storage_dir / "index.yaml").read_bytes()
    capsys.readouterr()

    main(args)
    assert capsys.readouterr().out.splitlines() == [
        "Skipped tomcat 0.4.1: already in index"
    ]
    assert (storage_dir / "index.yaml").read_bytes() == index


def test_push_custom_index_key(
    storage_dir: pathlib.Path, upload_dir: pathlib.Path
) -> None:
    """Test pushing to an index in a subdirectory of the repository."""
    main(
        [
            "push",
            str(upload_dir / "nginx-1.0.0.tgz"),
            "--storage-dir",
            str(storage_dir),
            "--index-key",
            "stable/index.yaml",
        ]
    )
    assert (storage_dir / "stable" / "index.yaml").exists()
    assert not (storage_dir / "index.yaml").exists()


def test_push_invalid_archive(
    storage_dir: pathlib.Path,
    tmp_path: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test pushing a file that is not a chart archive."""
    path = write_archive(tmp_path, "broken.tgz", build_archive(None, directory="x"))
    with pytest.raises(SystemExit) as exc_info:
        main(["push", str(path), "--storage-dir", str(storage_dir)])
    assert exc_info.value.code == 1
    assert "Chart.yaml" in capsys.readouterr().err
    assert not (storage_dir / "index.yaml").exists()


def test_push_corrupt_index(
    storage_dir: pathlib.Path,
    upload_dir: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test pushing into a repository whose index can't be parsed."""
    storage_dir.mkdir()
    (storage_dir / "index.yaml").write_text("entries: [\n")
    with pytest.raises(SystemExit):
        main(
            [
                "push",
                str(upload_dir / "tomcat-0.4.1.tgz"),
                "--storage-dir",
                str(storage_dir),
            ]
        )
    assert "is corrupt" in capsys.readouterr().err
    assert (storage_dir / "index.yaml").read_text() == "entries: [\n"


def test_push_missing_file(
    storage_dir: pathlib.Path,
    tmp_path: pathlib.Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Test pushing an archive path that does not exist."""
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                "push",
                str(tmp_path / "tomcat-9.9.9.tgz"),
                "--storage-dir",
                str(storage_dir),
            ]
        )
    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "chart-repo error:" in err
    assert "Unable to read" in err
    assert "tomcat-9.9.9.tgz" in err
    assert not (storage_dir / "index.yaml").exists()
