import json

import pytest
import yaml

from translation_tracker.cli import main

SOURCE = "<p>The quick brown fox jumps over the lazy dog near the river bank.</p>"
MT = "<p>El rápido zorro marrón salta sobre el perro perezoso cerca de la orilla del río.</p>"
EDITED = "<p>Un zorro veloz de color café brinca por encima de un can dormido junto al agua.</p>"


def write_session(tmp_path, user_html):
    path = tmp_path / "session.yaml"
    path.write_text(yaml.safe_dump({
        "title": "Fox",
        "source_language": "en",
        "target_language": "es",
        "sections": [
            {"number": 1, "html": SOURCE},
            {"number": 2, "html": "<p>Untranslated section.</p>"},
        ],
        "translation_units": {
            1: {"user": {"engine": "openai", "content": user_html},
                "mt": {"engine": "openai", "content": MT}},
        },
    }), encoding="utf-8")
    return str(path)


def test_unmodified_translation_exits_with_warnings(tmp_path, capsys):
    session = write_session(tmp_path, MT)

    code = main(["report", session, "-c", str(tmp_path / "none.yaml")])

    out = capsys.readouterr().out
    assert code == 1
    assert "Translation progress: Fox" in out
    assert "MT abuse warnings:   1" in out


def test_edited_translation_exits_cleanly(tmp_path, capsys):
    session = write_session(tmp_path, EDITED)

    assert main(["report", session, "-c", str(tmp_path / "none.yaml"), "--json"]) == 0

    progress = json.loads(capsys.readouterr().out)
    assert progress["any"] == 0.5
    assert progress["human"] == 0.5
    assert progress["translatedSectionsCount"] == 1


def test_report_is_written(tmp_path, capsys):
    session = write_session(tmp_path, MT)
    report = tmp_path / "report.html"

    main(["report", session, "-c", str(tmp_path / "none.yaml"), "--report", str(report)])

    assert report.exists()
    assert f"Report: {report}" in capsys.readouterr().out


def test_missing_session_file(tmp_path, capsys):
    assert main(["report", str(tmp_path / "missing.yaml")]) == 2
    assert "Session file not found" in capsys.readouterr().err


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        main([])
