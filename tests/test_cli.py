import json

import pytest

from contractgen.__main__ import main
from contractgen.settings import load_settings

BLOCK = {
    "id": "b-fte",
    "name": "FTE Breakdown",
    "placeholder": "FTEBreakdown",
    "outputType": "paragraph",
    "conditions": [{"field": "clinicalFTE", "operator": ">", "value": "0", "label": "Clinical FTE"}],
    "alwaysInclude": [{"label": "Admin FTE", "valueField": "administrativeFte"}],
}
RECORD = {"name": "Dr. A", "clinicalFTE": 0.8, "administrativeFte": 0.2}


def run(capsys, tmp_path, *argv):
    main(["--settings-file", str(tmp_path / "missing.json"), *argv])
    return json.loads(capsys.readouterr().out)


def test_evaluate(capsys, tmp_path):
    out = run(
        capsys, tmp_path, "evaluate",
        "--record", json.dumps({"dynamicFields": json.dumps({"DivisionChiefFTE": "0.3"})}),
        "--condition", json.dumps({"field": "divisionChiefFTE", "operator": ">", "value": "0", "label": "Chief"}),
    )
    assert out["success"] is True
    assert out["data"] == {"result": True, "found": True, "value": "0.3", "matched_name": "DivisionChiefFTE"}


def test_render_block(capsys, tmp_path):
    out = run(capsys, tmp_path, "render-block", "--record", json.dumps(RECORD), "--block", json.dumps(BLOCK))
    assert out["data"]["items"] == [
        {"label": "Clinical FTE", "value": "0.8"},
        {"label": "Admin FTE", "value": "0.2"},
    ]
    assert out["data"]["html"].startswith("<p")


def test_merge_from_files(capsys, tmp_path):
    template = tmp_path / "schedule-a.html"
    template.write_text("<div>{{ProviderName}}</div>{{FTEBreakdown}}{{Unknown}}", encoding="utf-8")
    mappings = tmp_path / "mappings.json"
    mappings.write_text(json.dumps({
        "schedule-a": [
            {"placeholder": "ProviderName", "mappedColumn": "name"},
            {"placeholder": "FTEBreakdown", "mappedColumn": "dynamic:b-fte"},
        ]
    }), encoding="utf-8")

    out = run(
        capsys, tmp_path, "merge",
        "--template", str(template),
        "--record", json.dumps(RECORD),
        "--blocks", json.dumps([BLOCK]),
        "--mappings", f"@{mappings}",
    )
    assert out["success"] is True
    assert out["data"]["content"].startswith("<div>Dr. A</div><p")
    assert out["data"]["unresolved"] == ["Unknown"]


def test_placeholders(capsys, tmp_path):
    template = tmp_path / "t.md"
    template.write_text("Hello {{ProviderName}}, {{ BaseSalary }}", encoding="utf-8")
    out = run(capsys, tmp_path, "placeholders", "--template", str(template))
    assert out["data"] == {"template_id": "t", "placeholders": ["ProviderName", "BaseSalary"]}


def test_generate_dry_run_accepts_load_csv_output(capsys, tmp_path):
    template = tmp_path / "t.html"
    template.write_text("{{X}}", encoding="utf-8")
    data = {"rows": [RECORD, RECORD], "headers": [], "count": 2}
    out = run(
        capsys, tmp_path, "generate",
        "--template", str(template),
        "--data", json.dumps(data),
        "--output-dir", str(tmp_path / "out"),
        "--dry-run",
    )
    assert out["data"]["created"] == 2
    assert out["data"]["files"] == []
    assert len(out["data"]["warnings"]) == 2


def test_errors_use_json_envelope(capsys, tmp_path):
    out = run(capsys, tmp_path, "load-csv", str(tmp_path / "nope.csv"))
    assert out["success"] is False
    assert out["data"] is None
    assert out["error"]


def test_duplicate_block_placeholder_is_an_error(capsys, tmp_path):
    template = tmp_path / "t.html"
    template.write_text("{{FTEBreakdown}}", encoding="utf-8")
    out = run(
        capsys, tmp_path, "merge",
        "--template", str(template),
        "--record", "{}",
        "--blocks", json.dumps([BLOCK, dict(BLOCK, id="b-2")]),
    )
    assert out["success"] is False
    assert "FTEBreakdown" in out["error"]


def test_settings_precedence(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"value_header": "Hours", "output_dir": "/from/file", "money_hints": ["Pay"]}), encoding="utf-8")
    monkeypatch.setenv("CONTRACTGEN_OUTPUT_DIR", "/from/env")
    monkeypatch.delenv("CONTRACTGEN_VALUE_HEADER", raising=False)

    settings = load_settings(str(path))
    assert settings.value_header == "Hours"
    assert settings.output_dir == "/from/env"
    assert settings.money_hints == ("pay",)
    assert settings.extension_key == "dynamicFields"


def test_settings_ignore_bad_file(tmp_path, monkeypatch):
    monkeypatch.delenv("CONTRACTGEN_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("CONTRACTGEN_VALUE_HEADER", raising=False)
    path = tmp_path / "settings.json"
    path.write_text("{broken", encoding="utf-8")
    settings = load_settings(str(path))
    assert settings.value_header == "FTE"


def test_subcommand_required():
    with pytest.raises(SystemExit):
        main([])
