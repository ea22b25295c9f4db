from __future__ import annotations

import json

from quotawatch.audit import make_record, write_audit


def test_ref_is_stable_and_short() -> None:
    a = make_record("quota_watch", {"b": 2, "a": 1})
    b = make_record("quota_watch", {"a": 1, "b": 2})
    assert a["ref"] == b["ref"]
    assert len(a["ref"]) == 16
    assert a["actor"] == "system"


def test_appends_jsonl(tmp_path) -> None:
    p = tmp_path / "nested" / "audit.jsonl"
    write_audit(str(p), "quota_watch", {"n": 1})
    write_audit(str(p), "quota_watch", {"n": 2}, decision="noop", reasons=["x"])
    lines = [json.loads(x) for x in p.read_text().splitlines()]
    assert [r["meta"]["n"] for r in lines] == [1, 2]
    assert lines[1]["decision"] == "noop"
    assert lines[1]["reasons"] == ["x"]


def test_dash_goes_to_stdout(capsys) -> None:
    write_audit("-", "quota_watch", {"n": 3})
    out = capsys.readouterr().out.strip()
    assert json.loads(out)["meta"] == {"n": 3}
