import sys, json, time, hashlib, pathlib

STDOUT = "-"


def make_record(event, meta, decision="", reasons=None):
    return {
        "ts": int(time.time()),
        "event": event,
        "actor": "system",
        "ref": hashlib.sha256(json.dumps(meta, sort_keys=True, default=str).encode()).hexdigest()[:16],
        "decision": decision,
        "reasons": list(reasons or []),
        "meta": meta,
    }


def write_audit(path, event, meta, decision="", reasons=None):
    """Append one JSONL audit record to path ("-" writes to stdout)."""
    rec = make_record(event, meta, decision, reasons)
    line = json.dumps(rec, ensure_ascii=False, default=str)
    if path == STDOUT:
        print(line, file=sys.stdout, flush=True)
        return rec
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "a", encoding="utf-8") as f:
        f.write(line + "\n")
    return rec
