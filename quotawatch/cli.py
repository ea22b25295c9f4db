#!/usr/bin/env python3
import sys, json, argparse

import yaml

from quotawatch.config import config_path, load_config, validate
from quotawatch.controller import build_controller
from quotawatch.errors import ConfigError


def check_config(path) -> int:
    p = config_path(path)
    try:
        with open(p, encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"[FAIL] config: {p}: {e}")
        return 1
    errs = validate(doc if doc is not None else {})
    if errs:
        print(f"[FAIL] config: {p}")
        for e in errs[:3]:
            print(f"  - {e.message}")
        return 1
    print(f"[OK]   config: {p}")
    return 0


def main(argv=None):
    ap = argparse.ArgumentParser(prog="quota-watch",
                                 description="take a static S3 site offline once its monthly download quota is spent")
    ap.add_argument("--config", help="config yaml (default: $QUOTA_WATCH_CONFIG or config/quota_watch.yml)")
    ap.add_argument("--probe", action="store_true", help="report state and usage only, change nothing")
    ap.add_argument("--check-config", action="store_true", help="validate the config file and exit")
    a = ap.parse_args(argv)

    if a.check_config:
        return check_config(a.config)
    try:
        cfg = load_config(a.config)
    except ConfigError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 2
    ctl = build_controller(cfg)
    out = ctl.probe() if a.probe else ctl.run()
    tag = "QUOTA_PROBE" if a.probe else "QUOTA_WATCH"
    print(tag, json.dumps(out.summary(), ensure_ascii=False))
    return 0 if out.error is None else 1


if __name__ == "__main__":
    sys.exit(main())
