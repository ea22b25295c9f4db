import os, json, pathlib
from dataclasses import dataclass

import yaml
from jsonschema import Draft7Validator

from quotawatch.errors import ConfigError

ROOT = pathlib.Path(__file__).resolve().parents[1]
CONF = ROOT/"config"/"quota_watch.yml"
SCHEMA = pathlib.Path(__file__).resolve().parent/"schemas"/"quota_config.schema.json"
ENV_VAR = "QUOTA_WATCH_CONFIG"
DEFAULT_AUDIT = "-"


@dataclass(frozen=True)
class QuotaConfig:
    """Deployment constants. Built once, never mutated."""
    bucket_name: str
    region: str
    monthly_byte_quota: float
    recipient: str
    sender: str
    audit_path: str = DEFAULT_AUDIT


def config_path(path=None) -> pathlib.Path:
    if path:
        return pathlib.Path(path)
    env = os.environ.get(ENV_VAR)
    return pathlib.Path(env) if env else CONF


def validate(doc):
    """Return the schema errors for a parsed config document (empty = ok)."""
    with open(SCHEMA, encoding="utf-8") as f:
        v = Draft7Validator(json.load(f))
    return sorted(v.iter_errors(doc), key=lambda e: list(e.path))


def from_dict(doc) -> QuotaConfig:
    errs = validate(doc)
    if errs:
        msgs = "; ".join(e.message for e in errs[:3])
        raise ConfigError(f"invalid configuration: {msgs}")
    return QuotaConfig(
        bucket_name=doc["bucket_name"],
        region=doc["region"],
        monthly_byte_quota=float(doc["monthly_byte_quota"]),
        recipient=doc["recipient"],
        sender=doc["sender"],
        audit_path=doc.get("audit_path", DEFAULT_AUDIT),
    )


def load_config(path=None) -> QuotaConfig:
    p = config_path(path)
    try:
        with open(p, encoding="utf-8") as f:
            doc = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {p}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {p}: {e}") from e
    if not isinstance(doc, dict):
        raise ConfigError(f"{p}: expected a mapping at top level")
    return from_dict(doc)
