"""Lambda entry point: quotawatch.handler.lambda_handler"""
from quotawatch.config import load_config
from quotawatch.controller import build_controller
from quotawatch.models import RunOutcome

_CFG = None


def config():
    global _CFG
    if _CFG is None:
        _CFG = load_config()
    return _CFG


def confirmation(out: RunOutcome):
    """Minimally informative status for the log, plus the run's error if any."""
    return out.response(), out.error


def lambda_handler(event, context):
    res, err = confirmation(build_controller(config()).run())
    if err is not None:
        # the outcome is already in the audit log; let the runtime report the error
        raise err
    return res
