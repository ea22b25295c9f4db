"""
Quota controller: one pass per trigger.

  online?  --no, not the 1st-->  exit (save the CloudWatch read)
     |
  bytes this month
     |
  over quota & online   -> take offline -> mail "offline"
  under quota & offline -> put online   -> mail "online"
  otherwise             -> noop

Nothing is cached between passes; state lives in S3 and CloudWatch only.
"""
import sys, json
import datetime as dt

from quotawatch.access import AccessSwitch
from quotawatch.audit import write_audit
from quotawatch.config import QuotaConfig
from quotawatch.errors import QuotaWatchError
from quotawatch.models import RunOutcome, TransitionDecision, utcnow
from quotawatch.notify import MailNotifier
from quotawatch.session import AwsSession
from quotawatch.usage_probe import UsageProbe


def decide(online: bool, bytes_transferred: float, quota: float) -> TransitionDecision:
    # equal to the quota counts as over
    if bytes_transferred >= quota and online:
        return TransitionDecision.TAKE_OFFLINE
    if bytes_transferred < quota and not online:
        return TransitionDecision.BRING_ONLINE
    return TransitionDecision.NO_CHANGE


def first_of_month(now: dt.datetime) -> bool:
    return now.astimezone(dt.timezone.utc).day == 1


class QuotaController:
    def __init__(self, cfg: QuotaConfig, access, usage, notifier, clock=utcnow):
        self.cfg = cfg
        self.access = access
        self.usage = usage
        self.notifier = notifier
        self.clock = clock

    def run(self) -> RunOutcome:
        out = RunOutcome()
        try:
            self._run(out)
        except QuotaWatchError as e:
            out.error = e
        self._audit("quota_watch", out)
        return out

    def _run(self, out: RunOutcome):
        bucket = self.cfg.bucket_name
        now = self.clock()
        out.online = self.access.site_is_online(bucket)
        if not out.online and not first_of_month(now):
            # 离线且未到月初：不查 CloudWatch，省钱
            out.short_circuit = True
            return
        out.usage = self.usage.read(bucket, now)
        out.decision = decide(out.online, out.usage.bytes_transferred, self.cfg.monthly_byte_quota)
        if out.decision is TransitionDecision.TAKE_OFFLINE:
            self.access.take_offline(bucket)
            out.notification = self.notifier.send(bucket, out.usage.bytes_transferred, False)
        elif out.decision is TransitionDecision.BRING_ONLINE:
            self.access.bring_online(bucket)
            out.notification = self.notifier.send(bucket, out.usage.bytes_transferred, True)

    def probe(self) -> RunOutcome:
        """Report state and usage without changing anything. Always reads usage."""
        out = RunOutcome()
        try:
            bucket = self.cfg.bucket_name
            out.online = self.access.site_is_online(bucket)
            out.usage = self.usage.read(bucket, self.clock())
            out.decision = decide(out.online, out.usage.bytes_transferred, self.cfg.monthly_byte_quota)
        except QuotaWatchError as e:
            out.error = e
        self._audit("quota_probe", out)
        return out

    def _audit(self, event, out: RunOutcome):
        if not self.cfg.audit_path:
            return
        reasons = []
        if out.short_circuit:
            reasons.append("offline_not_first_of_month")
        if out.usage is not None and out.usage.no_datapoints:
            reasons.append("no_datapoints")
        if out.error is not None:
            reasons.append(type(out.error).__name__)
        meta = dict(out.summary(), bucket=self.cfg.bucket_name, quota=self.cfg.monthly_byte_quota)
        try:
            write_audit(self.cfg.audit_path, event, meta, decision=out.decision.value, reasons=reasons)
        except OSError as e:
            # 审计写失败不能盖掉本次结果
            print(f"[ERROR] audit write failed: {self.cfg.audit_path}: {e} "
                  f"{event} {json.dumps(meta, default=str)}", file=sys.stderr)


def build_controller(cfg: QuotaConfig, session=None, clock=utcnow) -> QuotaController:
    session = session or AwsSession(cfg.region)
    return QuotaController(
        cfg,
        access=AccessSwitch(session.lazy("s3")),
        usage=UsageProbe(session.lazy("cloudwatch")),
        notifier=MailNotifier(session.lazy("ses"), cfg.sender, cfg.recipient,
                              cfg.monthly_byte_quota, clock=clock),
        clock=clock,
    )
