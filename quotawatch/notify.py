import math

from botocore.exceptions import BotoCoreError, ClientError

from quotawatch.errors import NotificationFailed
from quotawatch.models import NotificationEvent, utcnow

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def rfc822z(t) -> str:
    """02 Jan 06 15:04 -0700, English month names whatever the locale."""
    return f"{t.day:02d} {MONTHS[t.month - 1]} {t.strftime('%y %H:%M %z')}"


def eng(x: float) -> str:
    """3 decimals, exponent a multiple of 3: 1.2e11 -> '120.000e+09'."""
    if x == 0:
        return "0.000e+00"
    exp = int(math.floor(math.log10(abs(x)) / 3)) * 3
    m = x / 10 ** exp
    if round(abs(m), 3) >= 1000:
        m, exp = m / 1000, exp + 3
    return f"{m:.3f}e{exp:+03d}"


def compose(bucket_name, quota, event: NotificationEvent):
    subject = "Website http://" + bucket_name
    body = subject
    ts = rfc822z(event.timestamp)
    if event.became_online:
        subject += " is online"
        body += " was put back on line as of \n\n   " + ts
        body += "\n\nbecause its quota of\n\n   " + eng(quota)
        body += " bytes per month\n\nexceeds the current count of\n\n   " + eng(event.bytes_transferred)
        body += " bytes\n\nserved this month.\n"
    else:
        subject += " is offline"
        body += " was taken off line as of \n\n   " + ts
        body += "\n\nhaving exceeded its quota of\n\n   " + eng(quota)
        body += " bytes per month\n\nby serving a total of\n\n   " + eng(event.bytes_transferred)
        body += " bytes\n\nthis month.\n"
    return subject, body


class MailNotifier:
    def __init__(self, ses, sender, recipient, quota, clock=utcnow):
        self.ses = ses
        self.sender = sender
        self.recipient = recipient
        self.quota = quota
        self.clock = clock

    def send(self, bucket_name, bytes_transferred, online) -> NotificationEvent:
        """Mail a status change of bucket_name; online=True means it was off line until now."""
        # 时间戳取发送时刻，而非决策时刻
        event = NotificationEvent(became_online=bool(online),
                                  bytes_transferred=float(bytes_transferred),
                                  timestamp=self.clock())
        subject, body = compose(bucket_name, self.quota, event)
        try:
            self.ses.send_email(
                Source=self.sender,
                Destination={"ToAddresses": [self.recipient]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": subject},
                    "Body": {"Text": {"Data": body}},
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise NotificationFailed(f"SendEmail to {self.recipient} failed: {e}") from e
        return event
