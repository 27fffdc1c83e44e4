"""Sign a sample Stripe invoice event and POST it to a running relay.

Usage:
    python scripts/send_test_event.py [--url http://localhost:8080/stripe-webhook]
                                      [--type invoice.paid] [--amount 1050]

Reads STRIPE_WEBHOOK_SECRET from the environment (or .env) so the relay
accepts the signature.
"""

import argparse
import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import httpx

from stripe_relay.config import Settings
from stripe_relay.services.signature import generate_signature_header


def build_event(event_type: str, amount_due: int) -> dict:
    now = int(time.time())
    return {
        "id": f"evt_test_{now}",
        "object": "event",
        "type": event_type,
        "created": now,
        "livemode": False,
        "data": {
            "object": {
                "id": f"in_test_{now}",
                "object": "invoice",
                "status": "paid",
                "hosted_invoice_url": "https://invoice.stripe.com/i/acct_test/test",
                "amount_due": amount_due,
                "currency": "usd",
                "created": now,
                "status_transitions": {"paid_at": now},
                "customer": "cus_test",
                "number": "TEST-0001",
                "metadata": {"businessId": "biz_test", "month": time.strftime("%Y-%m")},
            }
        },
    }


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--url", default="http://localhost:8080/stripe-webhook")
    parser.add_argument("--type", default="invoice.paid", dest="event_type")
    parser.add_argument("--amount", type=int, default=1050, help="amount_due in minor units")
    args = parser.parse_args()

    secret = Settings().stripe_webhook_secret
    if not secret:
        print("STRIPE_WEBHOOK_SECRET is not set", file=sys.stderr)
        return 1

    body = json.dumps(build_event(args.event_type, args.amount)).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "Stripe-Signature": generate_signature_header(body, secret),
    }

    resp = httpx.post(args.url, content=body, headers=headers, timeout=30.0)
    print(f"{resp.status_code} {resp.text}")
    print(f"request id: {resp.headers.get('x-request-id', '-')}")
    return 0 if resp.status_code < 300 else 1


if __name__ == "__main__":
    sys.exit(main())
