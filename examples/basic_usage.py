"""
Instance Secret - Basic Usage Example

Demonstrates encrypting a value, decrypting it, and running a batch of items.
"""

import os
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from instance_secret import EncodingKind, InstanceSecret, detect_encoding


def main():
    # Normally set by the host; only defaulted here so the example runs
    os.environ.setdefault("N8N_ENCRYPTION_KEY", "my-instance-secret-change-this")
    secrets = InstanceSecret.from_env()

    # ── Example 1: One value, every format ──
    print("=" * 50)
    print("  Example 1: Tokens")
    print("=" * 50)

    for kind in EncodingKind:
        token = secrets.encrypt("hello world", kind)
        iv = token.split(".")[0]
        print(f"{kind.value:>9}: {token}")
        print(f"           detected as {detect_encoding(iv).value}, decrypts to {secrets.decrypt(token)!r}")

    # ── Example 2: A batch with one bad item ──
    print()
    print("=" * 50)
    print("  Example 2: Batch")
    print("=" * 50)

    tokens = [secrets.encrypt("alice@example.com"), "not-a-token", secrets.encrypt("bob@example.com", "base64")]
    items = [{"json": {"user": i}} for i in range(len(tokens))]

    results = secrets.execute(
        items,
        lambda i, item: {"operation": "decrypt", "inputField": tokens[i], "outputFieldName": "email"},
        continue_on_fail=True,
    )
    for out in results:
        status = "OK  " if out.ok else "FAIL"
        print(f"  [{status}] {out.to_dict()}")


if __name__ == "__main__":
    main()
