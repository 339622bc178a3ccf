#!/usr/bin/env python3
import os
import sys
import requests

URL = os.getenv("HEALTHCHECK_URL", "http://localhost:8000/health")

def main():
    try:
        resp = requests.get(URL, timeout=5)
        resp.raise_for_status()
        data = resp.json()
    except Exception as e:
        print(f"❌ Failed to fetch health: {e}")
        return 1

    print("\n📋 System Health Report")
    print("-" * 30)
    print(f"Status      : {data['status'].upper()}")
    print(f"Timestamp   : {data['timestamp']}")
    print(f"Uptime      : {data['uptime']} seconds\n")

    export = data.get("export", {})
    print("📦 Export Directory")
    print(f"   Status     : {export.get('status','unknown').upper()}")
    print(f"   Directory  : {export.get('directory','unknown')}")
    print(f"   Artifacts  : {export.get('artifacts',0)}")
    print(f"   TTL (s)    : {export.get('ttl_seconds','unknown')}")

    return 0 if data["status"] == "online" else 2

if __name__ == "__main__":
    sys.exit(main())
