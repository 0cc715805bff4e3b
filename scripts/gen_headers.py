"""
Write a headers.json carrying a fresh HS256 JWT for the sample target's /api routes.
Usage:
  export JWT_SECRET=super-secret
  python scripts/gen_headers.py --sub loadgen --mins 120 --out headers.json
"""
import os, json, argparse

from stress.auth import issue_token

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--sub", default="loadgen")
    ap.add_argument("--mins", type=int, default=120)
    ap.add_argument("--out", default="headers.json")
    args = ap.parse_args()

    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise SystemExit("Set JWT_SECRET in env")
    token = issue_token(args.sub, mins=args.mins, secret=secret)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump({"Authorization": f"Bearer {token}"}, f, indent=2)
    print(f"Wrote {args.out}")

if __name__ == "__main__":
    main()
