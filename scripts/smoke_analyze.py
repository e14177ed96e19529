#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path

import httpx


SAMPLE_ANSWERS = {
    "a1": "Every small business has access to enterprise-grade financial tools.",
    "a2": "Open banking APIs make real-time ledger access possible for the first time.",
    "b1": "One-click invoice reconciliation for Shopify merchants.",
    "d1": "MRR",
    "d1_value": "$15,000",
    "d2": "20",
    "d5": "$30K/month burn, 12 months runway",
    "e1": [{"name": "Ada", "role": "CEO", "background": "Led finance ops at a payments company"}],
    "e2": "Raising $2M for engineering and first sales hire.",
}


def main() -> None:
    parser = argparse.ArgumentParser(description="End-to-end smoke check against a running analyzer backend.")
    parser.add_argument("--api-base", default="http://127.0.0.1:8000", help="Backend base URL.")
    parser.add_argument("--answers", help="Path to a JSON file with questionnaire answers.")
    parser.add_argument("--deck", help="Optional .pdf or .pptx deck to parse first.")
    parser.add_argument("--timeout-seconds", type=float, default=180.0, help="Request timeout.")
    args = parser.parse_args()

    answers = SAMPLE_ANSWERS
    if args.answers:
        answers = json.loads(Path(args.answers).expanduser().read_text(encoding="utf-8"))

    with httpx.Client(timeout=args.timeout_seconds, trust_env=False) as client:
        health = client.get(f"{args.api_base}/health")
        health.raise_for_status()
        print(f"backend mode: {health.json()['mode']}")

        deck_text = None
        if args.deck:
            deck_path = Path(args.deck).expanduser().resolve()
            if not deck_path.exists():
                raise FileNotFoundError(f"Deck file not found: {deck_path}")
            with deck_path.open("rb") as deck_file:
                files = {"file": (deck_path.name, deck_file, "application/octet-stream")}
                deck_resp = client.post(f"{args.api_base}/api/parse-deck", files=files)
            if deck_resp.status_code >= 400:
                print(f"deck rejected ({deck_resp.status_code}): {deck_resp.json().get('detail')}")
                sys.exit(1)
            deck = deck_resp.json()
            deck_text = deck["rawText"]
            print(f"parsed deck: {deck['fileName']} slides={deck['slideCount']}")

        analyze_resp = client.post(
            f"{args.api_base}/api/analyze",
            json={"questionnaire": answers, "deckContent": deck_text},
        )
        if analyze_resp.status_code >= 400:
            print(f"analysis failed ({analyze_resp.status_code}): {analyze_resp.json().get('detail')}")
            sys.exit(1)

    result = analyze_resp.json()
    print(f"{result['overallScore']}/100 {result['label']} (mode={result['mode']})")
    for dimension in result["dimensions"]:
        print(f"  {dimension['name']}: {dimension['score']}/{dimension['maxScore']}")
    for index, recommendation in enumerate(result["topRecommendations"], start=1):
        print(f"  {index}. {recommendation}")


if __name__ == "__main__":
    main()
