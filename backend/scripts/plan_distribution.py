import argparse
import json
from pathlib import Path

from backend.app.batch_processor import BatchProcessor
from backend.app.errors import BatchValidationError
from backend.app.models import parse_process_request


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the respondent distribution plan for a request body")
    parser.add_argument("request", type=Path, help="Path to a JSON request body")
    parser.add_argument("--out", type=Path, default=None, help="Optional path to save the plan as JSON")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not args.request.exists():
        raise SystemExit(f"File not found: {args.request}")
    payload = json.loads(args.request.read_text(encoding="utf-8"))
    try:
        request = parse_process_request(payload)
    except BatchValidationError as exc:
        raise SystemExit(exc.message) from exc

    plan = BatchProcessor.plan_payload(request)
    print(f"Block size: {plan['pagesPerRespondentBlock']} pages, {plan['respondentsPerPdf']} respondents per PDF")
    for entry in plan["distribution"]:
        print(f"--- pdf {entry['pdfIndex']}: {entry['pdfUrl']} ---")
        for detail in entry["respondentDetails"]:
            print(f"{detail['code']}: {detail['annotationPages']}")
        print()
    if args.out:
        args.out.write_text(json.dumps(plan, ensure_ascii=False, indent=2), encoding="utf-8")


if __name__ == "__main__":
    main()
