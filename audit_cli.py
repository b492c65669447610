"""Audit a GitHub profile from the command line."""

import argparse
import json
import logging
import sys

from audit_pipeline import run_evaluation
from audit_report import format_audit_report, summarize_repositories


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grade a GitHub profile the way a technical recruiter would.")
    parser.add_argument("profile", help="GitHub username or profile URL, e.g. octocat or https://github.com/octocat")
    parser.add_argument("--json", action="store_true", help="print the raw evaluation as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if args.verbose else logging.WARNING)

    outcome = run_evaluation(args.profile)

    if args.json:
        if outcome.ok:
            payload = {
                "profile": outcome.profile.model_dump(),
                "evaluation": outcome.result.to_wire(),
                "repository_stats": summarize_repositories(outcome.repositories).to_dict(),
            }
        else:
            payload = {"error": outcome.error_kind.value, "message": outcome.message}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(format_audit_report(outcome))

    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
