import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.backend.process import is_accepted_file, process_files, write_json_output
from core.config import get_settings
from core.logger import set_level


def collect_source_paths(inputs: List[str]) -> List[str]:
    collected: List[str] = []
    for raw in inputs:
        path = Path(raw).expanduser()
        if path.is_dir():
            for child in sorted(path.rglob("*.xlsx")):
                # skip Excel lock files
                if child.is_file() and not child.name.startswith("~$"):
                    collected.append(str(child))
        elif path.is_file():
            if is_accepted_file(path.name):
                collected.append(str(path))
            else:
                print(f"[warn] not an .xlsx file, skipped: {raw}")
        else:
            print(f"[warn] input not found: {raw}")
    return collected


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Merge cohort workbooks into one formatted student/counsellor roster."
    )
    parser.add_argument(
        "--inputs",
        nargs="+",
        required=True,
        help="Input .xlsx paths or directories (any order).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write the export and JSON (default: OUTPUT_DIR setting).",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Also publish a viewable copy to PREVIEW_ENDPOINT_URL.",
    )
    parser.add_argument(
        "--output-json-name",
        default=None,
        help="Output JSON filename (default: result.json, or env OUTPUT_JSON_NAME).",
    )
    parser.add_argument(
        "--output-json-timestamp",
        action="store_true",
        help="Append timestamp to JSON output filename (overrides default name).",
    )
    return parser.parse_args(argv)


def main(argv: List[str] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    set_level(settings.LOG_LEVEL)

    file_paths = collect_source_paths(args.inputs)
    if not file_paths:
        print("[error] no valid input files found.")
        return 1

    output_dir = args.output_dir or settings.OUTPUT_DIR
    result = process_files(
        file_paths=file_paths,
        output_dir=output_dir,
        with_preview=args.preview,
    )
    output_json_name = args.output_json_name
    if args.output_json_timestamp and not output_json_name:
        output_json_name = f"result_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

    json_path = write_json_output(result, output_dir, output_filename=output_json_name)

    stats = result.get("statistics", {})
    outputs = result.get("outputs", {})
    print("JSON:", json_path)
    print("Export:", outputs.get("export_path"))
    print(
        f"Files: {stats.get('total_files')}  Sheets: {stats.get('total_sheets')}  "
        f"Records: {stats.get('total_records')}"
    )
    preview = outputs.get("preview")
    if preview:
        print("Preview:", preview.get("url") or f"failed ({preview.get('error')})")
    for diag in result.get("diagnostics", []):
        print(f"[{diag.get('code')}] {diag.get('message')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
