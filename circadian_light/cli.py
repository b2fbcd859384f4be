"""
Run one light-analysis tool from a JSON request file.

Usage: circadian-light-analyze <request_file.json>

The request file names a tool and its arguments:

    {"tool": "analyze_sample",
     "arguments": {"sample": {"r": 200, "g": 180, "b": 160, "lux": 500}, "time_of_day": 8}}

The result is written to stdout as JSON. Failures print {"error": ...} and
exit with status 1.
"""

import json
import sys

from .config import settings
from .logging_setup import configure_logging
from .tools import invoke_tool


def main() -> None:
    configure_logging(settings.log_level, settings.log_json)

    if len(sys.argv) != 2:
        print(json.dumps({"error": "Usage: circadian-light-analyze <request_file.json>"}))
        sys.exit(1)

    request_file = sys.argv[1]

    try:
        with open(request_file) as f:
            data = json.load(f)

        result = invoke_tool(data["tool"], data.get("arguments", {}))

        print(json.dumps(result))

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except KeyError as e:
        print(json.dumps({"error": f"Missing required field: {e}"}))
        sys.exit(1)
    except (TypeError, ValueError) as e:
        print(json.dumps({"error": f"Invalid request: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
