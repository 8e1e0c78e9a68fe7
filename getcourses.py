#!/usr/bin/env python3
import sys
import requests
import json
from typing import Any, Dict, List, Union

from courses import Course, courses_from_response

REQUEST_TIMEOUT = 30

def fetch_courses(url: str) -> List[Course]:
    r = requests.get(url, timeout=REQUEST_TIMEOUT)
    r.raise_for_status()
    return courses_from_response(r.json())

def submit_result(url: str, payload: Union[Dict[str, Any], str]) -> str:
    """POST a plan as JSON, or the bare "no solution" text."""
    if isinstance(payload, str):
        body = payload
    else:
        body = json.dumps(payload)
    r = requests.post(
        url,
        data=body.encode("utf-8"),
        headers={"Content-Type": "application/json"},
        timeout=REQUEST_TIMEOUT,
    )
    r.raise_for_status()
    return r.text


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: getcourses.py URL", file=sys.stderr); sys.exit(2)
    try:
        fetched = fetch_courses(sys.argv[1])
    except requests.RequestException as e:
        print(f"Network error: {e}", file=sys.stderr); sys.exit(1)
    print(f"Fetched {len(fetched)} courses")
    for c in fetched:
        print(f"  {c}")
