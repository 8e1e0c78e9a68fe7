import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union

import requests

from courses import (
    MAX_PREREQ_DEPTH,
    Combinator,
    Course,
    CourseKey,
    Leaf,
    MalformedPrereq,
    Node,
    PrereqExpr,
    PrereqTooDeep,
    course_to_json,
)
from getcourses import fetch_courses, submit_result

COURSES_URL = "https://challenge.sandboxneu.com/s/PMRGIYLUMERDU6ZCMVWWC2LMEI5CEZDFNZXGS43LMF2HGNBTIBTW2YLJNQXGG33NEIWCEZDVMURDUMJWGA3TQMZVGU4TSLBCON2GCZ3FEI5CEURRJBQXEZBCPUWCE2DBONUCEORCIJXXEV2DKBBUSRKVGVYDOTLEGNYU6OB5EJ6Q===="

NO_SOLUTION_PAYLOAD = "no solution"


@dataclass(frozen=True)
class NoSolution:
    """
    No ordering exists for the given courses.

    The residual courses either form a cycle or reference a course that is
    not in the input; the two cases are not told apart.
    """
    residual: List[Course]
    rounds: int

    def __bool__(self) -> bool:
        return False


def is_satisfied(expr: PrereqExpr, satisfied: Mapping[CourseKey, Course], depth: int = 0) -> bool:
    """
    Check a prerequisite expression against the courses satisfied so far.

    An empty ALL is satisfied and an empty ANY is not. ``satisfied`` is
    only read, never modified.

    Raises:
        MalformedPrereq: a node is neither a Leaf nor an ALL/ANY Node
        PrereqTooDeep: nesting exceeds MAX_PREREQ_DEPTH
    """
    if depth > MAX_PREREQ_DEPTH:
        raise PrereqTooDeep(f"prerequisites nest deeper than {MAX_PREREQ_DEPTH} levels")
    if isinstance(expr, Leaf):
        return expr.key in satisfied
    if not isinstance(expr, Node):
        raise MalformedPrereq(f"unexpected prerequisite node {expr!r}")

    if expr.combinator is Combinator.ALL:
        return all(is_satisfied(c, satisfied, depth + 1) for c in expr.children)
    if expr.combinator is Combinator.ANY:
        return any(is_satisfied(c, satisfied, depth + 1) for c in expr.children)
    raise MalformedPrereq(f"unknown combinator {expr.combinator!r}")


class PlanResolver:
    def __init__(self):
        # insertion-ordered, so its values are the plan
        self.satisfied: Dict[CourseKey, Course] = {}
        self.layers: List[List[Course]] = []
        self.rounds = 0

    def run_round(self, remaining: List[Course]) -> List[Course]:
        """
        Promote every course in ``remaining`` whose prerequisites are met,
        scanning in order. A course promoted earlier in the round counts
        for the ones after it. Returns the courses still unresolved.
        """
        still_remaining = []
        promoted = []
        for course in remaining:
            if is_satisfied(course.prereqs, self.satisfied):
                # first copy of a duplicated course wins
                if course.key not in self.satisfied:
                    self.satisfied[course.key] = course
                    promoted.append(course)
            else:
                still_remaining.append(course)
        self.rounds += 1
        self.layers.append(promoted)
        return still_remaining

    def resolve(self, courses: Sequence[Course]) -> Union[List[Course], NoSolution]:
        """
        Order ``courses`` so every course follows the courses it needs.

        Runs rounds until every course is satisfied or a round promotes
        nothing. Returns the plan as a list, or NoSolution.
        """
        self.satisfied = {}
        self.layers = []
        self.rounds = 0

        remaining = list(courses)
        while remaining:
            still_remaining = self.run_round(remaining)
            if len(still_remaining) == len(remaining):
                return NoSolution(residual=still_remaining, rounds=self.rounds)
            remaining = still_remaining
        return list(self.satisfied.values())


def resolve(courses: Sequence[Course]) -> Union[List[Course], NoSolution]:
    return PlanResolver().resolve(courses)


def result_payload(result: Union[List[Course], NoSolution]) -> Union[Dict[str, Any], str]:
    """Wire body for a result: ``{"plan": [...]}`` or the bare "no solution"."""
    if isinstance(result, NoSolution):
        return NO_SOLUTION_PAYLOAD
    return {"plan": [course_to_json(c) for c in result]}


def main(url: str = COURSES_URL) -> int:
    try:
        courses = fetch_courses(url)
    except requests.HTTPError as e:
        print(f"HTTP error: {e}", file=sys.stderr); return 1
    except requests.RequestException as e:
        print(f"Network error: {e}", file=sys.stderr); return 1
    except ValueError as e:
        print(f"Malformed course data: {e}", file=sys.stderr); return 1
    print(f"Fetched {len(courses)} courses")

    resolver = PlanResolver()
    try:
        result = resolver.resolve(courses)
    except MalformedPrereq as e:
        print(f"Malformed prerequisites: {e}", file=sys.stderr); return 1

    for i, layer in enumerate(resolver.layers, start=1):
        names = ", ".join(str(c) for c in layer) or "(none)"
        print(f"Round {i}: promoted {names}")
    if isinstance(result, NoSolution):
        print(f"No solution: {len(result.residual)} courses unresolved")
    else:
        print(f"Plan of {len(result)} courses")

    try:
        response = submit_result(url, result_payload(result))
    except requests.HTTPError as e:
        print(f"HTTP error: {e}", file=sys.stderr); return 1
    except requests.RequestException as e:
        print(f"Network error: {e}", file=sys.stderr); return 1
    print(response)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
