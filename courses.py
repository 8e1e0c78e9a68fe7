from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union

# Prerequisite trees nested deeper than this are rejected rather than
# walked, so hostile input cannot blow the interpreter stack.
MAX_PREREQ_DEPTH = 256


class MalformedPrereq(ValueError):
    """A course or prerequisite node does not match a recognized shape."""


class PrereqTooDeep(MalformedPrereq):
    """A prerequisite tree nests deeper than MAX_PREREQ_DEPTH."""


class Combinator(Enum):
    ALL = "and"
    ANY = "or"


@dataclass(frozen=True)
class CourseKey:
    subject: str
    class_id: int

    def __str__(self) -> str:
        # Same identity string the endpoint's own tooling uses, e.g. "CS2500"
        return f"{self.subject}{self.class_id}"


@dataclass(frozen=True)
class Leaf:
    """Requires a single course to be satisfied."""
    key: CourseKey


@dataclass(frozen=True)
class Node:
    """Combines child expressions with ALL (and) or ANY (or)."""
    combinator: Combinator
    children: Tuple["PrereqExpr", ...] = ()


PrereqExpr = Union[Leaf, Node]


@dataclass(frozen=True)
class Course:
    subject: str
    class_id: int
    prereqs: PrereqExpr
    # The decoded JSON object, kept so a plan echoes the input shape back
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def key(self) -> CourseKey:
        return CourseKey(self.subject, self.class_id)

    def __str__(self) -> str:
        return str(self.key)


def _course_key_from_json(obj: Dict[str, Any]) -> CourseKey:
    subject = obj.get("subject")
    class_id = obj.get("classId")
    if not isinstance(subject, str):
        raise MalformedPrereq(f"subject must be a string, got {subject!r}")
    # bool is an int subclass; True is not a class id
    if isinstance(class_id, bool) or not isinstance(class_id, int):
        raise MalformedPrereq(f"classId must be an integer, got {class_id!r}")
    return CourseKey(subject, class_id)


def prereq_from_json(value: Any, depth: int = 0) -> PrereqExpr:
    """
    Decode one prerequisite value into a Leaf or a Node.

    Leaves carry exactly ``classId`` and ``subject``; internal nodes carry
    ``type`` ("and" / "or") and ``values``. An object matching neither
    shape, or both, is rejected.

    Raises:
        MalformedPrereq: the value has an unrecognized shape or combinator
        PrereqTooDeep: nesting exceeds MAX_PREREQ_DEPTH
    """
    if depth > MAX_PREREQ_DEPTH:
        raise PrereqTooDeep(f"prerequisites nest deeper than {MAX_PREREQ_DEPTH} levels")
    if not isinstance(value, dict):
        raise MalformedPrereq(f"prerequisite must be an object, got {value!r}")

    is_leaf = "classId" in value and "subject" in value
    is_node = "type" in value and "values" in value
    if is_leaf and not ("type" in value or "values" in value):
        return Leaf(_course_key_from_json(value))
    if is_node and not ("classId" in value or "subject" in value):
        try:
            combinator = Combinator(value["type"])
        except ValueError:
            raise MalformedPrereq(f"unknown prerequisite type {value['type']!r}") from None
        children = value["values"]
        if not isinstance(children, list):
            raise MalformedPrereq(f"prerequisite values must be a list, got {children!r}")
        return Node(combinator, tuple(prereq_from_json(c, depth + 1) for c in children))
    raise MalformedPrereq(f"unrecognized prerequisite shape: {sorted(value)}")


def course_from_json(obj: Any) -> Course:
    if not isinstance(obj, dict):
        raise MalformedPrereq(f"course must be an object, got {obj!r}")
    if "prereqs" not in obj:
        raise MalformedPrereq(f"course {obj.get('subject')}{obj.get('classId')} has no prereqs")
    key = _course_key_from_json(obj)
    return Course(key.subject, key.class_id, prereq_from_json(obj["prereqs"]), raw=dict(obj))


def courses_from_response(data: Any) -> List[Course]:
    """Decode a ``{"courses": [...]}`` response body, keeping input order."""
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    raw_courses = data.get("courses") or []
    if not isinstance(raw_courses, list):
        raise ValueError(f"courses must be a list, got {type(raw_courses).__name__}")
    return [course_from_json(c) for c in raw_courses]


def prereq_to_json(expr: PrereqExpr) -> Dict[str, Any]:
    if isinstance(expr, Leaf):
        return {"classId": expr.key.class_id, "subject": expr.key.subject}
    return {
        "type": expr.combinator.value,
        "values": [prereq_to_json(c) for c in expr.children],
    }


def course_to_json(course: Course) -> Dict[str, Any]:
    if course.raw:
        return dict(course.raw)
    return {
        "classId": course.class_id,
        "subject": course.subject,
        "prereqs": prereq_to_json(course.prereqs),
    }
