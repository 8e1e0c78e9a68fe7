import pytest
from courses import (
    MAX_PREREQ_DEPTH,
    Combinator,
    Course,
    CourseKey,
    Leaf,
    MalformedPrereq,
    Node,
    PrereqTooDeep,
    course_from_json,
    course_to_json,
    courses_from_response,
    prereq_from_json,
    prereq_to_json,
)


class TestCourseKey:
    def test_str_joins_subject_and_class_id(self):
        assert str(CourseKey("CS", 2500)) == "CS2500"

    def test_same_pair_is_same_key(self):
        assert CourseKey("CS", 2500) == CourseKey("CS", 2500)
        assert len({CourseKey("CS", 2500), CourseKey("CS", 2500)}) == 1

    def test_different_subject_is_different_key(self):
        assert CourseKey("CS", 2500) != CourseKey("DS", 2500)

    def test_course_key_ignores_prereqs(self):
        a = Course("CS", 1, Node(Combinator.ALL))
        b = Course("CS", 1, Node(Combinator.ANY))
        assert a.key == b.key


class TestPrereqFromJson:
    def test_leaf(self):
        assert prereq_from_json({"classId": 2500, "subject": "CS"}) == Leaf(CourseKey("CS", 2500))

    def test_empty_and(self):
        assert prereq_from_json({"type": "and", "values": []}) == Node(Combinator.ALL, ())

    def test_or_node(self):
        expr = prereq_from_json({
            "type": "or",
            "values": [{"classId": 1, "subject": "CS"}, {"classId": 2, "subject": "CS"}],
        })
        assert expr.combinator is Combinator.ANY
        assert expr.children == (Leaf(CourseKey("CS", 1)), Leaf(CourseKey("CS", 2)))

    def test_nested(self):
        expr = prereq_from_json({
            "type": "and",
            "values": [
                {"classId": 1, "subject": "CS"},
                {"type": "or", "values": [{"classId": 2, "subject": "MATH"}]},
            ],
        })
        assert isinstance(expr.children[1], Node)
        assert expr.children[1].children[0].key == CourseKey("MATH", 2)

    def test_unknown_type_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"type": "xor", "values": []})

    def test_upper_case_type_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"type": "AND", "values": []})

    def test_mixed_shape_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"type": "and", "values": [], "classId": 1, "subject": "CS"})

    def test_partial_leaf_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"classId": 1})

    def test_values_must_be_list(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"type": "and", "values": {"classId": 1, "subject": "CS"}})

    def test_non_object_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json("CS 2500")

    def test_bool_class_id_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"classId": True, "subject": "CS"})

    def test_string_class_id_rejected(self):
        with pytest.raises(MalformedPrereq):
            prereq_from_json({"classId": "2500", "subject": "CS"})

    def test_too_deep_rejected(self):
        value = {"classId": 1, "subject": "CS"}
        for _ in range(MAX_PREREQ_DEPTH + 1):
            value = {"type": "and", "values": [value]}
        with pytest.raises(PrereqTooDeep):
            prereq_from_json(value)

    def test_too_deep_is_malformed(self):
        assert issubclass(PrereqTooDeep, MalformedPrereq)


class TestCourseJson:
    def test_course_from_json(self):
        course = course_from_json({"classId": 2500, "subject": "CS", "prereqs": {"type": "and", "values": []}})
        assert course.key == CourseKey("CS", 2500)
        assert course.prereqs == Node(Combinator.ALL, ())

    def test_missing_prereqs_rejected(self):
        with pytest.raises(MalformedPrereq):
            course_from_json({"classId": 2500, "subject": "CS"})

    def test_round_trip_keeps_extra_fields(self):
        raw = {"classId": 2500, "subject": "CS", "prereqs": {"type": "and", "values": []}, "name": "Fundies"}
        assert course_to_json(course_from_json(raw)) == raw

    def test_to_json_without_raw(self):
        course = Course("CS", 2, Node(Combinator.ANY, (Leaf(CourseKey("CS", 1)),)))
        assert course_to_json(course) == {
            "classId": 2,
            "subject": "CS",
            "prereqs": {"type": "or", "values": [{"classId": 1, "subject": "CS"}]},
        }

    def test_prereq_to_json_leaf(self):
        assert prereq_to_json(Leaf(CourseKey("CS", 1))) == {"classId": 1, "subject": "CS"}

    def test_response_keeps_order(self):
        data = {"courses": [
            {"classId": 2, "subject": "CS", "prereqs": {"type": "and", "values": []}},
            {"classId": 1, "subject": "CS", "prereqs": {"type": "and", "values": []}},
        ]}
        assert [str(c) for c in courses_from_response(data)] == ["CS2", "CS1"]

    def test_response_without_courses_is_empty(self):
        assert courses_from_response({}) == []
        assert courses_from_response({"courses": None}) == []

    def test_response_courses_must_be_list(self):
        with pytest.raises(ValueError):
            courses_from_response({"courses": "CS2500"})

    def test_response_must_be_object(self):
        with pytest.raises(ValueError):
            courses_from_response([])
