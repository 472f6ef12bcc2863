import unittest
from unittest import mock

from timetable_import import grammar
from timetable_import.grammar import (
    parse_session_line,
    split_cell_lines,
    take_groups,
    take_lecturer,
    take_room,
    take_subject,
)


class TestParseSessionLine(unittest.TestCase):
    def test_full_line(self):
        p = parse_session_line("Math (L): (Room3) Dr. Smith: (G1,G2)")
        self.assertIsNotNone(p)
        self.assertEqual(p.subject_name, "Math")
        self.assertEqual(p.session_type, "L")
        self.assertEqual(p.room_or_code, "Room3")
        self.assertEqual(p.lecturer, "Dr. Smith")
        self.assertEqual(list(p.groups), ["G1", "G2"])
        self.assertEqual(p.confidence, "high")

    def test_plain_text_is_subject_only(self):
        p = parse_session_line("Lunch Break")
        self.assertEqual(p.subject_name, "Lunch Break")
        self.assertEqual(p.session_type, "")
        self.assertEqual(p.room_or_code, "")
        self.assertEqual(p.lecturer, "")
        self.assertEqual(list(p.groups), [])
        self.assertEqual(p.confidence, "low")

    def test_real_world_line(self):
        p = parse_session_line(
            "Python for DataScience (P): (3102B-BL3-FF) Ms. R.Sujitha: (23CSBTB15,23CSBTB16)"
        )
        self.assertEqual(p.subject_name, "Python for DataScience")
        self.assertEqual(p.session_type, "P")
        self.assertEqual(p.room_or_code, "3102B-BL3-FF")
        self.assertEqual(p.lecturer, "Ms. R.Sujitha")
        self.assertEqual(list(p.groups), ["23CSBTB15", "23CSBTB16"])

    def test_groups_split_on_commas_and_spaces(self):
        p = parse_session_line("Networks (T): (B-12) Prof. Khan: (G1, G2 G3,,G4)")
        self.assertEqual(list(p.groups), ["G1", "G2", "G3", "G4"])

    def test_honorific_and_whitespace_normalized(self):
        p = parse_session_line("Algebra (L): (A1) dr.Smith   Jones: (G1)")
        self.assertEqual(p.lecturer, "dr. Smith Jones")

    def test_room_prefix_token_is_stripped(self):
        p = parse_session_line("Algebra (L): (Room   12) Mr. Brown: (G1)")
        self.assertEqual(p.room_or_code, "12")

    def test_lecturer_without_groups(self):
        p = parse_session_line("Math (L): (Room3) Dr. Smith")
        self.assertEqual(p.lecturer, "Dr. Smith")
        self.assertEqual(p.room_or_code, "Room3")
        self.assertEqual(p.subject_name, "Math")
        self.assertEqual(list(p.groups), [])
        self.assertEqual(p.confidence, "high")

    def test_subject_colon_lecturer(self):
        p = parse_session_line("Seminar: Dr. Who")
        self.assertEqual(p.subject_name, "Seminar")
        self.assertEqual(p.lecturer, "Dr. Who")

    def test_type_code_is_upper_cased(self):
        p = parse_session_line("Workshop (pr):")
        self.assertEqual(p.subject_name, "Workshop")
        self.assertEqual(p.session_type, "PR")
        self.assertEqual(list(p.groups), [])

    def test_type_code_after_groups_removed(self):
        p = parse_session_line("Workshop (lt): (R1) Mr. Kay: (G9)")
        self.assertEqual(p.session_type, "LT")
        self.assertEqual(p.subject_name, "Workshop")

    def test_trailing_parenthesis_is_read_as_groups(self):
        # groups are peeled first, so a lone "(L)" at the end is a group list
        p = parse_session_line("Math (L)")
        self.assertEqual(p.subject_name, "Math")
        self.assertEqual(p.session_type, "")
        self.assertEqual(list(p.groups), ["L"])

    def test_unknown_code_stays_in_subject(self):
        subject, session_type = take_subject("Data (Lab):")
        self.assertEqual(subject, "Data (Lab)")
        self.assertEqual(session_type, "")

    def test_text_after_type_code_without_colon_stays_in_subject(self):
        p = parse_session_line("Python (P) Batch A")
        self.assertEqual(p.subject_name, "Python (P) Batch A")
        self.assertEqual(p.session_type, "")
        self.assertEqual(p.lecturer, "")
        self.assertEqual(p.confidence, "low")

    def test_failing_step_drops_only_the_line(self):
        real_take_room = grammar.take_room

        def take_room(rest):
            if rest.startswith("Broken"):
                raise RuntimeError("step failure")
            return real_take_room(rest)

        with mock.patch.object(grammar, "take_room", side_effect=take_room):
            self.assertIsNone(parse_session_line("Broken (L): (R1) Mr. X: (G1)"))
            p = parse_session_line("Math (L): (R1) Mr. X: (G1)")
        self.assertEqual(p.room_or_code, "R1")

    def test_empty_subject_returns_none(self):
        self.assertIsNone(parse_session_line("(G1,G2)"))
        self.assertIsNone(parse_session_line(""))


class TestGrammarSteps(unittest.TestCase):
    def test_take_groups(self):
        groups, rest = take_groups("Math (L): (R3) Dr. X: (G1,G2)  ")
        self.assertEqual(groups, ["G1", "G2"])
        self.assertEqual(rest, "Math (L): (R3) Dr. X:")

    def test_take_lecturer_keeps_room(self):
        lecturer, rest = take_lecturer("Math (L): (R3) Dr. X:")
        self.assertEqual(lecturer, "Dr. X")
        self.assertEqual(rest, "Math (L): (R3)")

    def test_take_lecturer_needs_colon(self):
        lecturer, rest = take_lecturer("Lunch Break")
        self.assertEqual(lecturer, "")
        self.assertEqual(rest, "Lunch Break")

    def test_take_lecturer_ignores_text_after_bare_parenthesis(self):
        lecturer, rest = take_lecturer("Python (P) Batch A")
        self.assertEqual(lecturer, "")
        self.assertEqual(rest, "Python (P) Batch A")

    def test_take_room_anywhere(self):
        room, rest = take_room("Math: (R3) extra")
        self.assertEqual(room, "R3")
        self.assertEqual(rest, "Math extra")

    def test_split_cell_lines(self):
        self.assertEqual(split_cell_lines("A\n\n  B  \r\nC"), ["A", "B", "C"])
        self.assertEqual(split_cell_lines(""), [])


if __name__ == "__main__":
    unittest.main()
