"""
Script Segmenter Unit Tests
"""
from podcast_generator.core.segmenter import ScriptTurn, parse_script_segments


NAMES = ("Maya", "Jordan")


class TestParseScriptSegments:
    """Test turning script text into speaker turns"""

    def test_well_formed_script_keeps_order(self):
        """
        Given: A script whose every line is "<Persona>: <text>"
        When: Parsing it
        Then: One turn per line, in script order
        """
        script = "Maya: Hello there.\nJordan: Hi Maya.\nMaya: Let's begin."

        turns = parse_script_segments(script, NAMES)

        assert turns == [
            ScriptTurn("Maya", "Hello there."),
            ScriptTurn("Jordan", "Hi Maya."),
            ScriptTurn("Maya", "Let's begin."),
        ]

    def test_narration_and_malformed_lines_are_dropped(self):
        """
        Given: A script mixing dialogue, narration and unknown speakers
        When: Parsing it
        Then: Only persona lines survive
        """
        script = "\n".join([
            "(intro music)",
            "Maya: First point.",
            "Narrator: This should go.",
            "maya: lower case name is not a persona",
            "",
            "   ",
            "Jordan: Second point.",
            "---",
        ])

        turns = parse_script_segments(script, NAMES)

        assert [t.speaker for t in turns] == ["Maya", "Jordan"]
        assert [t.text for t in turns] == ["First point.", "Second point."]

    def test_empty_utterances_are_dropped(self):
        """
        Given: Persona lines with nothing after the colon
        When: Parsing the script
        Then: They produce no turn
        """
        turns = parse_script_segments("Maya:\nJordan:    \nMaya: Real line.", NAMES)

        assert turns == [ScriptTurn("Maya", "Real line.")]

    def test_text_is_trimmed_and_crlf_tolerated(self):
        """
        Given: A script with Windows line endings and padded text
        When: Parsing it
        Then: Turn text carries no surrounding whitespace
        """
        turns = parse_script_segments("Maya:   padded text   \r\nJordan: next\r\n", NAMES)

        assert turns == [ScriptTurn("Maya", "padded text"), ScriptTurn("Jordan", "next")]

    def test_leading_whitespace_disqualifies_a_line(self):
        """
        Given: A persona line indented with spaces
        When: Parsing it
        Then: The line is not recognized
        """
        assert parse_script_segments("  Maya: indented", NAMES) == []

    def test_empty_script_yields_no_turns(self):
        """
        Given: An empty or narration-only script
        When: Parsing it
        Then: The result is an empty list, not an error
        """
        assert parse_script_segments("", NAMES) == []
        assert parse_script_segments("Just some narration.\nMore narration.", NAMES) == []

    def test_persona_names_with_regex_characters(self):
        """
        Given: Persona names containing regex metacharacters
        When: Parsing a script
        Then: Names are matched literally
        """
        turns = parse_script_segments("Dr. K: hi\nDrXK: no\nA+B: yo", ("Dr. K", "A+B"))

        assert turns == [ScriptTurn("Dr. K", "hi"), ScriptTurn("A+B", "yo")]

    def test_reformatting_turns_round_trips(self):
        """
        Given: A list of turns
        When: Formatting them back to script lines and re-parsing
        Then: The same turns come back
        """
        turns = [ScriptTurn("Maya", "One: with a colon."), ScriptTurn("Jordan", "Two.")]
        script = "\n".join(f"{t.speaker}: {t.text}" for t in turns)

        assert parse_script_segments(script, NAMES) == turns
