import re

from docdrop.identity import KeyGenerator, is_valid_key, original_name_from_key, safe_name
from tests.conftest import FixedClock


class TestSafeName:
    def test_plain_name_unchanged(self):
        assert safe_name("a.pdf") == "a.pdf"

    def test_strips_directories(self):
        assert safe_name("../../etc/passwd") == "passwd"
        assert safe_name("C:\\Users\\me\\report.pdf") == "report.pdf"

    def test_keeps_spaces_punctuation_and_accents(self):
        assert safe_name("my report (v2) résumé.pdf") == "my report (v2) résumé.pdf"

    def test_strips_control_characters(self):
        assert safe_name("a\x00b\r\nc.pdf") == "abc.pdf"
        assert safe_name("a\x7f.pdf") == "a.pdf"

    def test_strips_leading_dots(self):
        assert safe_name(".env") == "env"

    def test_empty_becomes_default(self):
        assert safe_name("") == "file"
        assert safe_name("...") == "file"


class TestKeyGenerator:
    def test_key_format(self):
        gen = KeyGenerator(clock=FixedClock(1234))
        assert gen.generate("a.pdf") == "1234-a.pdf"

    def test_uses_real_clock_by_default(self):
        key = KeyGenerator().generate("a.pdf")
        assert re.match(r"^\d{13,}-a\.pdf$", key)

    def test_same_millisecond_same_name_distinct(self):
        gen = KeyGenerator(clock=FixedClock(1000))
        keys = {gen.generate("a.pdf") for _ in range(100)}
        assert len(keys) == 100

    def test_same_millisecond_distinct_names_distinct(self):
        gen = KeyGenerator(clock=FixedClock(1000))
        assert gen.generate("a.pdf") != gen.generate("b.pdf")

    def test_clock_going_backwards_stays_monotonic(self):
        clock = FixedClock(5000)
        gen = KeyGenerator(clock=clock)
        first = gen.generate("a.pdf")
        clock.now = 4000
        second = gen.generate("a.pdf")
        assert first == "5000-a.pdf"
        assert second == "5001-a.pdf"

    def test_clock_advancing_is_used(self):
        clock = FixedClock(5000)
        gen = KeyGenerator(clock=clock)
        gen.generate("a.pdf")
        clock.now = 9000
        assert gen.generate("a.pdf") == "9000-a.pdf"

    def test_generated_keys_are_valid(self):
        gen = KeyGenerator()
        assert is_valid_key(gen.generate("../../x.pdf"))


class TestKeyHelpers:
    def test_original_name_from_key(self):
        assert original_name_from_key("1700000000000-a.pdf") == "a.pdf"

    def test_original_name_from_foreign_key(self):
        assert original_name_from_key("unknown-key") == "unknown-key"

    def test_invalid_keys(self):
        for key in ("", ".hidden", "a/b", "a\\b", "..", "a\x00b", "a\nb"):
            assert not is_valid_key(key), key

    def test_valid_key(self):
        assert is_valid_key("1700000000000-a.pdf")
        assert is_valid_key("1700000000000-my report (v2) résumé.pdf")

    def test_original_name_round_trip(self):
        key = KeyGenerator(clock=FixedClock(7)).generate("my report (v2) résumé.pdf")
        assert key == "7-my report (v2) résumé.pdf"
        assert original_name_from_key(key) == "my report (v2) résumé.pdf"
