"""
Tests for program card formatting.
"""

from baynav.cards import format_program_card, format_program_cards, truncate_description

from conftest import program_record


class TestTruncation:

    def test_long_description(self):
        card = format_program_card(program_record(1, description="x" * 400))
        assert card.description == "x" * 150 + "..."

    def test_exactly_150_unchanged(self):
        assert truncate_description("y" * 150) == "y" * 150

    def test_short_unchanged(self):
        assert truncate_description("Free groceries weekly.") == "Free groceries weekly."

    def test_missing_description(self):
        assert truncate_description(None) == ""


class TestCards:

    def test_at_most_five_in_order(self):
        records = [program_record(i) for i in range(10)]
        cards = format_program_cards(records)
        assert [c.id for c in cards] == ["prog-0", "prog-1", "prog-2", "prog-3", "prog-4"]

    def test_fewer_than_five(self):
        assert len(format_program_cards([program_record(0)])) == 1
        assert format_program_cards([]) == []

    def test_card_fields(self):
        record = program_record(7, phone="510-555-0100", areas=["Alameda County", "Oakland"])
        card = format_program_card(record).model_dump()
        assert card == {
            "id": "prog-7",
            "name": "Program 7",
            "category": "Food",
            "description": "Helps residents.",
            "phone": "510-555-0100",
            "website": "https://example.org/7",
            "areas": ["Alameda County", "Oakland"],
        }

    def test_missing_optional_fields(self):
        card = format_program_card({"id": "p", "name": "Bare"})
        assert card.phone is None
        assert card.website is None
        assert card.areas == []
        assert card.category is None
