"""
Tests for grouping OCR lines into menu items.
"""
from app.services.menu_segmenter import MenuSegmenter, segment


class TestNoiseLines:

    def test_price_and_header_lines_are_noise(self):
        segmenter = MenuSegmenter()
        assert segmenter.is_noise("$18")
        assert segmenter.is_noise("18.50")
        assert segmenter.is_noise("Pizza Menu")
        assert segmenter.is_noise("OUR SPECIALS")
        assert segmenter.is_noise("Desserts")
        assert segmenter.is_noise("x")

    def test_dish_lines_are_not_noise(self):
        segmenter = MenuSegmenter()
        assert not segmenter.is_noise("MARGHERITA")
        assert not segmenter.is_noise("tomato, mozzarella, basil")
        assert not segmenter.is_noise("Pizza Bianca")


class TestHeadingDetection:

    def test_upper_case_line_is_heading(self):
        assert MenuSegmenter.is_heading("CAPRICCIOSA", None)

    def test_line_before_ingredient_list_is_heading(self):
        assert MenuSegmenter.is_heading("Garlic Prawns", "prawns, garlic oil, chili")

    def test_plain_line_is_not_heading(self):
        assert not MenuSegmenter.is_heading("slow cooked for hours", "$12")
        assert not MenuSegmenter.is_heading("slow cooked for hours", None)


class TestSegmentation:

    def test_margherita_scenario(self):
        items = segment("MARGHERITA\ntomato, mozzarella, basil\n$18")

        assert len(items) == 1
        item = items[0]
        assert item.name == "MARGHERITA"
        assert item.description == "tomato, mozzarella, basil"
        assert "$18" not in item.description
        groups = {g.category: g.items for g in item.modifiers}
        assert groups == {"Cheeses": ["mozzarella"]}

    def test_lines_before_first_heading_are_dropped(self):
        items = segment("welcome to luigi's\nbest in town\nMARGHERITA\nmozzarella")
        assert [item.name for item in items] == ["MARGHERITA"]
        assert items[0].description == "mozzarella"

    def test_trailing_item_is_emitted(self):
        items = segment("MARGHERITA\nmozzarella\nDIAVOLA\nsalami\nchili")
        assert [item.name for item in items] == ["MARGHERITA", "DIAVOLA"]
        assert items[1].description == "salami, chili"
        groups = {g.category: g.items for g in items[1].modifiers}
        assert groups == {"Meats": ["salami"], "Seasonings": ["chili"]}

    def test_mixed_case_heading_followed_by_ingredients(self):
        text = "\n".join([
            "Pizza Menu",
            "Garlic Prawns",
            "prawns, garlic oil, chili, oregano",
            "$24",
        ])
        items = segment(text)

        assert len(items) == 1
        assert items[0].name == "Garlic Prawns"
        groups = {g.category: g.items for g in items[0].modifiers}
        assert groups == {
            "Sauces": ["garlic oil"],
            "Meats": ["prawns"],
            "Seasonings": ["chili", "oregano"],
        }

    def test_heading_without_description_has_no_modifiers(self):
        items = segment("MARGHERITA\nCAPRICCIOSA\nham")
        assert items[0].name == "MARGHERITA"
        assert items[0].description == ""
        assert items[0].modifiers == []

    def test_blank_and_empty_input(self):
        assert segment("") == []
        assert segment("\n  \n") == []
