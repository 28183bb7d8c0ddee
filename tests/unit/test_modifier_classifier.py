"""
Tests for keyword classification of dish descriptions.
"""
from app.models import CategoryKeywords, ModifierCategory
from app.services.modifier_classifier import ModifierClassifier, classify


class TestFragmentSplitting:
    """Descriptions are split on commas, 'and', 'with' and '+'."""

    def test_split_on_all_separators(self):
        classifier = ModifierClassifier()
        fragments = classifier.split_fragments("Ham, mushrooms and olives with basil + chili")
        assert fragments == ["Ham", "mushrooms", "olives", "basil", "chili"]

    def test_filler_fragments_are_dropped(self):
        classifier = ModifierClassifier()
        assert classifier.split_fragments("The, bacon, Fresh, , house") == ["bacon"]

    def test_and_inside_word_is_not_a_separator(self):
        classifier = ModifierClassifier()
        assert classifier.split_fragments("candied onion") == ["candied onion"]


class TestClassification:

    def test_first_matching_category_wins(self):
        # "cheese sauce" contains both keywords; Sauces is checked first
        assert classify("cheese sauce") == {"Sauces": ["cheese sauce"]}

    def test_unmatched_fragments_are_ignored(self):
        assert classify("basil, rocket, lemon") == {}

    def test_categories_follow_table_order(self):
        result = classify("oregano, olives, ham, ricotta, tomato sauce")
        assert list(result.keys()) == ["Sauces", "Cheeses", "Meats", "Vegetables", "Seasonings"]

    def test_duplicates_keep_longest_original(self):
        result = classify("Bacon, bacon (optional), bacon.")
        assert result == {"Meats": ["bacon (optional)"]}

    def test_duplicates_tie_keeps_first_seen(self):
        result = classify("Ham, HAM")
        assert result == {"Meats": ["Ham"]}

    def test_no_two_phrases_share_a_canonical_form(self):
        from app.services.text_normalizer import normalize

        result = classify("Olive, olive., olives, Spinach, spinach (optional), onion")
        for phrases in result.values():
            keys = [normalize(p) for p in phrases]
            assert len(keys) == len(set(keys))

    def test_build_modifier_groups_omits_empty_categories(self):
        classifier = ModifierClassifier()
        groups = classifier.build_modifier_groups("tomato sauce, mozzarella, basil")
        assert [(g.category, g.items) for g in groups] == [
            ("Sauces", ["tomato sauce"]),
            ("Cheeses", ["mozzarella"]),
        ]

    def test_custom_keyword_table(self):
        classifier = ModifierClassifier(
            keyword_table=[CategoryKeywords(ModifierCategory.MEATS, ("tofu",))]
        )
        assert classifier.classify("tofu, bacon") == {"Meats": ["tofu"]}
        assert classifier.category_order() == ["Meats"]

    def test_original_casing_is_kept(self):
        result = classify("Tomato Sauce, Buffalo Mozzarella AND Prosciutto Ham")
        assert result == {
            "Sauces": ["Tomato Sauce"],
            "Cheeses": ["Buffalo Mozzarella"],
            "Meats": ["Prosciutto Ham"],
        }

    def test_trailing_period_of_description_is_dropped(self):
        result = classify("ham, mushrooms and Olives.")
        assert result["Vegetables"] == ["mushrooms", "Olives"]

    def test_trailing_optional_marker_of_description_is_dropped(self):
        result = classify("Tomato Sauce, Bacon (Optional).")
        assert result == {"Sauces": ["Tomato Sauce"], "Meats": ["Bacon"]}
