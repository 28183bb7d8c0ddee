from app.models import ConsolidatedModifiers, ModifierOption
from app.services.csv_exporter import export_csv, export_csv_bytes


def test_only_selected_options_are_exported_with_hold_rows():
    modifiers = ConsolidatedModifiers(modifiers={
        "Meats": [
            ModifierOption(text="Bacon", selected=True),
            ModifierOption(text="Ham", selected=False),
        ]
    })
    assert export_csv(modifiers) == "Category,Item\nMeats,Bacon\nMeats,HOLD Bacon\n"


def test_rows_follow_consolidated_order():
    modifiers = ConsolidatedModifiers(modifiers={
        "Sauces": [ModifierOption(text="tomato sauce", selected=True)],
        "Meats": [
            ModifierOption(text="bacon", selected=True),
            ModifierOption(text="Ham", selected=True),
        ],
    })
    lines = export_csv(modifiers).splitlines()
    assert lines == [
        "Category,Item",
        "Sauces,tomato sauce",
        "Sauces,HOLD tomato sauce",
        "Meats,bacon",
        "Meats,HOLD bacon",
        "Meats,Ham",
        "Meats,HOLD Ham",
    ]


def test_nothing_selected_yields_header_only():
    modifiers = ConsolidatedModifiers(modifiers={"Meats": [ModifierOption(text="Ham")]})
    assert export_csv(modifiers) == "Category,Item\n"


def test_embedded_delimiters_are_written_verbatim():
    modifiers = ConsolidatedModifiers(modifiers={
        "Sauces": [ModifierOption(text="salt, pepper", selected=True)]
    })
    assert export_csv(modifiers) == "Category,Item\nSauces,salt, pepper\nSauces,HOLD salt, pepper\n"


def test_bytes_are_utf8():
    modifiers = ConsolidatedModifiers(modifiers={
        "Vegetables": [ModifierOption(text="jalapeño", selected=True)]
    })
    assert export_csv_bytes(modifiers).decode("utf-8").endswith("Vegetables,HOLD jalapeño\n")
