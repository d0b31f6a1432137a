"""Tests for prompt construction."""

from pantry.prompts import build_expiration_prompt, build_inventory_prompt


def test_inventory_prompt_embeds_text():
    prompt = build_inventory_prompt("2 apples, frozen peas")
    assert 'Input text: "2 apples, frozen peas"' in prompt


def test_inventory_prompt_lists_schema():
    prompt = build_inventory_prompt("milk")
    for field in ("productName", "quantity", "quantityType", "locationName",
                  "expirationDate", "openedStatus"):
        assert field in prompt
    for qtype in ("units", "volume", "weight", "percentage"):
        assert f'"{qtype}"' in prompt


def test_inventory_prompt_has_examples():
    prompt = build_inventory_prompt("x")
    assert '"2 apples"' in prompt
    assert '"frozen peas" -> locationName: "freezer"' in prompt
    assert '"opened jar of pickles" -> openedStatus: true' in prompt


def test_inventory_prompt_json_template_braces():
    """Literal braces in the JSON template survive formatting."""
    prompt = build_inventory_prompt("x")
    assert '  {\n    "productName": "string",' in prompt


def test_inventory_prompt_deterministic():
    assert build_inventory_prompt("eggs") == build_inventory_prompt("eggs")


def test_inventory_prompt_keeps_braces_in_text():
    prompt = build_inventory_prompt("{weird} text")
    assert "{weird} text" in prompt


def test_expiration_prompt_with_category():
    prompt = build_expiration_prompt("milk", "fridge", True, category="dairy")
    assert "Product Name: milk" in prompt
    assert "Category: dairy" in prompt
    assert "Storage Location: fridge" in prompt
    assert "Opened Status: Opened" in prompt


def test_expiration_prompt_without_category():
    prompt = build_expiration_prompt("rice", "pantry", False)
    assert "Category:" not in prompt
    assert "Opened Status: Unopened" in prompt
    assert '"daysUntilExpiration"' in prompt
