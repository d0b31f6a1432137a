"""Prompt templates for the extraction model."""

from __future__ import annotations

_INVENTORY_PROMPT = """\
You are a kitchen inventory assistant. Parse the following text input and \
extract all inventory items mentioned. For each item, extract as much \
information as possible.

Input text: "{text}"

For each item you identify, extract:
1. productName (required) - The name of the product/item
2. quantity (number, default: 1) - The quantity mentioned
3. quantityType (one of: "units", "volume", "weight", "percentage") - Infer from context:
   - "units" for discrete items (apples, cans, boxes)
   - "volume" for liquids (gallons, liters, cups, ml)
   - "weight" for items by mass (pounds, grams, kg)
   - "percentage" for partial containers
4. locationName (string) - Infer from context or use "pantry" as default:
   - Look for keywords: "frozen", "freezer" -> "freezer"
   - "fridge", "refrigerator" -> "fridge"
   - "pantry", "cabinet", "shelf" -> "pantry"
   - Default to "pantry" if unclear
5. expirationDate (optional, YYYY-MM-DD format) - Only include if explicitly mentioned
6. openedStatus (boolean, default: false) - Set to true if item is mentioned as "opened", "open", or similar

Use context clues:
- "2 apples" -> quantity: 2, quantityType: "units", productName: "apple"
- "1 gallon of milk" -> quantity: 1, quantityType: "volume", productName: "milk"
- "frozen peas" -> locationName: "freezer", productName: "peas"
- "opened jar of pickles" -> openedStatus: true, productName: "pickles"

Return ONLY a valid JSON array of items in this exact format:
[
  {{
    "productName": "string",
    "quantity": number,
    "quantityType": "units" | "volume" | "weight" | "percentage",
    "locationName": "string",
    "expirationDate": "YYYY-MM-DD" (optional),
    "openedStatus": boolean
  }}
]

If no items can be identified, return an empty array: []

Respond ONLY with valid JSON, no additional text or explanation."""

_EXPIRATION_PROMPT = """\
You are a food safety expert. Estimate the expiration date for a food item \
based on the following information:

Product Name: {product_name}
{category_line}Storage Location: {location_name}
Opened Status: {opened}

Please provide your estimate in the following JSON format:
{{
  "daysUntilExpiration": <number of days>,
  "confidenceLevel": "HIGH" | "MEDIUM" | "LOW"
}}

Consider:
- Product type and typical shelf life
- Storage location (pantry items last longer than fridge items, freezer items last longest)
- Opened items generally expire faster than unopened items
- Be conservative with estimates for safety

Respond ONLY with valid JSON, no additional text."""


def build_inventory_prompt(text: str) -> str:
    """Build the bulk-parse instruction for ``text``.

    The caller guarantees ``text`` is non-empty after trimming.
    """
    return _INVENTORY_PROMPT.format(text=text)


def build_expiration_prompt(
    product_name: str,
    location_name: str,
    opened_status: bool,
    category: str | None = None,
) -> str:
    category_line = f"Category: {category}\n" if category else ""
    return _EXPIRATION_PROMPT.format(
        product_name=product_name,
        category_line=category_line,
        location_name=location_name,
        opened="Opened" if opened_status else "Unopened",
    )
