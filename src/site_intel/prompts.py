"""Prompt templates for the model-backed extraction passes."""

from __future__ import annotations

IDENTITY_PROMPT = """\
You are analyzing a business website. From the content below extract:

1. Business name in Hebrew (if available)
2. Business name in English (if available)
3. Short description (80-100 characters)
4. Long description (up to 1000 characters)
5. Launch year (only if stated)
6. Address (if available)

Website content:
\"\"\"
{content}
\"\"\"

Guidelines:
- Prefer Hebrew for the name and descriptions when the site offers it
- If the name only appears in English, give a Hebrew rendering only if you can infer it
- Descriptions should be professional and marketing-friendly
- Do not guess the launch year
- Give the full address when one is found

Respond in JSON:
{{
  "name": "שם העסק",
  "nameEnglish": "Business Name",
  "shortDescription": "תיאור קצר עד 100 תווים",
  "description": "תיאור מפורט של מה שהעסק עושה ומציע",
  "launchYear": 2020,
  "address": "כתובת מלאה"
}}
Use null for anything not found."""

CATEGORY_PROMPT = """\
Categorize a business from its website content. Choose up to 3 categories \
from the list below, most relevant first.

Available categories (id: name - description):
{categories}

Website content:
\"\"\"
{content}
\"\"\"

Instructions:
- Choose at most 3 categories
- Prefer the most specific categories that fit the main business activity
- Answer with category ids only, exactly as listed

Respond in JSON:
{{"categories": ["category_id1", "category_id2", "category_id3"]}}"""

CONTACT_PROMPT = """\
Pick the business's main contact details from the content below:
1. Email address (a business address, not personal or placeholder)
2. Phone number (Israeli format preferred, e.g. 050-1234567)
3. WhatsApp number or wa.me link

Content:
\"\"\"
{content}
\"\"\"

Already detected emails: {emails}
Already detected phones: {phones}

Guidelines:
- Return one value per field: the best one, not a list
- Only return details clearly tied to this business
- WhatsApp may be a number (e.g. 972501234567) or a wa.me link

Respond in JSON:
{{"email": "info@business.co.il", "phone": "050-1234567", "whatsapp": "972501234567"}}
Use null for anything not found."""
