"""Prompt templates for workshop report extraction."""
from typing import Any, Dict
import json

from lib.workshop import WorkshopCategory


def build_extraction_prompt(raw_text: str, schema: Dict[str, Any]) -> str:
    """
    Build the prompt asking the model to structure a workshop report.

    Args:
        raw_text: Report text, meeting notes or agenda pasted by the user
        schema: JSON schema the reply must follow

    Returns:
        Formatted prompt string
    """
    categories = ", ".join(category.value for category in WorkshopCategory)

    prompt = f"""Extract workshop details from the following report and structure it according to the schema.

## Fields to capture:
- Title, Theme, Date (YYYY-MM-DD), Venue, Frequency (Annual, Bi-Annual or One-time)
- Category (choose from: {categories})
- Lead (the person who organized or conducted the workshop)
- Agenda (list of {{particulars, startTime, endTime, speaker, remarks, isActivity}})
- Speakers (list of {{name, designation, takeaways}})
- Activities, Metrics, Feedback, Action Plan
- Budget (allocated amount and list of incurred expenses with {{description, amount}})

## Output Schema:
```json
{json.dumps(schema, indent=2)}
```

## Rules:
- Reply with a single JSON object and nothing else.
- Leave out fields the report does not mention.
- Numbers must be plain numbers without currency symbols.

## REPORT TEXT:
{raw_text}
"""
    return prompt
