from typing import Any, Dict, Iterable, List


def validation_details(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into field/message pairs"""
    return [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", []) if loc != "body"),
            "message": err.get("msg", "Invalid input"),
        }
        for err in errors
    ]
