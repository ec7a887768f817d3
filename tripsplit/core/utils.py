"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional


def display_name(
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    fallback: str = "Unknown user"
) -> str:
    """Build a participant's display name from whatever profile data exists."""
    first = (first_name or "").strip()
    last = (last_name or "").strip()
    if first and last:
        return f"{first} {last}"
    if first or last:
        return first or last
    if email and email.strip():
        return email.strip()
    return fallback


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
